"""
models.py — Data shapes exchanged between the fetchers, resolver and dispatcher.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from regional_http.constants import (
    DEFAULT_CREDENTIALS,
    DEFAULT_MODE,
    ActiveStatus,
    CorsMode,
    CredentialsMode,
)


class DomainConfig(BaseModel):
    """
    Cluster topology for one domain, as served by ``GET /api/domains/{domain}``.

    Accepts the flat shape ``{"activeCluster": ..., "passiveCluster": ...}``
    and the replication shape::

        {"replicationConfiguration": {
            "activeClusterName": "a1",
            "clusters": [{"clusterName": "a1"}, {"clusterName": "p1"}]}}

    in which the passive cluster is the first listed cluster that is not the
    active one. All other fields are kept as-is.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    active_cluster: str = Field(default="", alias="activeCluster")
    passive_cluster: str = Field(default="", alias="passiveCluster")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "DomainConfig":
        data = dict(payload or {})
        active, passive = clusters_from_payload(data)
        data["activeCluster"] = active
        data["passiveCluster"] = passive
        return cls.model_validate(data)

    def cluster_for(self, active_status: ActiveStatus | str) -> str:
        return self.active_cluster if active_status == "active" else self.passive_cluster


def _cluster_name(value: Any) -> str:
    return "" if value is None else str(value)


def clusters_from_payload(payload: Mapping[str, Any]) -> tuple[str, str]:
    """Return ``(active_cluster, passive_cluster)`` for a raw domain payload."""
    active = payload.get("activeCluster")
    passive = payload.get("passiveCluster")
    if active is not None or passive is not None:
        return _cluster_name(active), _cluster_name(passive)

    replication = payload.get("replicationConfiguration")
    if not isinstance(replication, Mapping):
        return "", ""
    active = _cluster_name(replication.get("activeClusterName"))
    clusters = replication.get("clusters")
    if not isinstance(clusters, list):
        clusters = []
    names = [
        _cluster_name(c.get("clusterName"))
        for c in clusters
        if isinstance(c, Mapping) and c.get("clusterName")
    ]
    passive = next((name for name in names if name != active), "")
    return active, passive


@dataclass(frozen=True)
class RequestOptions:
    """Per-call request options. Never persisted."""

    method: str = "GET"
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    active_status: ActiveStatus | None = None
    domain: str | None = None
    credentials: CredentialsMode = DEFAULT_CREDENTIALS
    mode: CorsMode = DEFAULT_MODE
    # JSON text produced by the dispatcher from `body`
    content: str | None = None
