"""
resolver.py — Domain + active status -> regional origin URL.

    config  = cached DomainConfig for the domain
    cluster = config.active_cluster if status == "active" else config.passive_cluster
    origin  = feature flag crossRegion.clusterToRegionalDomainUrl(cluster=cluster)

An absent flag value resolves to "" — the request stays same-origin.
"""

from __future__ import annotations

from regional_http.constants import CROSS_REGION_FLAG, ActiveStatus
from regional_http.domains import DomainConfigFetcher
from regional_http.feature_flags import FeatureFlagFetcher
from regional_http.utils.logging import get_logger

log = get_logger(__name__)


class RegionalOriginResolver:
    def __init__(
        self,
        domains: DomainConfigFetcher,
        flags: FeatureFlagFetcher,
        *,
        flag_name: str = CROSS_REGION_FLAG,
    ) -> None:
        self._domains = domains
        self._flags = flags
        self._flag_name = flag_name

    async def resolve_origin(self, domain: str, active_status: ActiveStatus) -> str:
        config = await self._domains.get_domain_config(domain)
        cluster = config.cluster_for(active_status)

        value = await self._flags.get_feature_flag(self._flag_name, {"cluster": cluster})
        origin = str(value) if value else ""

        log.info(
            "origin_resolved",
            domain=domain,
            active_status=active_status,
            cluster=cluster,
            origin=origin or None,
        )
        return origin
