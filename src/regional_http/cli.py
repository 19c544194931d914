"""
cli.py — Click CLI entrypoint.

Usage:
    regional-http resolve orders --status passive
    regional-http request /api/runs --domain orders --status active -q state=open
    regional-http request /api/runs --method POST --data '{"name": "nightly"}'
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click

from regional_http.config import settings
from regional_http.constants import ACTIVE_STATUSES
from regional_http.errors import HttpStatusError, RegionalHttpError
from regional_http.models import RequestOptions
from regional_http.service import build_http_service
from regional_http.utils.logging import configure_logging, get_logger

log = get_logger(__name__)


def _parse_query(pairs: tuple[str, ...]) -> dict[str, str]:
    query: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--query")
        query[key] = value
    return query


def _fail(exc: RegionalHttpError) -> None:
    click.echo(f"Error: {exc}", err=True)
    if isinstance(exc, HttpStatusError) and exc.has_body:
        click.echo(json.dumps(exc.body, indent=2), err=True)
    sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Log level",
)
def main(log_level: str) -> None:
    """Cross-region aware HTTP client."""
    configure_logging(log_level=log_level)


@main.command()
@click.argument("domain")
@click.option("--status", "active_status", type=click.Choice(ACTIVE_STATUSES), default="active")
def resolve(domain: str, active_status: str) -> None:
    """Print the regional origin for DOMAIN (empty line when same-origin)."""

    async def _run() -> str:
        async with build_http_service() as http:
            return await http.resolve_origin(domain, active_status)  # type: ignore[arg-type]

    try:
        origin = asyncio.run(_run())
    except RegionalHttpError as exc:
        _fail(exc)
    else:
        click.echo(origin)


@main.command()
@click.argument("path")
@click.option("--method", default="GET", type=click.Choice(["GET", "POST", "PUT", "DELETE"], case_sensitive=False))
@click.option("--domain", default=None, help="Domain whose clusters route the request")
@click.option("--status", "active_status", type=click.Choice(ACTIVE_STATUSES), default=None)
@click.option("--query", "-q", "query_pairs", multiple=True, help="Query parameter as key=value")
@click.option("--data", default=None, help="JSON request body")
def request(
    path: str,
    method: str,
    domain: str | None,
    active_status: str | None,
    query_pairs: tuple[str, ...],
    data: str | None,
) -> None:
    """Send a request to PATH and print the JSON payload."""
    if active_status and not domain:
        raise click.UsageError("--status requires --domain")
    try:
        body: Any = json.loads(data) if data is not None else None
    except json.JSONDecodeError as exc:
        raise click.BadParameter(str(exc), param_hint="--data") from exc

    options = RequestOptions(
        method=method.upper(),
        query=_parse_query(query_pairs),
        body=body,
        domain=domain,
        active_status=active_status,  # type: ignore[arg-type]
    )

    async def _run() -> Any:
        async with build_http_service() as http:
            return await http.request(path, options)

    log.debug("cli_request", path=path, method=options.method, domain=domain)
    try:
        payload = asyncio.run(_run())
    except RegionalHttpError as exc:
        _fail(exc)
    else:
        click.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
