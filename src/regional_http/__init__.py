"""
regional_http — cross-region aware HTTP access layer.

Architecture:
  cache.py          — async TTL cache with in-flight call deduplication
  transport.py      — injectable request primitive (httpx-backed by default)
  responses.py      — Success / Failure classification of raw responses
  domains.py        — domain topology lookups (active / passive cluster)
  feature_flags.py  — remote feature flag lookups
  resolver.py       — domain + active status -> regional origin URL
  dispatcher.py     — URL assembly, credentials / CORS policy, dispatch
  service.py        — HttpService facade wiring the pieces together
  utils/            — structlog configuration, query string helpers

Quick start:
    import asyncio
    from regional_http.service import build_http_service

    async def main():
        async with build_http_service() as http:
            runs = await http.get("/api/runs", active_status="passive", domain="orders")

    asyncio.run(main())

CLI:
    regional-http resolve orders --status active
    regional-http request /api/runs --domain orders --status passive
"""

__version__ = "0.1.0"
