# shopdash/services/health_checker.py

"""Remote API connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from shopdash.api.client import ApiClient
from shopdash.config.settings import Settings

logger = logging.getLogger("shopdash.health")

_HEALTH_TIMEOUT = 10  # seconds per probe

_PROBE_PATHS = ("/products", "/cart")


@dataclass
class HealthResult:
    """Result of a single endpoint probe."""

    endpoint: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_endpoint(
    client: ApiClient, path: str, headers: dict[str, str],
) -> HealthResult:
    """Probe one API endpoint for reachability.

    Any response below HTTP 500 counts as reachable; an auth rejection
    still proves the service is up.
    """
    url = client.url_for(path)
    start = time.monotonic()
    try:
        resp = client.session.get(
            url,
            headers={**Settings.DEFAULT_HEADERS, **headers},
            timeout=_HEALTH_TIMEOUT,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code >= 500:
            return HealthResult(
                endpoint=path,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > Settings.SLOW_RESPONSE_MS:
            return HealthResult(
                endpoint=path,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        note = (
            f"HTTP {resp.status_code}"
            if resp.status_code != 200
            else ""
        )
        return HealthResult(
            endpoint=path,
            status="ok",
            latency_ms=elapsed_ms,
            message=note,
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            endpoint=path,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


class HealthChecker:
    """Runs concurrent probes against the remote API."""

    def __init__(
        self,
        client: ApiClient | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.client = client or ApiClient()
        self.headers = headers or {}

    async def check_all(self) -> list[HealthResult]:
        """Probe every endpoint concurrently."""
        tasks = [
            asyncio.to_thread(
                probe_endpoint, self.client, path, self.headers
            )
            for path in _PROBE_PATHS
        ]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.endpoint,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
