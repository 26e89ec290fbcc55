"""Timed HTTP fetch — a single GET with TTFB and download measurements."""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from site_auditor.config import settings
from site_auditor.probes.models import FetchedPage, FetchResult, ProbeFailure

log = logging.getLogger(__name__)


def default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def new_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    """Return an ``AsyncClient`` configured the way every audit fetch expects.

    Redirects are not followed: a 3xx is reported as-is.
    """
    return httpx.AsyncClient(
        headers=default_headers(),
        timeout=settings.fetch_timeout if timeout is None else timeout,
        follow_redirects=False,
    )


async def _fetch(client: httpx.AsyncClient, url: str) -> FetchedPage:
    start = time.perf_counter()
    async with client.stream("GET", url) as response:
        ttfb = (time.perf_counter() - start) * 1000
        await response.aread()
        download = (time.perf_counter() - start) * 1000
        return FetchedPage(
            url=url,
            status=response.status_code,
            headers={key: value for key, value in response.headers.items()},
            body=response.text,
            ttfb_ms=ttfb,
            download_ms=download,
        )


async def timed_fetch(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> FetchResult:
    """GET *url* and return a :class:`FetchedPage` or a :class:`ProbeFailure`.

    Any HTTP status counts as a completed fetch; only transport errors and
    timeouts (default ``settings.fetch_timeout``) are failures.  The whole
    body is buffered.  Pass *client* to reuse a connection pool across the
    fetches of one audit.
    """
    try:
        if client is not None:
            return await _fetch(client, url)
        async with new_client(timeout) as own_client:
            return await _fetch(own_client, url)
    except httpx.TimeoutException as exc:
        log.warning("Fetch of %s timed out: %s", url, exc)
        return ProbeFailure(error="fetch timeout")
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        log.warning("Fetch of %s failed: %s", url, exc)
        return ProbeFailure(error=str(exc) or type(exc).__name__)
