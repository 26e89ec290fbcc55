"""Audit orchestration — one ordered pipeline per target URL.

Steps run strictly in sequence; each network step degrades to a failure
result so an unreachable host still yields a complete report.

    1. validate the URL and derive the hostname
    2. DNS lookup
    3. TLS inspection
    4. timed fetch of the page
    5. header checks + metadata extraction (or a "could not fetch" issue)
    6. robots.txt
    7. sitemap discovery
    8. findings synthesis
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urljoin, urlsplit

import httpx

from site_auditor.audit.findings import synthesize_findings
from site_auditor.audit.headers import evaluate_headers
from site_auditor.audit.models import AuditReport, AuditSteps, HeaderCheck, RobotsInfo
from site_auditor.audit.sitemap import discover_sitemaps
from site_auditor.errors import InvalidTargetError
from site_auditor.extractor.meta import extract_meta
from site_auditor.probes.dns import dns_lookup
from site_auditor.probes.fetcher import new_client, timed_fetch
from site_auditor.probes.models import FetchResult
from site_auditor.probes.tls import tls_inspect

log = logging.getLogger(__name__)

UNFETCHED_ISSUE = "Could not fetch page"


def validate_target(url: Optional[str]) -> str:
    """Return the hostname of *url*, or raise :class:`InvalidTargetError`."""
    if not url or not url.strip():
        raise InvalidTargetError("Missing url in body")
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
        _ = parts.port  # out-of-range or non-numeric ports raise here
    except ValueError as exc:
        raise InvalidTargetError("Invalid URL") from exc
    if parts.scheme not in ("http", "https") or not hostname:
        raise InvalidTargetError("Invalid URL")
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in hostname):
        raise InvalidTargetError("Invalid URL")
    return hostname


def _robots_info(url: str, result: FetchResult) -> RobotsInfo:
    if not result.ok:
        return RobotsInfo(url=url, present=False, error=result.error)
    if result.status >= 400:
        return RobotsInfo(
            url=url, present=False, status=result.status, error=f"HTTP {result.status}"
        )
    return RobotsInfo(url=url, present=True, status=result.status, body=result.body)


async def run_audit(url: str, client: Optional[httpx.AsyncClient] = None) -> AuditReport:
    """Audit *url* and return the full :class:`AuditReport`.

    Raises:
        InvalidTargetError: before any network call, if *url* is unusable.
    """
    hostname = validate_target(url)
    url = url.strip()
    log.info("Auditing %s", url)
    generated_at = datetime.now(timezone.utc).isoformat()
    steps = AuditSteps()

    steps.dns = await dns_lookup(hostname)
    steps.tls = await tls_inspect(hostname)

    owns_client = client is None
    http = client if client is not None else new_client()
    try:
        page = await timed_fetch(url, client=http)
        steps.fetch = page
        if page.ok:
            steps.header_security = evaluate_headers(page.headers)
            steps.meta = extract_meta(page.body)
        else:
            steps.header_security = HeaderCheck(headers={}, issues=[UNFETCHED_ISSUE])

        robots_url = urljoin(url, "/robots.txt")
        steps.robots = _robots_info(robots_url, await timed_fetch(robots_url, client=http))

        sitemap_url = urljoin(url, "/sitemap.xml")
        sitemap_probe = await timed_fetch(sitemap_url, client=http)
    finally:
        if owns_client:
            await http.aclose()

    steps.sitemap = discover_sitemaps(
        steps.robots,
        sitemap_probe,
        sitemap_url,
        html_link=steps.meta.sitemap_link if steps.meta else None,
    )

    findings = synthesize_findings(steps)
    log.info(
        "Audit of %s finished: %s",
        url,
        ", ".join(f"{f.category.value}={f.severity.value}" for f in findings),
    )
    return AuditReport(
        target=url, generated_at=generated_at, steps=steps, findings=findings
    )
