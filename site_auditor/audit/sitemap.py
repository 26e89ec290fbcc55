"""Sitemap discovery from robots.txt, the well-known path and HTML links."""

from __future__ import annotations

import re
from typing import List, Optional

from site_auditor.audit.models import RobotsInfo, SitemapInfo
from site_auditor.probes.models import FetchResult

# Bodies this short are error stubs, not sitemaps.
MIN_SITEMAP_BODY = 20

_SITEMAP_DIRECTIVE = re.compile(r"^\s*Sitemap:\s*(.+)$", re.IGNORECASE | re.MULTILINE)


def find_sitemap_directives(robots_body: str) -> List[str]:
    """Return every ``Sitemap:`` URL declared in a robots.txt body."""
    return [m.group(1).strip() for m in _SITEMAP_DIRECTIVE.finditer(robots_body)]


def discover_sitemaps(
    robots: Optional[RobotsInfo],
    well_known: FetchResult,
    well_known_url: str,
    html_link: Optional[str] = None,
) -> SitemapInfo:
    """Merge the three sitemap sources into one :class:`SitemapInfo`.

    Sources are additive, in this order: robots.txt directives, the
    ``/sitemap.xml`` probe, and a ``<link rel="sitemap">`` from the page.
    """
    locations: List[str] = []

    if robots is not None and robots.present and robots.body:
        locations.extend(find_sitemap_directives(robots.body))

    if (
        well_known.ok
        and well_known.status < 400
        and len(well_known.body) > MIN_SITEMAP_BODY
    ):
        locations.append(well_known_url)

    if html_link:
        locations.append(html_link)

    return SitemapInfo(found=bool(locations), locations=locations)
