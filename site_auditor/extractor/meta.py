"""SEO and resource metadata extraction from raw HTML.

This is deliberately a set of regular-expression scans, not a parser:
results are best-effort signals, and a missing field only means the
pattern did not match.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

SAMPLE_SIZE = 5

_TITLE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_DESCRIPTION_NAME_FIRST = re.compile(
    r"""<meta[^>]+name=["']description["'][^>]*content=["']([^"']+)["'][^>]*>""",
    re.IGNORECASE,
)
_DESCRIPTION_CONTENT_FIRST = re.compile(
    r"""<meta[^>]+content=["']([^"']+)["'][^>]*name=["']description["'][^>]*>""",
    re.IGNORECASE,
)
_CANONICAL = re.compile(
    r"""<link[^>]+rel=["']canonical["'][^>]*href=["']([^"']+)["'][^>]*>""",
    re.IGNORECASE,
)
_SITEMAP_LINK = re.compile(
    r"""<link[^>]+rel=["']sitemap["'][^>]*href=["']([^"']+)["'][^>]*>""",
    re.IGNORECASE,
)
_JSON_LD = re.compile(
    r"""<script[^>]*type=["']application/ld\+json["'][^>]*>""", re.IGNORECASE
)
_IMG_SRC = re.compile(r"""<img[^>]+src=["']([^"']+)["']""", re.IGNORECASE)
_SCRIPT_SRC = re.compile(r"""<script[^>]+src=["']([^"']+)["']""", re.IGNORECASE)
_LINK_HREF = re.compile(r"""<link[^>]+href=["']([^"']+)["']""", re.IGNORECASE)
_IMG_WITHOUT_ALT = re.compile(r"<img\b(?![^>]*\balt=)[^>]*>", re.IGNORECASE)


@dataclass(frozen=True)
class ResourceCounts:
    """Totals of referenced images, scripts and links, plus the first few of each."""

    images: int = 0
    scripts: int = 0
    links: int = 0
    image_sample: List[str] = field(default_factory=list)
    script_sample: List[str] = field(default_factory=list)
    link_sample: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExtractedMeta:
    title: Optional[str] = None
    description: Optional[str] = None
    canonical: Optional[str] = None
    sitemap_link: Optional[str] = None
    has_json_ld: bool = False
    resources: ResourceCounts = field(default_factory=ResourceCounts)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _first_group(pattern: re.Pattern[str], html: str) -> Optional[str]:
    match = pattern.search(html)
    return match.group(1) if match else None


def _extract_description(html: str) -> Optional[str]:
    """Match ``name`` before ``content`` first, then the reverse order."""
    value = _first_group(_DESCRIPTION_NAME_FIRST, html)
    if value is None:
        value = _first_group(_DESCRIPTION_CONTENT_FIRST, html)
    return value.strip() if value is not None else None


def _extract_resources(html: str) -> ResourceCounts:
    images = _IMG_SRC.findall(html)
    scripts = _SCRIPT_SRC.findall(html)
    links = _LINK_HREF.findall(html)
    return ResourceCounts(
        images=len(images),
        scripts=len(scripts),
        links=len(links),
        image_sample=images[:SAMPLE_SIZE],
        script_sample=scripts[:SAMPLE_SIZE],
        link_sample=links[:SAMPLE_SIZE],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_meta(html: str) -> ExtractedMeta:
    """Scan *html* for title, description, canonical, sitemap link, JSON-LD
    and resource references.  Pure and idempotent."""
    title = _first_group(_TITLE, html)
    return ExtractedMeta(
        title=title.strip() if title is not None else None,
        description=_extract_description(html),
        canonical=_first_group(_CANONICAL, html),
        sitemap_link=_first_group(_SITEMAP_LINK, html),
        has_json_ld=bool(_JSON_LD.search(html)),
        resources=_extract_resources(html),
    )


def count_images_missing_alt(html: str) -> int:
    """Count ``<img>`` tags that carry no ``alt`` attribute at all."""
    return len(_IMG_WITHOUT_ALT.findall(html))
