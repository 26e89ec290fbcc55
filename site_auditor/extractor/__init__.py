"""Content extractor — regex scans over HTML and CSS text."""

from site_auditor.extractor.images import (
    ImageCount,
    count_background_images,
    count_images,
    count_images_in_html,
)
from site_auditor.extractor.meta import (
    ExtractedMeta,
    ResourceCounts,
    count_images_missing_alt,
    extract_meta,
)

__all__ = [
    "extract_meta",
    "count_images_missing_alt",
    "ExtractedMeta",
    "ResourceCounts",
    "count_images",
    "count_images_in_html",
    "count_background_images",
    "ImageCount",
]
