"""Image usage counter for static HTML/CSS files.

Counts ``<img>`` elements that reference an image (``src``/``data-src``) or
are marked ``loading="lazy"``, and CSS ``background-image: url(...)``
declarations, optionally restricted to one target URL.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_IMG_WITH_SOURCE = re.compile(
    r"""<img\s+[^>]*(src|data-src)\s*=\s*['"][^'"]+['"][^>]*>""", re.IGNORECASE
)
_IMG_LAZY = re.compile(r"""<img\s+[^>]*loading\s*=\s*['"]lazy['"][^>]*>""", re.IGNORECASE)
_BACKGROUND_IMAGE = re.compile(
    r"""background-image\s*:\s*url\s*\(\s*['"]?([^'")]+)['"]?\s*\)""", re.IGNORECASE
)


@dataclass(frozen=True)
class ImageCount:
    img_tags: int
    background_images: int

    @property
    def total(self) -> int:
        return self.img_tags + self.background_images


def count_images_in_html(html: str) -> int:
    """Count ``<img>`` elements matched by either pattern, each element once.

    Elements are identified by their start offset, so a tag matching both
    the source and the lazy-loading pattern is counted a single time while
    two identical tags at different positions still count twice.
    """
    starts = {m.start() for m in _IMG_WITH_SOURCE.finditer(html)}
    starts.update(m.start() for m in _IMG_LAZY.finditer(html))
    return len(starts)


def count_background_images(css: str, target_url: Optional[str] = None) -> int:
    """Count ``background-image: url(...)`` declarations.

    With *target_url* only declarations whose URL equals it exactly are
    counted; without it every declaration counts.
    """
    return sum(
        1
        for m in _BACKGROUND_IMAGE.finditer(css)
        if not target_url or m.group(1) == target_url
    )


def count_images(html: str, css: str, target_url: Optional[str] = None) -> ImageCount:
    return ImageCount(
        img_tags=count_images_in_html(html),
        background_images=count_background_images(css, target_url),
    )


def read_text(path: Path) -> str:
    """Return the file's text, or ``""`` when it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""
