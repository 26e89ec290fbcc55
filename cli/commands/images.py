"""Image usage counter for the static frontend files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from site_auditor.config import settings
from site_auditor.extractor.images import count_images, read_text

images_app = typer.Typer(help="Count images referenced by static HTML/CSS.")

# Background image whose uses are counted in the stylesheet.
DEFAULT_TARGET_URL = "https://your-image-url.com/image.jpg"


@images_app.command("count")
def images_count(
    html: Optional[Path] = typer.Option(
        None, "--html", help="HTML file (default: <public_dir>/index.html)."
    ),
    css: Optional[Path] = typer.Option(
        None, "--css", help="CSS file (default: <public_dir>/style.css)."
    ),
    target: str = typer.Option(
        DEFAULT_TARGET_URL,
        "--target",
        help="Only count background-image declarations with this URL ('' = all).",
    ),
) -> None:
    """Print <img> images, matching CSS background images, and their total."""
    html_path = html or settings.public_dir / "index.html"
    css_path = css or settings.public_dir / "style.css"

    counts = count_images(read_text(html_path), read_text(css_path), target or None)

    label = f"with URL '{target}'" if target else "(any URL)"
    typer.echo(f'Images in <img> tags (src/data-src/loading="lazy"): {counts.img_tags}')
    typer.echo(f"Images in CSS background-image {label}: {counts.background_images}")
    typer.echo(f"Total images used: {counts.total}")
