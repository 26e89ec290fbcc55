"""Site auditor CLI — entry-point for local audits.

Usage:
    python cli/main.py --help

Commands:
    audit         → run a live audit and print the report
    explain       → run a live audit and ask Gemini to explain it
    images count  → count images used by the static frontend files
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from site_auditor.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
import logging
from typing import Optional

import typer

from cli.commands.images import images_app
from cli.rendering import render_report
from site_auditor.audit.orchestrator import run_audit
from site_auditor.config import settings
from site_auditor.errors import AuditorError
from site_auditor.explain.bridge import ConversationTurn, ExplanationBridge

app = typer.Typer(
    name="site-audit",
    help="Local Site Auditor CLI.",
    no_args_is_help=True,
)
app.add_typer(images_app, name="images")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log probe activity."),
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level)


@app.command("audit")
def audit(
    url: str = typer.Option(..., help="URL to audit."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON report."),
) -> None:
    """Run DNS, TLS, fetch, header, robots and sitemap checks against a URL."""
    try:
        report = asyncio.run(run_audit(url))
    except AuditorError as exc:
        typer.echo(f"[audit] {exc.message}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        typer.echo(render_report(report))


@app.command("explain")
def explain(
    url: str = typer.Option(..., help="URL to audit and explain."),
    question: Optional[str] = typer.Option(
        None, help="Optional first question to ask about the report."
    ),
) -> None:
    """Audit a URL, then print Gemini's explanation of the report."""
    history = [ConversationTurn(role="user", text=question)] if question else []
    bridge = ExplanationBridge.from_settings(settings)

    async def _run() -> str:
        report = await run_audit(url)
        typer.echo(f"[explain] Audit complete — asking {bridge.model} …")
        return await bridge.explain(report.to_dict(), history)

    try:
        explanation = asyncio.run(_run())
    except AuditorError as exc:
        typer.echo(f"[explain] {exc.message}", err=True)
        if exc.details is not None:
            typer.echo(json.dumps(exc.details, indent=2, default=str), err=True)
        raise typer.Exit(code=1)

    typer.echo(explanation)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
