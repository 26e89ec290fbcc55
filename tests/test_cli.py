"""Tests for the site-audit CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

from setuptools import find_packages
from typer.testing import CliRunner

from cli.commands.images import images_app
from cli.main import app
from cli.rendering import render_report
from site_auditor.audit.findings import synthesize_findings
from site_auditor.audit.models import AuditReport, AuditSteps
from site_auditor.probes.models import DnsAnswer, ProbeFailure, TlsHandshake

runner = CliRunner()


def _report() -> AuditReport:
    steps = AuditSteps(
        dns=DnsAnswer(addresses=[{"address": "192.0.2.1", "family": 4}]),
        tls=TlsHandshake(
            protocol="TLSv1.2",
            cipher={"name": "ECDHE-RSA-AES128-GCM-SHA256", "version": "TLSv1.2", "bits": 128},
            cert_verified=False,
            cert_error="certificate has expired",
        ),
        fetch=ProbeFailure("fetch timeout"),
    )
    return AuditReport(
        target="https://example.test/",
        generated_at="2026-01-01T00:00:00+00:00",
        steps=steps,
        findings=synthesize_findings(steps),
    )


# ---------------------------------------------------------------------------
# images count
# ---------------------------------------------------------------------------

def test_images_count(tmp_path: Path) -> None:
    html = tmp_path / "index.html"
    css = tmp_path / "style.css"
    html.write_text('<img src="/a.png"><img src="/b.png" loading="lazy">', encoding="utf-8")
    css.write_text(
        ".a{background-image:url(https://your-image-url.com/image.jpg)}"
        ".b{background-image:url(/other.png)}",
        encoding="utf-8",
    )

    result = runner.invoke(images_app, ["--html", str(html), "--css", str(css)])

    assert result.exit_code == 0, result.output
    assert 'Images in <img> tags (src/data-src/loading="lazy"): 2' in result.output
    assert "https://your-image-url.com/image.jpg': 1" in result.output
    assert "Total images used: 3" in result.output


def test_images_count_missing_files_are_zero(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("cli.commands.images.settings.public_dir", tmp_path)
    result = runner.invoke(images_app, ["--target", ""])
    assert result.exit_code == 0, result.output
    assert "Total images used: 0" in result.output


# ---------------------------------------------------------------------------
# audit / explain
# ---------------------------------------------------------------------------

def test_audit_renders_report() -> None:
    with patch("cli.main.run_audit", AsyncMock(return_value=_report())):
        result = runner.invoke(app, ["audit", "--url", "https://example.test/"])

    assert result.exit_code == 0, result.output
    assert "Audit of https://example.test/" in result.output
    assert "certificate not verified" in result.output
    assert "DNS & Infrastructure" in result.output


def test_audit_json_output() -> None:
    with patch("cli.main.run_audit", AsyncMock(return_value=_report())):
        result = runner.invoke(app, ["audit", "--url", "https://example.test/", "--json"])

    assert result.exit_code == 0, result.output
    assert '"target": "https://example.test/"' in result.output


def test_audit_invalid_url_exits_1() -> None:
    result = runner.invoke(app, ["audit", "--url", "not a url"])
    assert result.exit_code == 1


def test_explain_without_key_exits_1(monkeypatch) -> None:
    monkeypatch.setattr("cli.main.settings.gemini_api_key", "")
    with patch("cli.main.run_audit", AsyncMock(return_value=_report())):
        result = runner.invoke(app, ["explain", "--url", "https://example.test/"])
    assert result.exit_code == 1


def test_explain_prints_reply(monkeypatch) -> None:
    monkeypatch.setattr("cli.main.settings.gemini_api_key", "k")
    with (
        patch("cli.main.run_audit", AsyncMock(return_value=_report())),
        patch(
            "cli.main.ExplanationBridge.explain", AsyncMock(return_value="All good.")
        ) as mock_explain,
    ):
        result = runner.invoke(
            app, ["explain", "--url", "https://example.test/", "--question", "Why?"]
        )

    assert result.exit_code == 0, result.output
    assert "All good." in result.output
    _, history = mock_explain.await_args.args
    assert history[0].text == "Why?"


def test_render_report_lists_failed_fetch() -> None:
    text = render_report(_report())
    assert "✗ Fetch    fetch timeout" in text
    assert "Could not fetch page to run automated accessibility hints" in text


def test_cli_is_discovered_as_a_package() -> None:
    # Mirrors [tool.setuptools.packages.find] so the console script resolves.
    root = Path(__file__).resolve().parent.parent
    packages = find_packages(where=str(root), include=["site_auditor*", "cli*"])
    assert {"cli", "cli.commands", "site_auditor"} <= set(packages)
