"""Plain-text rendering of audit reports for the CLI."""

from __future__ import annotations

from typing import List

from site_auditor.audit.models import AuditReport, Finding, Severity


def _get_icon(severity: Severity) -> str:
    icons = {
        Severity.HIGH: "🔴",
        Severity.MEDIUM: "🟠",
        Severity.LOW: "🟢",
    }
    return icons.get(severity, "⚪")


def _render_finding(finding: Finding) -> List[str]:
    lines = [
        f"{_get_icon(finding.severity)} {finding.category.value}  [{finding.severity.value}]",
        f"    {finding.summary}",
    ]
    for issue in finding.issues:
        lines.append(f"    ├── {issue}")
    if finding.remediation:
        lines.append("    Remediation:")
        for step in finding.remediation:
            lines.append(f"      • {step}")
    return lines


def render_probe_line(name: str, ok: bool, detail: str) -> str:
    mark = "✓" if ok else "✗"
    return f"  {mark} {name:<8} {detail}"


def render_report(report: AuditReport) -> str:
    """Render *report* as a human-readable block of text.

    Args:
        report: A completed audit report.

    Returns:
        Multi-line string: probe summary first, then one block per finding.
    """
    steps = report.steps
    lines = [f"Audit of {report.target}", f"Generated {report.generated_at}", ""]

    if steps.dns is not None:
        if steps.dns.ok:
            detail = ", ".join(a["address"] for a in steps.dns.addresses) or "(no addresses)"
        else:
            detail = steps.dns.error
        lines.append(render_probe_line("DNS", steps.dns.ok, detail))

    if steps.tls is not None:
        if steps.tls.ok:
            cipher = steps.tls.cipher["name"] if steps.tls.cipher else "?"
            detail = f"{steps.tls.protocol} {cipher}"
            if not steps.tls.cert_verified:
                detail += f" (certificate not verified: {steps.tls.cert_error})"
        else:
            detail = steps.tls.error
        lines.append(render_probe_line("TLS", steps.tls.ok, detail))

    if steps.fetch is not None:
        if steps.fetch.ok:
            detail = (
                f"HTTP {steps.fetch.status}  TTFB {round(steps.fetch.ttfb_ms)}ms  "
                f"download {round(steps.fetch.download_ms)}ms"
            )
        else:
            detail = steps.fetch.error
        lines.append(render_probe_line("Fetch", steps.fetch.ok, detail))

    if steps.robots is not None:
        detail = steps.robots.url if steps.robots.present else (steps.robots.error or "absent")
        lines.append(render_probe_line("robots", steps.robots.present, detail))

    if steps.sitemap is not None:
        detail = ", ".join(steps.sitemap.locations) or "not found"
        lines.append(render_probe_line("sitemap", steps.sitemap.found, detail))

    lines.append("")
    for finding in report.findings:
        lines.extend(_render_finding(finding))
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
