"""Turn raw audit steps into the five categorised findings.

Pure and deterministic: no network access, and remediation text is fixed
per category and branch.
"""

from __future__ import annotations

from typing import List

from site_auditor.audit.models import AuditSteps, Category, Finding, Severity
from site_auditor.extractor.meta import ExtractedMeta, count_images_missing_alt

# Flat penalty when the page could not be fetched at all.
UNFETCHED_PENALTY = 30

_SECURITY_REMEDIATION = (
    "Add a strict Content-Security-Policy tailored to the site's inline scripts and resources.",
    "Set X-Frame-Options or use CSP frame-ancestors to prevent clickjacking.",
    "Enable HSTS: set Strict-Transport-Security with long max-age and includeSubDomains.",
    "Set X-Content-Type-Options: nosniff and a strong Referrer-Policy.",
)
_SECURITY_MAINTENANCE = ("Maintain headers, consider CSP report-uri if desired",)

_PERFORMANCE_REMEDIATION = (
    "Compress images and serve modern formats (WebP/AVIF).",
    "Enable Brotli/gzip and set long cache headers for static assets.",
    "Defer non-critical JS and split bundles; use lazy-loading for offscreen images.",
)

_SEO_REMEDIATION = (
    "Add sitemap.xml and reference it from robots.txt and Search Console.",
    "Ensure each page has a unique title and meta description.",
    "Add structured data (JSON-LD) for core entities (Organization, Website, BreadcrumbList).",
)

_ACCESSIBILITY_REMEDIATION = (
    "Ensure all meaningful images have alt text, use semantic HTML landmarks and ARIA where required.",
    "Check color contrast and keyboard navigation.",
)

_INFRASTRUCTURE_REMEDIATION = (
    "Ensure authoritative nameservers are responsive and that DNS TTLs are appropriate.",
    "Use a CDN for global performance improvements and DDoS protection if needed.",
    "Verify TLS uses modern protocols and ciphers (TLS1.2+/1.3) and enable OCSP stapling.",
)


# ---------------------------------------------------------------------------
# Per-category rules
# ---------------------------------------------------------------------------

def _security(steps: AuditSteps) -> Finding:
    issues = steps.header_security.issues if steps.header_security else []
    if issues:
        return Finding(
            category=Category.SECURITY,
            severity=Severity.HIGH,
            summary=f"{len(issues)} security header issues detected",
            issues=tuple(issues),
            remediation=_SECURITY_REMEDIATION,
        )
    return Finding(
        category=Category.SECURITY,
        severity=Severity.LOW,
        summary="Security headers present",
        remediation=_SECURITY_MAINTENANCE,
    )


def performance_score(scripts: int, images: int, download_ms: float | None) -> int:
    """``max(0, 100 - (2*scripts + images + penalty))``.

    The penalty is ``round(download_ms / 50)`` for a fetched page, or a flat
    :data:`UNFETCHED_PENALTY` when *download_ms* is ``None``.
    """
    penalty = UNFETCHED_PENALTY if download_ms is None else round(download_ms / 50)
    return max(0, 100 - (scripts * 2 + images + penalty))


def _performance(steps: AuditSteps, meta: ExtractedMeta) -> Finding:
    page = steps.fetch
    fetched = page is not None and page.ok
    resources = meta.resources
    score = performance_score(
        resources.scripts, resources.images, page.download_ms if fetched else None
    )
    if score < 50:
        severity = Severity.HIGH
    elif score < 75:
        severity = Severity.MEDIUM
    else:
        severity = Severity.LOW

    ttfb = f"{round(page.ttfb_ms)}ms" if fetched else "unknown"
    download = f"{round(page.download_ms)}ms" if fetched else "unknown"
    issues = [f"TTFB ≈ {ttfb}", f"Download time ≈ {download}"]
    if not meta.has_json_ld:
        issues.append("No structured data (JSON-LD) detected on page")

    return Finding(
        category=Category.PERFORMANCE,
        severity=severity,
        summary=(
            f"Estimated performance score ≈ {score}. "
            f"Resources: scripts={resources.scripts}, images={resources.images}"
        ),
        issues=tuple(issues),
        remediation=_PERFORMANCE_REMEDIATION,
    )


def _seo(steps: AuditSteps, meta: ExtractedMeta) -> Finding:
    issues = []
    if steps.robots is None or not steps.robots.present:
        issues.append("robots.txt missing")
    if steps.sitemap is None or not steps.sitemap.found:
        issues.append("sitemap.xml not found or not referenced in robots.txt")
    if not meta.title:
        issues.append("Missing <title> tag")
    if not meta.description:
        issues.append("Missing meta description")

    return Finding(
        category=Category.SEO,
        severity=Severity.MEDIUM if issues else Severity.LOW,
        summary=f"{len(issues)} SEO issues" if issues else "Basic SEO present",
        issues=tuple(issues),
        remediation=_SEO_REMEDIATION,
    )


def _accessibility(steps: AuditSteps) -> Finding:
    issues = []
    page = steps.fetch
    if page is None or not page.ok:
        issues.append("Could not fetch page to run automated accessibility hints")
    else:
        missing_alt = count_images_missing_alt(page.body)
        if missing_alt:
            issues.append(f"{missing_alt} <img> elements missing alt attributes (sample)")

    return Finding(
        category=Category.ACCESSIBILITY,
        severity=Severity.MEDIUM if issues else Severity.LOW,
        summary=(
            "; ".join(issues)
            if issues
            else "No major automated accessibility issues detected (manual audit recommended)"
        ),
        issues=tuple(issues),
        remediation=_ACCESSIBILITY_REMEDIATION,
    )


def _infrastructure(steps: AuditSteps) -> Finding:
    issues = []
    if steps.dns is None or not steps.dns.ok:
        issues.append("DNS lookup failure or issues")
    if steps.tls is None or not steps.tls.ok:
        issues.append("TLS inspection failed or site not available on HTTPS")

    return Finding(
        category=Category.INFRASTRUCTURE,
        severity=Severity.HIGH if issues else Severity.LOW,
        summary="; ".join(issues) if issues else "DNS and TLS appear functional",
        issues=tuple(issues),
        remediation=_INFRASTRUCTURE_REMEDIATION,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def synthesize_findings(steps: AuditSteps) -> List[Finding]:
    """Return Security, Performance, SEO, Accessibility and DNS findings, in that order."""
    meta = steps.meta or ExtractedMeta()
    return [
        _security(steps),
        _performance(steps, meta),
        _seo(steps, meta),
        _accessibility(steps),
        _infrastructure(steps),
    ]
