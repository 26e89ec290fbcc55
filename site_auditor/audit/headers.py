"""Security response-header checklist."""

from __future__ import annotations

import re
from typing import Mapping

from site_auditor.audit.models import HeaderCheck

_FRAME_ANCESTORS = re.compile(r"frame-ancestors", re.IGNORECASE)


def evaluate_headers(headers: Mapping[str, str]) -> HeaderCheck:
    """Check *headers* against the fixed checklist.

    Keys are lower-cased first; an empty header value counts as absent.
    Issues come back in checklist order, one per failed check.
    """
    h = {key.lower(): value for key, value in (headers or {}).items()}
    issues = []

    csp = h.get("content-security-policy")
    if not csp:
        issues.append("Missing Content-Security-Policy header")
    if not h.get("x-frame-options") and not (csp and _FRAME_ANCESTORS.search(csp)):
        issues.append("Missing X-Frame-Options or frame-ancestors directive")
    if not h.get("strict-transport-security"):
        issues.append("Missing HSTS header")
    if not h.get("referrer-policy"):
        issues.append("Missing Referrer-Policy")
    if not h.get("permissions-policy") and not h.get("feature-policy"):
        issues.append("Missing Permissions-Policy / Feature-Policy")
    if not h.get("x-content-type-options"):
        issues.append("Missing X-Content-Type-Options (nosniff)")

    return HeaderCheck(headers=h, issues=issues)
