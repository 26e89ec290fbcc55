"""Data models for the audit pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from site_auditor.extractor.meta import ExtractedMeta
from site_auditor.probes.models import DnsResult, FetchResult, TlsResult


class Severity(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Category(str, Enum):
    SECURITY = "Security"
    PERFORMANCE = "Performance"
    SEO = "SEO"
    ACCESSIBILITY = "Accessibility"
    INFRASTRUCTURE = "DNS & Infrastructure"


@dataclass(frozen=True)
class Finding:
    """A categorised, severity-tagged conclusion with fixed remediation text."""

    category: Category
    severity: Severity
    summary: str
    issues: Tuple[str, ...] = ()
    remediation: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "summary": self.summary,
            "issues": list(self.issues),
            "remediation": list(self.remediation),
        }


@dataclass(frozen=True)
class HeaderCheck:
    """Lower-cased response headers and the security issues they trigger."""

    headers: Dict[str, str]
    issues: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"headers": dict(self.headers), "issues": list(self.issues)}


@dataclass(frozen=True)
class RobotsInfo:
    url: str
    present: bool
    status: Optional[int] = None
    body: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "present": self.present,
            "status": self.status,
            "body": self.body,
            "error": self.error,
        }


@dataclass(frozen=True)
class SitemapInfo:
    found: bool = False
    locations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"found": self.found, "locations": list(self.locations)}


@dataclass
class AuditSteps:
    """Raw step results, filled in order by the orchestrator."""

    dns: Optional[DnsResult] = None
    tls: Optional[TlsResult] = None
    fetch: Optional[FetchResult] = None
    header_security: Optional[HeaderCheck] = None
    meta: Optional[ExtractedMeta] = None
    robots: Optional[RobotsInfo] = None
    sitemap: Optional[SitemapInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        def _dump(value: Any) -> Any:
            return value.to_dict() if value is not None else None

        return {
            "dns": _dump(self.dns),
            "tls": _dump(self.tls),
            "fetch": _dump(self.fetch),
            "header_security": _dump(self.header_security),
            "meta": _dump(self.meta),
            "robots": _dump(self.robots),
            "sitemap": _dump(self.sitemap),
        }


@dataclass(frozen=True)
class AuditReport:
    """The unit returned to callers and handed to the explanation bridge."""

    target: str
    generated_at: str
    steps: AuditSteps
    findings: List[Finding]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "generated_at": self.generated_at,
            "steps": self.steps.to_dict(),
            "findings": [f.to_dict() for f in self.findings],
        }
