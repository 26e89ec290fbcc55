"""Audit pipeline — header checks, orchestration and findings synthesis."""

from site_auditor.audit.findings import synthesize_findings
from site_auditor.audit.headers import evaluate_headers
from site_auditor.audit.models import (
    AuditReport,
    AuditSteps,
    Category,
    Finding,
    HeaderCheck,
    RobotsInfo,
    Severity,
    SitemapInfo,
)
from site_auditor.audit.orchestrator import run_audit, validate_target

__all__ = [
    "run_audit",
    "validate_target",
    "evaluate_headers",
    "synthesize_findings",
    "AuditReport",
    "AuditSteps",
    "Category",
    "Finding",
    "HeaderCheck",
    "RobotsInfo",
    "Severity",
    "SitemapInfo",
]
