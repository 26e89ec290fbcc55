"""Audit endpoint.

Routes
------
POST /api/audit    Body: {"url": "https://..."}    → AuditReport JSON
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from site_auditor.audit.orchestrator import run_audit

router = APIRouter()


class AuditRequest(BaseModel):
    # Optional so a missing url is reported as {"error": ...} rather than a 422.
    url: Optional[str] = None


@router.post("/audit")
async def audit_endpoint(body: AuditRequest) -> dict[str, Any]:
    """Run DNS, TLS, fetch, header, robots and sitemap checks against ``url``.

    Returns 400 for a missing or malformed URL.  Network failures never
    produce an error response; they show up inside the report instead.
    """
    report = await run_audit(body.url or "")
    return report.to_dict()
