"""Explanation endpoint.

Routes
------
POST /api/explain    Body: {"auditData"?: {...}, "history"?: [{"role", "text"}]}
                     → {"explanation": "..."}
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from site_auditor.config import settings
from site_auditor.explain.bridge import ConversationTurn, ExplanationBridge

router = APIRouter()


class TurnIn(BaseModel):
    role: str = "user"
    text: str = ""


class ExplainRequest(BaseModel):
    auditData: Optional[dict[str, Any]] = None
    history: list[TurnIn] = []


class ExplainResponse(BaseModel):
    explanation: str


def get_bridge() -> ExplanationBridge:
    return ExplanationBridge.from_settings(settings)


@router.post("/explain", response_model=ExplainResponse)
async def explain_endpoint(
    body: ExplainRequest,
    bridge: ExplanationBridge = Depends(get_bridge),
) -> ExplainResponse:
    """Explain an audit (first turn) or continue the conversation (follow-ups)."""
    history = [ConversationTurn(role=t.role, text=t.text) for t in body.history]
    explanation = await bridge.explain(body.auditData, history)
    return ExplainResponse(explanation=explanation)
