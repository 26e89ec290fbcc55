"""Explanation bridge — conversational layer over the audit report."""

from site_auditor.explain.bridge import (
    ConversationTurn,
    ExplanationBridge,
    build_contents,
)

__all__ = ["ConversationTurn", "ExplanationBridge", "build_contents"]
