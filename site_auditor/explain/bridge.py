"""Forward an audit report or chat transcript to Gemini and relay the reply.

The bridge holds no conversation state.  Every call receives either the
full report (first turn) or the accumulated transcript (follow-ups) and
builds the ``contents`` array for the ``generateContent`` endpoint from
scratch.

Message shapes
--------------
First turn::

    user   priming prompt + JSON report
    model  canned acknowledgment
    user   latest question (only if the transcript ends with one)

Follow-up::

    <every turn of the transcript, in order>
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

import httpx

from site_auditor.config import PLACEHOLDER_API_KEY, Settings
from site_auditor.errors import ConfigurationError, MissingInputError, UpstreamError

log = logging.getLogger(__name__)

PRIMING_PROMPT = (
    "You are a highly experienced web auditor with 20 years of experience. "
    "A site audit was performed and the following raw JSON data was generated. "
    "Your role is to act as an expert consultant. Analyze this data and explain "
    "the key findings with the authority and depth of a seasoned professional. "
    'Focus on the "findings" array to identify the main issues and provide '
    "actionable, expert-level recommendations. Start with a high-level executive "
    "summary of the most critical issues. Then, for each category (Security, "
    "Performance, SEO, Accessibility), provide a detailed analysis of the findings. "
    "Your language should be professional and technical, but clear. "
    "**Format your response using Markdown for clear structure, including headings, "
    "bold text for emphasis, and bullet points for lists.** After your initial "
    "analysis, the user might ask follow-up questions. Here is the audit data: "
)

ACKNOWLEDGMENT = (
    "Greetings. I have completed my analysis of the provided website audit. "
    "Please let me know which area you would like to discuss first."
)

# Transcript roles as sent by the browser, mapped to Gemini's two roles.
_UPSTREAM_ROLES = {"user": "user", "assistant": "model", "model": "model"}


@dataclass(frozen=True)
class ConversationTurn:
    role: str
    text: str

    @property
    def upstream_role(self) -> str:
        return _UPSTREAM_ROLES.get(self.role, "user")


def _message(role: str, text: str) -> dict[str, Any]:
    return {"role": role, "parts": [{"text": text}]}


def build_contents(
    audit_data: Optional[Mapping[str, Any]],
    history: Iterable[ConversationTurn] = (),
) -> list[dict[str, Any]]:
    """Return the role-tagged ``contents`` array for one explanation call.

    Raises:
        MissingInputError: neither *audit_data* nor any *history* was given.
    """
    history = list(history)
    if not audit_data and not history:
        raise MissingInputError("Missing auditData for initial analysis.")

    if not audit_data:
        return [_message(turn.upstream_role, turn.text) for turn in history]

    contents = [
        _message("user", PRIMING_PROMPT + json.dumps(audit_data, indent=2)),
        _message("model", ACKNOWLEDGMENT),
    ]
    if history and history[-1].upstream_role == "user":
        contents.append(_message("user", history[-1].text))
    return contents


def _first_candidate_text(data: Mapping[str, Any]) -> Optional[str]:
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    candidate = candidates[0]
    content = candidate.get("content") if isinstance(candidate, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


class ExplanationBridge:
    """Stateless client for the Gemini ``generateContent`` endpoint.

    Configuration is passed in explicitly; nothing here reads the
    environment.  Use :meth:`from_settings` to wire it to
    :data:`site_auditor.config.settings`.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        api_base: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExplanationBridge":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            api_base=settings.gemini_api_base,
            timeout=settings.explain_timeout,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def _require_key(self) -> None:
        if not self.api_key or self.api_key == PLACEHOLDER_API_KEY:
            raise ConfigurationError(
                "Gemini API key not configured on the server. "
                "Please add it to the .env file."
            )

    async def explain(
        self,
        audit_data: Optional[Mapping[str, Any]] = None,
        history: Iterable[ConversationTurn] = (),
    ) -> str:
        """Send one turn upstream and return the first candidate's text.

        Raises:
            MissingInputError: no report and no transcript.
            ConfigurationError: no usable API key.
            UpstreamError: the request failed, was blocked, or had no candidate.
        """
        contents = build_contents(audit_data, history)
        self._require_key()

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.endpoint,
                    json={"contents": contents},
                    # Header, not query string: httpx logs every request URL.
                    headers={
                        "Content-Type": "application/json",
                        "x-goog-api-key": self.api_key,
                    },
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            try:
                details: Any = exc.response.json()
            except ValueError:
                details = exc.response.text
            log.error("Gemini API returned HTTP %s: %s", exc.response.status_code, details)
            raise UpstreamError(
                "An error occurred while communicating with the AI assistant.",
                details=details,
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            log.error("Error calling Gemini API: %s", exc)
            raise UpstreamError(
                "An error occurred while communicating with the AI assistant.",
                details=str(exc),
            ) from exc

        if not isinstance(data, dict):
            raise UpstreamError("Failed to get an explanation from the AI.", details=data)

        text = _first_candidate_text(data)
        if text is not None:
            return text

        feedback = data.get("promptFeedback")
        if feedback:
            log.error("Gemini API prompt feedback: %s", feedback)
            raise UpstreamError(
                "The request was blocked by the AI's safety filters.", details=feedback
            )
        raise UpstreamError("Failed to get an explanation from the AI.", details=data)
