"""Tests for the explanation bridge.

The Gemini endpoint is mocked with ``respx``; no real API key is needed.
"""

from __future__ import annotations

import json
import logging

import httpx
import pytest
import respx

from site_auditor.config import PLACEHOLDER_API_KEY, Settings
from site_auditor.errors import ConfigurationError, MissingInputError, UpstreamError
from site_auditor.explain.bridge import (
    ACKNOWLEDGMENT,
    PRIMING_PROMPT,
    ConversationTurn,
    ExplanationBridge,
    build_contents,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_REPORT = {
    "target": "https://example.test/",
    "findings": [{"category": "Security", "severity": "High", "issues": ["Missing HSTS header"]}],
}

_ENDPOINT = "https://gemini.test/v1beta/models/gemini-2.0-flash:generateContent"


def _bridge(api_key: str = "test-key") -> ExplanationBridge:
    return ExplanationBridge(api_key=api_key, api_base="https://gemini.test/v1beta/")


def _candidate(text: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


# ---------------------------------------------------------------------------
# build_contents
# ---------------------------------------------------------------------------

class TestBuildContents:
    def test_first_turn_without_question(self) -> None:
        contents = build_contents(_REPORT, [])

        assert [c["role"] for c in contents] == ["user", "model"]
        priming = contents[0]["parts"][0]["text"]
        assert priming.startswith(PRIMING_PROMPT)
        assert json.loads(priming[len(PRIMING_PROMPT):]) == _REPORT
        assert contents[1]["parts"][0]["text"] == ACKNOWLEDGMENT

    def test_first_turn_appends_trailing_user_question(self) -> None:
        history = [
            ConversationTurn("assistant", "Analyzing the report with AI..."),
            ConversationTurn("user", "What should I fix first?"),
        ]
        contents = build_contents(_REPORT, history)

        assert len(contents) == 3
        assert contents[2] == {"role": "user", "parts": [{"text": "What should I fix first?"}]}

    def test_first_turn_ignores_trailing_assistant_turn(self) -> None:
        history = [ConversationTurn("assistant", "Analyzing the report with AI...")]
        assert len(build_contents(_REPORT, history)) == 2

    def test_follow_up_sends_full_transcript(self) -> None:
        history = [
            ConversationTurn("assistant", "Summary..."),
            ConversationTurn("user", "Explain HSTS"),
            ConversationTurn("model", "HSTS is..."),
            ConversationTurn("user", "And CSP?"),
        ]
        contents = build_contents(None, history)

        assert [c["role"] for c in contents] == ["model", "user", "model", "user"]
        assert [c["parts"][0]["text"] for c in contents] == [t.text for t in history]

    def test_missing_input_raises(self) -> None:
        with pytest.raises(MissingInputError):
            build_contents(None, [])


# ---------------------------------------------------------------------------
# ExplanationBridge
# ---------------------------------------------------------------------------

class TestExplanationBridge:
    def test_from_settings(self) -> None:
        settings = Settings(gemini_api_key="abc", gemini_model="gemini-x", explain_timeout=5.0)
        bridge = ExplanationBridge.from_settings(settings)
        assert bridge.api_key == "abc"
        assert bridge.model == "gemini-x"
        assert bridge.timeout == 5.0
        assert bridge.endpoint.endswith("/models/gemini-x:generateContent")

    async def test_returns_first_candidate_text(self) -> None:
        with respx.mock:
            route = respx.post(_ENDPOINT).mock(
                return_value=httpx.Response(200, json=_candidate("## Executive summary"))
            )
            text = await _bridge().explain(_REPORT, [])

        assert text == "## Executive summary"
        request = route.calls.last.request
        assert request.headers["x-goog-api-key"] == "test-key"
        assert "key" not in request.url.params
        sent = json.loads(request.content)
        assert [c["role"] for c in sent["contents"]] == ["user", "model"]

    async def test_api_key_never_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG)
        with respx.mock:
            respx.post(_ENDPOINT).mock(
                side_effect=[
                    httpx.Response(200, json=_candidate("ok")),
                    httpx.Response(403, json={"error": {"message": "denied"}}),
                ]
            )
            bridge = _bridge("SECRET-KEY-123")
            await bridge.explain(_REPORT, [])
            with pytest.raises(UpstreamError):
                await bridge.explain(_REPORT, [])

        assert caplog.records
        assert all("SECRET-KEY-123" not in r.getMessage() for r in caplog.records)

    @pytest.mark.parametrize(
        "payload",
        [
            {"candidates": ["not a candidate"]},
            {"candidates": [{"content": "plain string"}]},
            {"candidates": [{"content": {"parts": ["plain string"]}}]},
            {"candidates": "nope"},
        ],
    )
    async def test_malformed_candidate_is_upstream_error(self, payload: dict) -> None:
        with respx.mock:
            respx.post(_ENDPOINT).mock(return_value=httpx.Response(200, json=payload))
            with pytest.raises(UpstreamError, match="Failed to get an explanation"):
                await _bridge().explain(_REPORT, [])

    @pytest.mark.parametrize("api_key", ["", PLACEHOLDER_API_KEY])
    async def test_missing_key_is_configuration_error(self, api_key: str) -> None:
        with pytest.raises(ConfigurationError):
            await _bridge(api_key).explain(_REPORT, [])

    async def test_missing_input_checked_before_key(self) -> None:
        with pytest.raises(MissingInputError):
            await _bridge("").explain(None, [])

    async def test_safety_block_passes_feedback_through(self) -> None:
        feedback = {"blockReason": "SAFETY"}
        with respx.mock:
            respx.post(_ENDPOINT).mock(
                return_value=httpx.Response(200, json={"promptFeedback": feedback})
            )
            with pytest.raises(UpstreamError, match="safety filters") as excinfo:
                await _bridge().explain(_REPORT, [])

        assert excinfo.value.details == feedback

    async def test_empty_response_is_upstream_error(self) -> None:
        with respx.mock:
            respx.post(_ENDPOINT).mock(return_value=httpx.Response(200, json={"candidates": []}))
            with pytest.raises(UpstreamError, match="Failed to get an explanation"):
                await _bridge().explain(_REPORT, [])

    async def test_http_error_carries_provider_payload(self) -> None:
        payload = {"error": {"code": 400, "message": "API key not valid."}}
        with respx.mock:
            respx.post(_ENDPOINT).mock(return_value=httpx.Response(400, json=payload))
            with pytest.raises(UpstreamError) as excinfo:
                await _bridge().explain(_REPORT, [])

        assert excinfo.value.status_code == 502
        assert excinfo.value.details == payload

    async def test_network_error_is_upstream_error(self) -> None:
        with respx.mock:
            respx.post(_ENDPOINT).mock(side_effect=httpx.ConnectError("unreachable"))
            with pytest.raises(UpstreamError) as excinfo:
                await _bridge().explain(None, [ConversationTurn("user", "hi")])

        assert "unreachable" in excinfo.value.details
