"""
NotePolish Backend - Bounded Invocation & Validator Tests
===========================================================

What we test:
    ✅ A reply inside the deadline is returned as a RawCompletion
    ✅ A slow call yields Timeout close to the deadline, never later
    ✅ A late success after Timeout is discarded and changes nothing
    ✅ Transport exceptions become TransportError outcomes
    ✅ The validator accepts only non-empty choices[0].message.content
"""

import asyncio
import time

import httpx
import pytest

from notepolish.schemas.completion import (
    AttemptOutcome,
    CompletionRequest,
    OutcomeKind,
    RawCompletion,
)
from notepolish.services.invocation import (
    invoke_with_deadline,
    run_attempt,
    validate_completion,
)


@pytest.fixture
def request_obj():
    return CompletionRequest(
        system_prompt="system",
        user_content="my notes",
        model_id="test/model",
    )


class TestInvokeWithDeadline:

    @pytest.mark.asyncio
    async def test_reply_within_deadline_is_returned(
        self, scripted_provider, completion_payload, request_obj
    ):
        provider = scripted_provider([completion_payload("hello")])

        result = await invoke_with_deadline(provider, request_obj, timeout_ms=500)

        assert isinstance(result, RawCompletion)
        assert result.payload["choices"][0]["message"]["content"] == "hello"
        assert provider.requests == [request_obj]

    @pytest.mark.asyncio
    async def test_slow_call_times_out_at_deadline(
        self, scripted_provider, slow, completion_payload, request_obj
    ):
        provider = scripted_provider([slow(0.5, completion_payload("late"))])

        started = time.perf_counter()
        result = await invoke_with_deadline(provider, request_obj, timeout_ms=50)
        elapsed = time.perf_counter() - started

        assert isinstance(result, AttemptOutcome)
        assert result.kind is OutcomeKind.TIMEOUT
        assert elapsed < 0.4

        # Let the abandoned call finish so the loop closes cleanly
        await asyncio.sleep(0.6)

    @pytest.mark.asyncio
    async def test_late_success_is_discarded(
        self, scripted_provider, slow, completion_payload, request_obj
    ):
        provider = scripted_provider([slow(0.1, completion_payload("too late"))])

        outcome = await run_attempt(provider, request_obj, timeout_ms=20)
        await asyncio.sleep(0.2)

        assert provider.finished == 1
        assert outcome.kind is OutcomeKind.TIMEOUT
        assert outcome.text is None

    @pytest.mark.asyncio
    async def test_late_failure_is_swallowed(
        self, scripted_provider, slow, request_obj
    ):
        provider = scripted_provider([slow(0.1, httpx.ConnectError("late boom"))])

        outcome = await run_attempt(provider, request_obj, timeout_ms=20)
        await asyncio.sleep(0.2)

        assert provider.finished == 1
        assert outcome.kind is OutcomeKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_transport_exception_becomes_outcome(self, scripted_provider, request_obj):
        provider = scripted_provider([httpx.ConnectError("connection refused")])

        result = await invoke_with_deadline(provider, request_obj, timeout_ms=500)

        assert result.kind is OutcomeKind.TRANSPORT_ERROR
        assert result.detail == "ConnectError"

    @pytest.mark.asyncio
    async def test_any_exception_counts_as_transport_error(self, scripted_provider, request_obj):
        provider = scripted_provider([RuntimeError("socket closed")])

        outcome = await run_attempt(provider, request_obj, timeout_ms=500)

        assert outcome.kind is OutcomeKind.TRANSPORT_ERROR


class TestValidateCompletion:

    def test_content_present(self, completion_payload):
        outcome = validate_completion(RawCompletion(payload=completion_payload("Beautiful notes")))

        assert outcome.ok
        assert outcome.text == "Beautiful notes"

    def test_text_is_not_trimmed(self, completion_payload):
        outcome = validate_completion(RawCompletion(payload=completion_payload("  padded\n")))
        assert outcome.text == "  padded\n"

    def test_whitespace_only_content_is_success(self, completion_payload):
        outcome = validate_completion(RawCompletion(payload=completion_payload("  \n")))

        assert outcome.ok
        assert outcome.text == "  \n"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"choices": []},
            {"choices": "nope"},
            {"choices": [{}]},
            {"choices": [{"message": None}]},
            {"choices": [{"message": {}}]},
            {"choices": [{"message": {"content": ""}}]},
            {"choices": [{"message": {"content": 42}}]},
            {"error": {"message": "rate limited", "code": 429}},
            "<html>Bad Gateway</html>",
            None,
            [1, 2, 3],
        ],
        ids=[
            "empty-object",
            "no-choices",
            "choices-not-list",
            "no-message",
            "null-message",
            "no-content",
            "empty-content",
            "non-string-content",
            "provider-error-body",
            "non-json-body",
            "null-body",
            "list-body",
        ],
    )
    def test_malformed_shapes(self, payload):
        outcome = validate_completion(RawCompletion(payload=payload))

        assert outcome.kind is OutcomeKind.MALFORMED_RESPONSE
        assert outcome.text is None
        assert outcome.detail

    def test_error_status_without_content_mentions_status(self):
        outcome = validate_completion(
            RawCompletion(payload={"error": {"message": "overloaded"}}, status_code=503)
        )

        assert outcome.kind is OutcomeKind.MALFORMED_RESPONSE
        assert "503" in outcome.detail
