"""
NotePolish Backend - Bounded Invocation & Response Validation
===============================================================

What:  Runs one provider call under a hard wall-clock deadline, then checks
       that the reply actually carries generated text.
How:   The call is scheduled as a task and raced against a timer with
       asyncio.wait(timeout=...). Whichever settles first decides the outcome.
       The loser is abandoned, never cancelled or joined.
Who:   Used by the pipeline facade (beautify: one attempt) and by the retry
       coordinator (summarize: up to two attempts).

Outcome Table:
    call finishes first, returns payload   → RawCompletion (then validated)
    call finishes first, raises            → TransportError
    timer fires first                      → Timeout (late result discarded)
    payload lacks choices[0].message.content, or it is empty → MalformedResponse
"""

import asyncio
import logging
import time
from typing import Any, Optional, Union

from notepolish.schemas.completion import AttemptOutcome, CompletionRequest, RawCompletion
from notepolish.services.llm_base import CompletionProvider

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 12_000


def _discard_late_result(task: "asyncio.Task[RawCompletion]") -> None:
    """Done-callback for a call that lost the race: consume its result and drop it."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Abandoned completion call failed late: %s", type(exc).__name__)
    else:
        logger.debug("Abandoned completion call finished late; result discarded")


async def invoke_with_deadline(
    provider: CompletionProvider,
    request: CompletionRequest,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> Union[RawCompletion, AttemptOutcome]:
    """
    Bounded Invocation: race provider.complete(request) against a timer.

    Returns:
        RawCompletion when the call completed in time, otherwise a Timeout or
        TransportError AttemptOutcome. Never raises for provider failures.
    """
    call = asyncio.ensure_future(provider.complete(request))
    done, _ = await asyncio.wait({call}, timeout=timeout_ms / 1000)

    if call not in done:
        # Timer won. The call keeps running on its own; its result is ignored.
        call.add_done_callback(_discard_late_result)
        logger.warning("Completion call exceeded %dms deadline", timeout_ms)
        return AttemptOutcome.timeout(f"no reply within {timeout_ms}ms")

    try:
        return call.result()
    except Exception as e:
        logger.warning("Completion call failed: %s: %s", type(e).__name__, str(e))
        return AttemptOutcome.transport_error(type(e).__name__)


def _generated_text(payload: Any) -> Optional[Any]:
    """Walk choices[0].message.content without trusting any level of the shape."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    return message.get("content")


def validate_completion(raw: RawCompletion) -> AttemptOutcome:
    """
    Response Validator: Success(text) iff a non-empty generated-text string is
    present at choices[0].message.content; MalformedResponse otherwise.

    The text is returned as-is (not trimmed). There is no partial recovery.
    """
    content = _generated_text(raw.payload)
    if isinstance(content, str) and content:
        return AttemptOutcome.success(content)

    if raw.status_code is not None and raw.status_code >= 400:
        detail = f"provider returned HTTP {raw.status_code} without generated text"
    elif not isinstance(raw.payload, dict):
        detail = "provider reply was not a JSON object"
    elif content is None:
        detail = "choices[0].message.content missing"
    else:
        detail = "choices[0].message.content empty or not a string"
    return AttemptOutcome.malformed(detail)


async def run_attempt(
    provider: CompletionProvider,
    request: CompletionRequest,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
) -> AttemptOutcome:
    """One attempt = bounded invocation followed by validation."""
    start_time = time.perf_counter()
    result = await invoke_with_deadline(provider, request, timeout_ms)
    outcome = result if isinstance(result, AttemptOutcome) else validate_completion(result)
    logger.info(
        "Attempt finished in %.0fms: %s",
        (time.perf_counter() - start_time) * 1000,
        outcome.kind.value,
    )
    return outcome
