"""
NotePolish Backend - Notes Pipeline (Beautify & Summarize)
============================================================

What:  Facade composing bounded invocation, validation, retry and segmentation
       into the two operations exposed over HTTP.
Who:   Called by routes/ai.py.
When:  Once per POST /api/beautify or POST /api/summarize.

    beautify(content):  validate input → 1 attempt (no retry) → text verbatim
    summarize(text):    validate input → RetryCoordinator (≤ 2 attempts)
                        → segment_summary → SummaryResult

Error Mapping:
    empty / non-string input        → ValidationError (400), provider never called
    attempt budget spent            → LLMServiceError (500) with outcome kind in details
    anything unexpected             → LLMServiceError (500) with the generic message

The facade is stateless: every call builds its own request, coordinator and
result, so a single instance serves all requests.
"""

import logging
from typing import Any, Optional

from notepolish.config import settings
from notepolish.exceptions import LLMServiceError, ValidationError
from notepolish.schemas.completion import AttemptOutcome, CompletionRequest, SummaryResult
from notepolish.services.invocation import run_attempt
from notepolish.services.llm_base import CompletionProvider
from notepolish.services.openrouter_service import openrouter_provider
from notepolish.services.retry import RetryCoordinator
from notepolish.services.segmenter import segment_summary

logger = logging.getLogger(__name__)

BEAUTIFY_PROMPT = (
    "You are an AI assistant that cleans up, beautifies, and summarizes class notes. "
    "Format the notes with bullet points, headings, and short paragraphs."
)

SUMMARIZE_PROMPT = (
    "Summarize the following notes in 3-5 lines. Then, under the heading "
    "'Key Takeaways:' or 'Takeaways:', provide 3 bullet points."
)

BEAUTIFY_FAILED = "AI beautification failed. Please try again."
BEAUTIFY_UNAVAILABLE = "AI service unavailable. Please try again later."
SUMMARIZE_FAILED = "The AI service is currently busy or slow. Please try again in a few moments."
SUMMARIZE_UNAVAILABLE = "The AI service is currently unavailable. Please try again later."


def _require_text(value: Any, field: str, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message=message, field=field)
    return value


def _failure_details(outcome: AttemptOutcome, attempts: int) -> dict:
    details = {"reason": outcome.kind.value, "attempts": attempts}
    if outcome.detail:
        details["detail"] = outcome.detail
    return details


class NotesPipeline:
    """
    Stateless facade over the completion pipeline.

    Args (constructor):
        provider: CompletionProvider used for every attempt
        model_id / temperature: copied into each CompletionRequest
        timeout_ms: Bounded Invocation deadline per attempt
        retry_delay_ms: Delay before the single summarize retry
    """

    def __init__(
        self,
        provider: CompletionProvider,
        model_id: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout_ms: Optional[int] = None,
        retry_delay_ms: Optional[int] = None,
    ):
        self.provider = provider
        self.model_id = model_id or settings.completion_model
        self.temperature = (
            temperature if temperature is not None else settings.completion_temperature
        )
        self.timeout_ms = timeout_ms or settings.completion_timeout_ms
        self.retry_delay_ms = (
            retry_delay_ms if retry_delay_ms is not None else settings.retry_delay_ms
        )

    def _build_request(self, system_prompt: str, user_content: str) -> CompletionRequest:
        return CompletionRequest(
            system_prompt=system_prompt,
            user_content=user_content,
            model_id=self.model_id,
            temperature=self.temperature,
        )

    async def beautify(self, content: Any) -> str:
        """
        Reformat raw notes with a single bounded attempt.

        Returns:
            The validated generated text, verbatim.

        Raises:
            ValidationError: content missing, not a string, or blank
            LLMServiceError: the attempt timed out, failed, or was malformed
        """
        content = _require_text(content, "content", "No content provided")
        request = self._build_request(BEAUTIFY_PROMPT, content)

        try:
            outcome = await run_attempt(self.provider, request, self.timeout_ms)
        except Exception as e:
            logger.error("Unexpected error during beautify: %s", str(e), exc_info=True)
            raise LLMServiceError(
                message=BEAUTIFY_UNAVAILABLE,
                context={"error_type": type(e).__name__},
            )

        if not outcome.ok:
            logger.error("Beautify failed: %s", outcome.kind.value)
            raise LLMServiceError(message=BEAUTIFY_FAILED, context=_failure_details(outcome, 1))
        return outcome.text

    async def summarize(self, text: Any) -> SummaryResult:
        """
        Summarize notes, retrying once on any failed first attempt.

        Returns:
            SummaryResult extracted from the terminal successful attempt.

        Raises:
            ValidationError: text missing, not a string, or blank
            LLMServiceError: both attempts failed, or orchestration broke
        """
        text = _require_text(text, "text", "No text provided")
        request = self._build_request(SUMMARIZE_PROMPT, text)
        coordinator = RetryCoordinator(
            attempt=lambda: run_attempt(self.provider, request, self.timeout_ms),
            retry_delay_ms=self.retry_delay_ms,
        )

        try:
            outcome = await coordinator.run()
            if outcome.ok:
                return segment_summary(outcome.text)
        except Exception as e:
            logger.error("Unexpected error during summarize: %s", str(e), exc_info=True)
            raise LLMServiceError(
                message=SUMMARIZE_UNAVAILABLE,
                context={"error_type": type(e).__name__},
            )

        logger.error(
            "Summarize failed after %d attempt(s): %s",
            len(coordinator.outcomes),
            outcome.kind.value,
        )
        raise LLMServiceError(
            message=SUMMARIZE_FAILED,
            context=_failure_details(outcome, len(coordinator.outcomes)),
        )


# ── Singleton Instance ────────────────────────────────────────────────────
notes_pipeline = NotesPipeline(openrouter_provider)
