"""
NotePolish Backend - One-Shot Retry Coordinator
=================================================

What:  Drives the summarize path through at most two attempts.
How:   Explicit state machine, one instance per request:

           IDLE → ATTEMPT_1 ─ success ─────────────────────────→ DONE
                      └─ timeout / transport / malformed → RETRY_PENDING
           RETRY_PENDING ─ fixed delay → ATTEMPT_2 ─ any outcome → DONE

       The second attempt resends the identical CompletionRequest. Whatever
       it yields is terminal.
Who:   Created by NotesPipeline.summarize() for each call.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List

from notepolish.schemas.completion import AttemptOutcome

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY_MS = 1_200


class RetryState(str, Enum):
    IDLE = "idle"
    ATTEMPT_1 = "attempt_1"
    RETRY_PENDING = "retry_pending"
    ATTEMPT_2 = "attempt_2"
    DONE = "done"


class RetryCoordinator:
    """
    Single-use coordinator for one request.

    Attributes:
        state:     Current RetryState
        outcomes:  Outcome of each attempt made, in order (length 1 or 2)
    """

    def __init__(
        self,
        attempt: Callable[[], Awaitable[AttemptOutcome]],
        retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            attempt: Zero-argument coroutine factory performing one validated
                     attempt with the same request every time it is called.
            retry_delay_ms: Pause between the failed first attempt and the retry.
            sleep: Suspension used for the delay (tests pass a recorder).
        """
        self._attempt = attempt
        self.retry_delay_ms = retry_delay_ms
        self._sleep = sleep
        self.state = RetryState.IDLE
        self.outcomes: List[AttemptOutcome] = []

    def _transition(self, new_state: RetryState) -> None:
        logger.debug("Retry coordinator: %s → %s", self.state.value, new_state.value)
        self.state = new_state

    async def _run_attempt(self) -> AttemptOutcome:
        outcome = await self._attempt()
        self.outcomes.append(outcome)
        return outcome

    async def run(self) -> AttemptOutcome:
        """
        Execute the state machine to DONE and return the terminal outcome.

        Raises:
            RuntimeError: if called on a coordinator that already left IDLE.
        """
        if self.state is not RetryState.IDLE:
            raise RuntimeError("RetryCoordinator is single-use")

        self._transition(RetryState.ATTEMPT_1)
        first = await self._run_attempt()
        if first.ok:
            self._transition(RetryState.DONE)
            return first

        self._transition(RetryState.RETRY_PENDING)
        logger.warning(
            "First attempt failed (%s); retrying once in %dms",
            first.kind.value,
            self.retry_delay_ms,
        )
        await self._sleep(self.retry_delay_ms / 1000)

        self._transition(RetryState.ATTEMPT_2)
        second = await self._run_attempt()
        self._transition(RetryState.DONE)
        return second
