"""
NotePolish Backend - Abstract Completion Provider Interface
=============================================================

What:  Abstract base class defining the contract for chat-completion providers.
How:   Concrete implementations inherit from CompletionProvider and implement
       complete() and health_check().
Who:   Called by the bounded invocation in services/invocation.py.

Design Decision:
    The pipeline only needs "send a CompletionRequest, get a raw payload back".
    Keeping that behind an interface lets tests drive the pipeline with a fake
    provider (slow, failing, malformed) without any network.
"""

from abc import ABC, abstractmethod

from notepolish.schemas.completion import CompletionRequest, RawCompletion


class CompletionProvider(ABC):
    """
    Abstract interface for message-based text-completion services.

    Contract:
        - complete() performs ONE outbound call and returns the raw payload
        - transport-level failures are raised (the bounded invocation turns
          them into TransportError outcomes)
        - no retries, no validation, no shared mutable state between calls
    """

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> RawCompletion:
        """
        Send a completion request and return the provider's raw reply.

        Args:
            request: The immutable request to send.

        Returns:
            RawCompletion wrapping the decoded body. The body shape is not
            checked here; see services/invocation.validate_completion().

        Raises:
            Any transport exception (connection refused, TLS failure, read
            timeout, ...). Callers must not assume a specific type.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the provider is reachable.

        Returns: True if reachable, False otherwise. Never raises.
        """
        ...
