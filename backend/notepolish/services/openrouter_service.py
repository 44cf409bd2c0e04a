"""
NotePolish Backend - OpenRouter Completion Provider
=====================================================

What:  Concrete CompletionProvider for OpenRouter's OpenAI-compatible
       `/chat/completions` endpoint.
How:   One httpx.AsyncClient per call: POST JSON with a bearer token, decode
       the body, hand it back untouched.
Who:   Instantiated once at import; used by the pipeline facade through the
       bounded invocation.

Connection Model:
    Each call opens and closes its own client. A call abandoned by the
    bounded invocation keeps running in the background until it finishes
    or hits `provider_http_timeout`, then releases its connection on its own.
"""

import logging
import time
import uuid
from typing import Optional

import httpx

from notepolish.config import settings
from notepolish.schemas.completion import CompletionRequest, RawCompletion
from notepolish.services.llm_base import CompletionProvider

logger = logging.getLogger(__name__)


class OpenRouterProvider(CompletionProvider):
    """
    OpenRouter chat-completions client.

    The provider shape is a fixed external contract:
        request:  {model, messages: [{role, content}], temperature}
        response: generated text at choices[0].message.content
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_key: Bearer token (defaults to settings.openrouter_api_key)
            base_url: API root (defaults to settings.openrouter_base_url)
            http_timeout: Transport timeout in seconds
            transport: Custom httpx transport (tests pass httpx.MockTransport)
        """
        self.api_key = api_key if api_key is not None else settings.openrouter_api_key
        self.base_url = (base_url or settings.openrouter_base_url).rstrip("/")
        self.http_timeout = http_timeout or settings.provider_http_timeout
        self._transport = transport

        logger.info(
            "OpenRouterProvider initialized with base_url=%s, http_timeout=%.0fs",
            self.base_url,
            self.http_timeout,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.http_timeout,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

    async def complete(self, request: CompletionRequest) -> RawCompletion:
        """
        POST the request to /chat/completions.

        Non-2xx replies are NOT raised: their body goes back to the caller like
        any other payload, and the validator classifies it as malformed.
        A body that is not JSON is returned as text for the same reason.

        Raises:
            httpx.HTTPError: connection / protocol / transport timeout failures
        """
        call_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()
        logger.debug("[%s] Sending completion request (model=%s)", call_id, request.model_id)

        async with self._client() as client:
            response = await client.post("/chat/completions", json=request.to_payload())

        duration_ms = (time.perf_counter() - start_time) * 1000
        try:
            payload = response.json()
        except ValueError:
            payload = response.text

        logger.info(
            "[%s] Provider replied %d in %.0fms",
            call_id,
            response.status_code,
            duration_ms,
        )
        return RawCompletion(payload=payload, status_code=response.status_code)

    async def health_check(self) -> bool:
        """
        Lists available models (no token cost) to verify reachability and auth.
        """
        try:
            async with self._client() as client:
                response = await client.get("/models")
            if response.status_code == 200:
                return True
            logger.warning("Provider health check returned HTTP %d", response.status_code)
            return False
        except httpx.HTTPError as e:
            logger.warning("Provider health check failed: %s", str(e))
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
# Holds configuration only; every call builds its own client.
openrouter_provider = OpenRouterProvider()
