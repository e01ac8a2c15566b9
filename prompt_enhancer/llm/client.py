"""Transport client for completion requests.

Architectural role:
    Executes the single outbound HTTP call of the enhancement pipeline and
    normalizes its outcome into either completion text or a raised fault.

Model invocation flow:
    `engine.PromptEnhancer.enhance` -> `service.build_enhancement_payload` ->
    `CompletionClient.send(payload)` -> response body text.

Retry behavior:
    No retry loop is implemented. Each call is attempted once.

Failure handling model:
    - Non-2xx responses raise `TransportFault` with status and body.
    - Network-level failures propagate as `httpx.RequestError`.
    Deadline handling is not done here; the engine races `send` against its own
    timer.
"""

import logging

import httpx

from prompt_enhancer.core.errors import TransportFault
from prompt_enhancer.llm.provider_config import EnhancerConfig


logger = logging.getLogger("prompt_enhancer.trace")


class CompletionClient:
    """Async client for the chat-completion style enhancement endpoint.

    The credential is taken from `config` at construction; it is not re-read
    from the environment per call.
    """

    def __init__(self, config: EnhancerConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize the client.

        Args:
            config: Endpoint, referer, credential and transport timeout.
            transport: Optional `httpx` transport override (used by tests).
        """
        self.config = config
        self._transport = transport

    async def send(self, payload: dict) -> str:
        """POST `payload` and return the raw response body text.

        Args:
            payload: JSON-serializable completion request.

        Returns:
            Response body text, untrimmed.

        Raises:
            TransportFault: Endpoint answered with a non-2xx status.
            httpx.RequestError: Connection, DNS or transport timeout failure.
        """
        async with httpx.AsyncClient(
            timeout=self.config.http_timeout_seconds,
            headers=self._default_headers(),
            transport=self._transport,
        ) as client:
            response = await client.post(self.config.api_url, json=payload)

        if not response.is_success:
            raise TransportFault(response.status_code, response.text, response.reason_phrase)

        logger.debug("Completion endpoint answered %d (%d chars)", response.status_code, len(response.text))
        return response.text

    def _default_headers(self) -> dict[str, str]:
        """Build request headers, adding bearer auth when a key is configured."""
        headers = {
            "Content-Type": "application/json",
            "Referer": self.config.referer,
        }
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers
