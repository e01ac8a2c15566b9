"""Fault taxonomy for the enhancement pipeline.

Every fault defined here is recovered inside `prompt_enhancer.core.engine`;
callers of `PromptEnhancer.enhance` never see them. They exist so that the
error log channel can tell the failure modes apart.
"""


class EnhancementFault(RuntimeError):
    """Base class for recoverable enhancement failures."""


class DecodeFault(EnhancementFault):
    """Prompt text carried an invalid percent-encoded byte sequence."""


class TransportFault(EnhancementFault):
    """Completion endpoint answered with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the endpoint.
        body: Response body text, kept for diagnostics only.
    """

    def __init__(self, status_code: int, body: str = "", reason: str = ""):
        self.status_code = status_code
        self.body = body
        self.reason = reason
        super().__init__(
            f"Error enhancing prompt: {status_code} - {reason}. Body: {body}"
        )


class TimeoutFault(EnhancementFault):
    """Completion endpoint did not answer before the enhancement deadline."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Timeout after {timeout_seconds:.3f}s")
