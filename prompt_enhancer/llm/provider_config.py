"""Completion-endpoint configuration for the enhancement layer.

Architectural role:
    Centralizes endpoint selection, fixed request parameters and credential
    lookup for `prompt_enhancer.llm.client`, `prompt_enhancer.llm.service` and
    `prompt_enhancer.core.engine`.

Model call flow integration:
    - `service.build_enhancement_payload` consumes `COMPLETION_MODEL`,
      `TEMPERATURE` and `MAX_TOKENS`.
    - `client.CompletionClient` consumes the endpoint URL, referer and key
      through an `EnhancerConfig` instance.
    - `engine.PromptEnhancer` consumes `ENHANCE_TIMEOUT_SECONDS`.

Determinism:
    Deterministic for a fixed process environment and key files. Module
    constants are resolved at import time; `EnhancerConfig.from_env` resolves
    the credential once, at construction of the pipeline.

Failure behavior:
    Missing key material is represented as `None`; the client then sends no
    `Authorization` header.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

# Completion endpoint (OpenAI-compatible chat payload, plain-text response body).
API_URL = os.getenv("ENHANCER_API_URL", "https://text.pollinations.ai/openai")

# Fixed identifying header sent with every completion request.
REFERER = os.getenv("ENHANCER_REFERER", "image.pollinations.ai")

# Environment variable holding the optional bearer credential.
API_KEY_ENV = "POLLINATIONS_KEY"

# Transport safety net for background calls that lost the timeout race.
HTTP_TIMEOUT_SECONDS = float(os.getenv("ENHANCER_HTTP_TIMEOUT_SECONDS", "30"))

# Fixed completion parameters.
COMPLETION_MODEL = "openai"
TEMPERATURE = 0.5
MAX_TOKENS = 400

# Enhancement deadline raced against the remote call.
ENHANCE_TIMEOUT_SECONDS = 7.0

# Marker identifying embedded image payloads (excluded from cache keys).
IMAGE_PAYLOAD_PREFIX = "data:image"


def load_key(env_name=API_KEY_ENV, key_file=None):
    """Load the completion API key from environment or key file.

    Resolution order:
        1. Environment variable `env_name`.
        2. Raw file contents at `key_file`.

    Args:
        env_name: Environment variable to read first.
        key_file: Optional key file path.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - Blank values (environment or file) return `None`.
        - Missing file returns `None`.
    """
    env_value = (os.getenv(env_name) or "").strip()
    if env_value:
        return env_value
    if not key_file or not os.path.exists(key_file):
        return None
    with open(key_file, "r") as f:
        return f.read().strip() or None


@dataclass(frozen=True)
class EnhancerConfig:
    """Runtime configuration for one enhancement pipeline.

    Relevant environment variables:
        - `ENHANCER_API_URL`
        - `ENHANCER_REFERER`
        - `ENHANCER_HTTP_TIMEOUT_SECONDS`
        - `POLLINATIONS_KEY`
        - `ENHANCER_KEY_FILE`
    """

    api_url: str = API_URL
    referer: str = REFERER
    api_key: str | None = None
    http_timeout_seconds: float = HTTP_TIMEOUT_SECONDS
    timeout_seconds: float = ENHANCE_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "EnhancerConfig":
        """Resolve endpoint settings and credential once from the environment."""
        return cls(
            api_url=os.getenv("ENHANCER_API_URL", API_URL),
            referer=os.getenv("ENHANCER_REFERER", REFERER),
            api_key=load_key(API_KEY_ENV, os.getenv("ENHANCER_KEY_FILE")),
            http_timeout_seconds=float(
                os.getenv("ENHANCER_HTTP_TIMEOUT_SECONDS", str(HTTP_TIMEOUT_SECONDS))
            ),
        )
