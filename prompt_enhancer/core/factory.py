"""Pipeline wiring for adapters.

Builds the catalog, transport client, engine and cache once and hands back
the memoized entrypoint. Adapters call `build_enhancer()` at startup and keep
the returned object for the life of the process.
"""

from prompt_enhancer.core.engine import PromptEnhancer
from prompt_enhancer.core.memoize import MemoizedEnhancer
from prompt_enhancer.instructions.catalog import InstructionCatalog
from prompt_enhancer.llm.client import CompletionClient
from prompt_enhancer.llm.provider_config import EnhancerConfig


def build_engine(config: EnhancerConfig | None = None, catalog: InstructionCatalog | None = None, transport=None) -> PromptEnhancer:
    """Construct an unmemoized `PromptEnhancer`.

    Args:
        config: Endpoint configuration; resolved from the environment when omitted.
        catalog: Instruction catalog; the built-in catalog when omitted.
        transport: Optional `httpx` transport passed to the client.
    """
    config = config or EnhancerConfig.from_env()
    return PromptEnhancer(
        catalog=catalog or InstructionCatalog(),
        client=CompletionClient(config, transport=transport),
        timeout_seconds=config.timeout_seconds,
    )


def build_enhancer(config: EnhancerConfig | None = None, catalog: InstructionCatalog | None = None, transport=None) -> MemoizedEnhancer:
    """Construct the memoized enhancement entrypoint.

    The returned callable has the signature
    `await enhancer(prompt, model, seed, image=None) -> str`; the underlying
    engine is reachable as `enhancer.engine`.
    """
    engine = build_engine(config, catalog, transport)
    enhancer = MemoizedEnhancer(engine.enhance)
    enhancer.engine = engine
    enhancer.catalog = engine.catalog
    return enhancer
