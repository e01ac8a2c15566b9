"""Core enhancement package.

Architectural role:
    Exposes the enhancement layer that sits between API/CLI entrypoints and the
    lower-level instruction catalog and completion transport.

Composition:
    - `engine`: decode, classify, dispatch with deadline, fall back.
    - `memoize`: process-lifetime result cache wrapping the engine.
    - `factory`: one-shot wiring of catalog, client, engine and cache.
    - `task_types`: shared data contracts.
    - `errors`: recoverable fault taxonomy.

Determinism and side effects:
    Package import itself is side-effect free. Network calls happen only inside
    `engine.PromptEnhancer.enhance`.
"""
