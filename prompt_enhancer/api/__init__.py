"""Prompt enhancer adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level validation and response shaping.
- Delegates enhancement to the core layer.

Scope:
- No direct model invocation logic is implemented in this package.
"""
