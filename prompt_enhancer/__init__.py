"""Prompt enhancer.

Rewrites raw image prompts into model-tailored prompts through a remote
completion service, falling back to the original prompt on any failure.

Typical use:
    enhancer = build_enhancer()
    prompt = await enhancer("a cozy bookstore", "flux", 42)
"""

from prompt_enhancer.core.factory import build_enhancer
from prompt_enhancer.core.task_types import EnhancementRequest, InstructionSet, TaskType

__all__ = ["build_enhancer", "EnhancementRequest", "InstructionSet", "TaskType"]
