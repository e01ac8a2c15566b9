"""Enhancement data contracts for `prompt_enhancer.core.engine`.

Architectural role:
    Defines the minimal schema shared by the instruction catalog, the
    orchestration engine and the adapters: which task a request represents,
    which instructions a model carries, and what one enhancement call receives.

Control-flow interaction:
    `engine.PromptEnhancer.enhance` derives a `TaskType` from the presence of an
    image, asks the catalog for an `InstructionSet` and selects the field that
    matches the task.

Determinism:
    The data classes are purely structural and state-free.
"""

from dataclasses import dataclass
from enum import Enum


class TaskType(Enum):
    """Kind of image work the downstream model is asked to perform."""

    GENERATION = "Generation"
    EDITING = "Editing"

    @classmethod
    def from_image(cls, image) -> "TaskType":
        """Return `EDITING` for a present, non-empty image reference."""
        return cls.EDITING if image else cls.GENERATION


@dataclass(frozen=True)
class InstructionSet:
    """Per-model system instructions for the two task types.

    Attributes:
        generation_prompt: Instruction text for new-image prompts, or `None`.
        editing_prompt: Instruction text for image-edit prompts, or `None`
            when the model cannot edit existing images.
    """

    generation_prompt: str | None = None
    editing_prompt: str | None = None

    def for_task(self, task_type: TaskType) -> str | None:
        """Return the instruction text matching `task_type`, if any."""
        if task_type is TaskType.EDITING:
            return self.editing_prompt
        return self.generation_prompt


@dataclass(frozen=True)
class EnhancementRequest:
    """One inbound enhancement call.

    Attributes:
        prompt: Raw, possibly percent-encoded user prompt.
        model: Downstream image model name (case-insensitive).
        seed: Seed forwarded to the completion service.
        image: Optional encoded image reference (usually a `data:image` URL).
    """

    prompt: str
    model: str
    seed: int
    image: str | None = None

    @property
    def task_type(self) -> TaskType:
        return TaskType.from_image(self.image)
