"""Prompt-to-payload adapter for enhancement requests.

Architectural role:
    Bridges the orchestration engine (which selects instruction text) to the
    transport client (which only posts JSON).

Model call flow:
    instruction + prompt (+ image) -> payload construction ->
    `client.CompletionClient.send(...)`.

Token behavior:
    Output length is capped with the fixed `MAX_TOKENS`; no input budgeting.

Determinism:
    Payload construction is deterministic for fixed inputs.
"""

from prompt_enhancer.core.task_types import TaskType
from prompt_enhancer.llm.provider_config import COMPLETION_MODEL, MAX_TOKENS, TEMPERATURE


def build_user_content(prompt: str, task_type: TaskType, image: str | None = None) -> list[dict]:
    """Build the multi-part user message content.

    Generation sends a single text part. Editing sends the instruction text
    part followed by the image reference part.
    """
    if task_type is TaskType.EDITING:
        return [
            {"type": "text", "text": f'User\'s instruction: "{prompt}"'},
            {"type": "image_url", "image_url": {"url": image}},
        ]
    return [{"type": "text", "text": "Prompt: " + prompt}]


def build_enhancement_payload(
    system_prompt: str,
    prompt: str,
    seed: int,
    task_type: TaskType,
    image: str | None = None,
) -> dict:
    """Assemble the completion request body.

    Args:
        system_prompt: Model/task instruction text from the catalog.
        prompt: Decoded user prompt.
        seed: Seed forwarded for reproducible completions.
        task_type: Generation or editing.
        image: Image reference, only used for editing.

    Returns:
        JSON-serializable payload with `messages`, `seed`, `model`,
        `temperature` and `max_tokens`.

    Parameter semantics:
        - `model="openai"`: fixed completion model tag.
        - `temperature=0.5`: moderate variation between seeds.
        - `max_tokens=400`: enough for one descriptive paragraph.
    """
    return {
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": build_user_content(prompt, task_type, image)},
        ],
        "seed": seed,
        "model": COMPLETION_MODEL,
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
    }
