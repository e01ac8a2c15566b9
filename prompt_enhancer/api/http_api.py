"""
HTTP API adapter for the prompt enhancer.

Architectural role:
- Expose the enhancement pipeline over HTTP for image-generation front ends.
- Enforce adapter-level input validation.
- Delegate all enhancement work to the memoized entrypoint built by
  `prompt_enhancer.core.factory.build_enhancer`.

Endpoint responsibilities:
- `GET /v1/models`: list catalog models and their task capabilities.
- `POST /v1/prompts/enhance`: validate JSON input and enhance one prompt.
- `GET /prompt/{prompt}`: path-style enhancement with query parameters.

Input validation behavior:
- Missing/blank `prompt` -> HTTP 400.
- Missing/blank `model` -> HTTP 400.
- Non-integer `seed` -> HTTP 400.

Error handling strategy:
- Enhancement never fails; remote faults surface as the original prompt.
- Unexpected JSON parsing errors follow FastAPI default exception handling.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Builds the enhancement pipeline once at import time (no network I/O).
- Emits request logs on the trace channel only when `DEBUG == "true"`.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from prompt_enhancer.core.factory import build_enhancer
from prompt_enhancer.core.task_types import TaskType

app = FastAPI()
# Request debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"
DEFAULT_SEED = 42

logger = logging.getLogger("prompt_enhancer.trace")

_ENHANCER = build_enhancer()


def set_enhancer(enhancer) -> None:
    """Replace the enhancement entrypoint used by all endpoints.

    Args:
        enhancer: Async callable `(prompt, model, seed, image=None) -> str`
            exposing a `catalog` attribute (an `InstructionCatalog`), as the
            `MemoizedEnhancer` returned by `build_enhancer` does. The catalog
            backs `GET /v1/models`.

    Raises:
        TypeError: `enhancer` is not callable or has no `catalog`.
    """
    if not callable(enhancer) or not hasattr(enhancer, "catalog"):
        raise TypeError("enhancer must be an async callable exposing a `catalog` attribute")
    global _ENHANCER
    _ENHANCER = enhancer


def get_enhancer():
    return _ENHANCER


def _error(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def _parse_seed(value):
    """Return `value` as int, `DEFAULT_SEED` when absent, `None` when invalid."""
    if value is None or value == "":
        return DEFAULT_SEED
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


async def _enhance(prompt, model, seed, image):
    """Run the enhancer and shape the response envelope."""
    task_type = TaskType.from_image(image)

    if DEBUG:
        logger.debug("HTTP enhance: model=%r seed=%r task=%s prompt=%r", model, seed, task_type.value, prompt)

    enhanced = await _ENHANCER(prompt, model, seed, image)

    return {
        "prompt": enhanced,
        "model": model,
        "seed": seed,
        "task_type": task_type.value,
    }


# ============================================================
# Model Listing
# ============================================================

@app.get("/v1/models")
def list_models():
    """
    Return catalog models with their supported task types.

    Response formatting:
    - `object: "list"`
    - `data[]` entries with `id`, `object`, `generation`, `editing`
    """
    catalog = _ENHANCER.catalog

    return {
        "object": "list",
        "data": [
            {
                "id": model,
                "object": "model",
                "generation": catalog.supports(model, TaskType.GENERATION),
                "editing": catalog.supports(model, TaskType.EDITING),
            }
            for model in catalog.supported_models()
        ]
    }


# ============================================================
# Prompt Enhancement
# ============================================================

@app.post("/v1/prompts/enhance")
async def enhance_prompt(request: Request):
    """
    Enhance one prompt described by a JSON body.

    Request body:
    - `prompt` (required): raw, possibly percent-encoded prompt.
    - `model` (required): downstream image model name.
    - `seed` (optional): integer, defaults to 42.
    - `image` (optional): image reference; selects the editing task.
    """
    body = await request.json()

    if not isinstance(body, dict):
        return _error("Request body must be a JSON object")

    prompt = body.get("prompt")
    model = body.get("model")

    if not isinstance(prompt, str) or not prompt.strip():
        return _error("No prompt provided")

    if not isinstance(model, str) or not model.strip():
        return _error("No model provided")

    seed = _parse_seed(body.get("seed"))
    if seed is None:
        return _error("Seed must be an integer")

    image = body.get("image") or None
    if image is not None and not isinstance(image, str):
        return _error("Image must be a string reference")

    return await _enhance(prompt, model, seed, image)


PATH_PROMPT_PREFIX = "/prompt/"


def _raw_path_prompt(request: Request, prompt: str) -> str:
    """Return the prompt path segment as sent, before router percent-decoding.

    Falls back to the router-decoded `prompt` when the server does not
    provide `raw_path` in the ASGI scope.
    """
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return prompt

    path = raw_path.decode("latin-1").split("?", 1)[0]
    root_path = request.scope.get("root_path", "")
    if root_path and path.startswith(root_path):
        path = path[len(root_path):]

    if not path.startswith(PATH_PROMPT_PREFIX):
        return prompt
    return path[len(PATH_PROMPT_PREFIX):]


@app.get("/prompt/{prompt}")
async def enhance_prompt_path(
    request: Request,
    prompt: str,
    model: str = "flux",
    seed: str | None = None,
    image: str | None = None,
):
    """
    Path-style enhancement, e.g. `GET /prompt/a%20cozy%20bookstore?model=flux&seed=42`.

    The raw, still percent-encoded path segment is forwarded so the engine
    decodes it exactly once: `/prompt/%2541` enhances the prompt `%41`.
    """
    if not prompt.strip():
        return _error("No prompt provided")

    if not model.strip():
        return _error("No model provided")

    parsed_seed = _parse_seed(seed)
    if parsed_seed is None:
        return _error("Seed must be an integer")

    return await _enhance(_raw_path_prompt(request, prompt), model, parsed_seed, image or None)
