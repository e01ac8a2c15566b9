"""Enhancement orchestration engine.

Architectural role:
    Turns one raw image prompt into a model-tailored prompt by delegating the
    rewrite to the remote completion service, and guarantees that a usable
    prompt comes back no matter what fails.

Control flow (`PromptEnhancer.enhance`):
    1. Best-effort percent-decode of the raw prompt.
    2. Task classification: editing iff an image reference is present.
    3. Instruction lookup in the injected `InstructionCatalog`.
    4. Early return of the decoded prompt when the model lacks instructions
       for the task.
    5. Payload construction via `prompt_enhancer.llm.service`.
    6. Dispatch through the injected `CompletionClient`, raced against a fixed
       deadline.
    7. Trimmed completion text on success, decoded prompt on any fault.

Concurrency:
    The remote call runs as its own task. `asyncio.wait` observes it up to the
    deadline; on timeout the task is left running (not cancelled) and its late
    result or error is collected by a done-callback and discarded.

Diagnostics:
    - `prompt_enhancer.error`: decode faults, unsupported tasks, transport and
      timeout faults.
    - `prompt_enhancer.trace`: task classification and request shape.
    - `prompt_enhancer.perf`: elapsed time of successful remote enhancements.
"""

import asyncio
import logging
import time
from urllib.parse import unquote

import httpx

from prompt_enhancer.core.errors import DecodeFault, TimeoutFault, TransportFault
from prompt_enhancer.core.task_types import EnhancementRequest, TaskType
from prompt_enhancer.instructions.catalog import InstructionCatalog
from prompt_enhancer.llm.client import CompletionClient
from prompt_enhancer.llm.provider_config import ENHANCE_TIMEOUT_SECONDS
from prompt_enhancer.llm.service import build_enhancement_payload


error_log = logging.getLogger("prompt_enhancer.error")
trace_log = logging.getLogger("prompt_enhancer.trace")
perf_log = logging.getLogger("prompt_enhancer.perf")


def decode_prompt(prompt) -> str:
    """Percent-decode a URI-component encoded prompt.

    `%XX` escapes are decoded as UTF-8; `+` is left as-is. Escapes that are
    not valid hex are kept literally while the rest still decode, so
    `a%20b%zz` becomes `a b%zz`.

    Raises:
        DecodeFault: Escapes form an invalid UTF-8 byte sequence.
    """
    text = "" if prompt is None else str(prompt)
    try:
        return unquote(text, errors="strict")
    except UnicodeDecodeError as exc:
        raise DecodeFault(f"Malformed percent-encoding in prompt: {exc}") from exc


class PromptEnhancer:
    """Orchestrates one prompt enhancement per call.

    Holds no per-call state; the catalog and client are shared across calls.
    """

    def __init__(
        self,
        catalog: InstructionCatalog,
        client: CompletionClient,
        timeout_seconds: float = ENHANCE_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the engine.

        Args:
            catalog: Model instruction lookup.
            client: Remote completion transport.
            timeout_seconds: Deadline raced against each remote call.
        """
        self.catalog = catalog
        self.client = client
        self.timeout_seconds = timeout_seconds
        # Strong references to in-flight remote calls, including race losers.
        self._pending: set[asyncio.Task] = set()

    async def enhance(self, prompt, model, seed, image=None) -> str:
        """Return a model-tailored version of `prompt`.

        Args:
            prompt: Raw user prompt, possibly percent-encoded.
            model: Downstream image model name (case-insensitive).
            seed: Seed forwarded to the completion service.
            image: Optional image reference; its presence selects editing.

        Returns:
            Trimmed completion text, or the decoded prompt when the model does
            not support the task or the remote call fails in any way.
        """
        try:
            prompt = decode_prompt(prompt)
        except DecodeFault as exc:
            error_log.warning("Error decoding prompt: %s", exc)
            prompt = "" if prompt is None else str(prompt)

        task_type = TaskType.from_image(image)
        trace_log.debug("Enhancing prompt for [%s] ([%s]): %r", model, task_type.value, prompt)

        system_prompt = self.catalog.instruction_for(model, task_type)
        if not system_prompt:
            error_log.warning(
                "Model %r does not support the requested task type %r. Returning original prompt.",
                model,
                task_type.value,
            )
            return prompt

        payload = build_enhancement_payload(system_prompt, prompt, seed, task_type, image)
        if image:
            trace_log.debug("Editing request carries image reference (%d chars)", len(image))

        started = time.monotonic()

        try:
            completion = await self._dispatch(payload)
        except TimeoutFault as exc:
            error_log.warning("Prompt enhancement timed out for [%s]: %s", model, exc)
            return prompt
        except TransportFault as exc:
            error_log.warning(
                "Prompt enhancement failed for [%s]: status=%d body=%r",
                model,
                exc.status_code,
                exc.body,
            )
            return prompt
        except httpx.RequestError as exc:
            error_log.warning("Prompt enhancement network error for [%s]: %s", model, exc)
            return prompt
        except Exception:
            error_log.exception("Unexpected error during prompt enhancement for [%s]", model)
            return prompt

        elapsed_ms = (time.monotonic() - started) * 1000
        perf_log.info("Prompt enhancement for [%s] took %dms", model, elapsed_ms)

        enhanced = completion.strip()
        if not enhanced:
            error_log.warning("Completion for [%s] was empty. Returning original prompt.", model)
            return prompt

        return enhanced

    async def enhance_request(self, request: EnhancementRequest) -> str:
        """Enhance a prompt described by an `EnhancementRequest`."""
        return await self.enhance(request.prompt, request.model, request.seed, request.image)

    async def _dispatch(self, payload: dict) -> str:
        """Race the remote call against the deadline.

        Returns:
            Raw completion text when the call settles first.

        Raises:
            TimeoutFault: Deadline elapsed first. The remote task keeps running.
            TransportFault / httpx.RequestError: Remote call settled first with
                a failure.
        """
        task = asyncio.create_task(self.client.send(payload))
        self._pending.add(task)
        task.add_done_callback(self._drain)

        done, _ = await asyncio.wait({task}, timeout=self.timeout_seconds)
        if task not in done:
            raise TimeoutFault(self.timeout_seconds)

        return task.result()

    def _drain(self, task: asyncio.Task) -> None:
        """Release a finished remote task and mark its outcome as retrieved."""
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            trace_log.debug("Remote enhancement call finished with %s", type(exc).__name__)

    @property
    def pending_calls(self) -> int:
        """Number of remote calls still running (including race losers)."""
        return len(self._pending)
