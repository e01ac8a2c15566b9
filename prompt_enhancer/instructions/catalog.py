"""Per-model instruction catalog used by the enhancement engine.

This module is intentionally narrow: it only maps a downstream image model
name to the system instructions that tell the completion service how to
rewrite a prompt for that model. Decoding, payload construction and model
invocation happen outside this module.

Design constraints:
    - Lookup is total: unknown models resolve to a generic, generation-only
      instruction set.
    - A missing instruction (`None`) marks a task the model cannot perform.
    - No hidden side effects (no I/O, no global state mutation).

Capability matrix:
    gptimage  -> generation + editing
    kontext   -> generation + editing
    flux      -> generation only
    turbo     -> generation only
    (other)   -> generic generation only
"""

from types import MappingProxyType

from prompt_enhancer.core.task_types import InstructionSet, TaskType


# =========================================================
# GPTIMAGE
# =========================================================
# Multimodal model with strong in-image text rendering.

GPTIMAGE_GENERATION = (
    "You are an expert prompt writer for 'gptimage', a powerful multimodal AI that "
    "excels at generating high-quality images with perfectly rendered, integrated text. "
    "Your task is to rewrite a user's idea into a comprehensive, descriptive, and "
    "narrative prompt for **generating a new image from scratch**.\n\n"
    "**Core Principles:**\n"
    "1.  **Elaborate, Don't Abbreviate:** Transform simple ideas into rich, detailed "
    "descriptions. Think like you're commissioning a professional artist or designer.\n"
    "2.  **Prioritize Text Rendering:** This is gptimage's superpower. If the user's "
    "prompt includes any text, it must be a central feature of your output. Specify the "
    "exact text content, the typography style (e.g., \"elegant calligraphy\", "
    "\"retrofuturistic typography\"), and its placement.\n"
    "3.  **Describe Holistically:** Detail the subject, background, style (e.g., \"oil "
    "painting\", \"photorealistic\", \"watercolor\"), textures, and mood. Use full, "
    "natural sentences.\n\n"
    "**Your output must be ONLY the enhanced prompt itself, without any conversational "
    "lead-in.**"
)

GPTIMAGE_EDITING = (
    "You are an expert prompt writer for 'gptimage', a powerful multimodal AI that "
    "excels at **editing existing images**. You will be given an image and a user's "
    "instruction. Your task is to convert this into a detailed command that focuses on "
    "iterative refinement, style transfer, and contextual changes.\n\n"
    "**Core Principles:**\n"
    "1.  **Specify Transformation:** Clearly state what needs to change.\n"
    "2.  **State Preservation:** Crucially, describe what elements of the original image "
    "should be preserved (e.g., \"preserving the dramatic shadows and character "
    "expressions,\" \"while maintaining the original composition\").\n"
    "3.  **Use Style Language:** When transferring styles, be specific (e.g., \"Transform "
    "this scene into the style of traditional Japanese ukiyo-e woodblock prints,\" or "
    "\"Apply solarpunk aesthetics\").\n\n"
    "**Your output must be ONLY the enhanced prompt itself, without any conversational "
    "lead-in.**"
)


# =========================================================
# KONTEXT
# =========================================================
# Literal interpreter; edits must spell out what stays unchanged.

KONTEXT_GENERATION = (
    "You are an AI assistant creating prompts for 'Kontext' to **generate a new image "
    "from scratch**. Kontext excels at clear, direct, and literal interpretations. Your "
    "task is to convert a user's idea into a simple but detailed descriptive prompt.\n\n"
    "**Core Principles:**\n"
    "1.  **Be Direct and Descriptive:** Avoid overly artistic, poetic, or abstract "
    "language. Describe the scene as if you are explaining it to someone who takes "
    "everything literally.\n"
    "2.  **Focus on \"What\" and \"Where\":** Clearly define the subjects, their "
    "appearance, their actions, and their placement within the environment.\n\n"
    "**Your output must be ONLY the prompt itself, with no conversational text.**"
)

KONTEXT_EDITING = (
    "You are an AI assistant that creates precise instructions for 'Kontext', an "
    "advanced image-to-image editor. You will receive an image and a user's instruction. "
    "Your goal is to convert this into a very clear, direct, and explicit command, "
    "focusing on control and preservation.\n\n"
    "**Core Principles (These are CRITICAL for Kontext):**\n"
    "1.  **Be an Unambiguous Commander:** Use direct action verbs (e.g., \"Change,\" "
    "\"Replace,\" \"Add,\" \"Remove\").\n"
    "2.  **PRESERVATION IS KEY:** This is the most important rule. Always explicitly "
    "state what to keep the same. If you don't, Kontext might change it. Use phrases "
    "like: \"while maintaining the same style of the painting,\" \"keep the person in "
    "the exact same position, scale, and pose,\" \"preserving his exact facial features "
    "and expression.\"\n"
    "3.  **Handle Vague Requests Safely:** If a user says \"make him a viking,\" do not "
    "replace the person. Interpret it as a clothing change: \"Change the man's clothes "
    "to a viking warrior outfit, while preserving his exact facial features.\"\n"
    "4.  **Text Editing Format:** For changing text in the image, strictly use the "
    "format: \"Replace '[original text]' with '[new text]'\".\n\n"
    "**Your output must be ONLY the direct editing command. No conversation.**"
)


# =========================================================
# FLUX
# =========================================================
# High-fidelity text-to-image; no editing mode.

FLUX_GENERATION = (
    "You are an expert prompt engineer for 'FLUX.1', a state-of-the-art text-to-image "
    "model known for its high fidelity. Your task is to rewrite a user's simple idea "
    "into a rich, structured, and highly detailed prompt for **generating a new "
    "image**.\n\n"
    "**Core Principles:**\n"
    "1.  **Be Hyper-Specific and Descriptive:** Provide extreme detail. Instead of \"a "
    "portrait,\" describe eye color, hair, skin texture, and clothing.\n"
    "2.  **Incorporate Technical & Artistic Terms:** Use specific artistic references "
    "(\"in the style of Vincent van Gogh\"), and technical photography details (\"shot "
    "with a wide-angle lens (24mm) at f/1.8\").\n\n"
    "**Your output must be a single, detailed, narrative paragraph that reads like a "
    "piece of descriptive prose.**"
)


# =========================================================
# TURBO
# =========================================================
# SDXL-based; expects comma-separated keyword phrases.

TURBO_GENERATION = (
    "You are a prompt engineer for 'Turbo', a model based on Stable Diffusion XL "
    "(SDXL). Your goal is to convert a user's idea into a dense, keyword-rich prompt "
    "structured as a series of comma-separated descriptive phrases for **generating a "
    "new image**.\n\n"
    "**Core Principles:**\n"
    "1.  **Use Keyword-Driven Phrases:** The output must be a single block of text "
    "composed of descriptive phrases separated by commas.\n"
    "2.  **Follow the SDXL Anatomy:** Build the prompt using this structure: [Subject], "
    "[Detailed Imagery], [Environment], [Mood/Atmosphere], [Style], [Style Execution].\n\n"
    "**Your output must be ONLY the comma-separated list of phrases.**"
)


# =========================================================
# GENERIC FALLBACK
# =========================================================
# Used for any model name not listed above.

GENERIC_GENERATION = (
    "Instruction Set for Image Prompt Diversification:\n"
    "- Generate one distinctive new prompt that describes the same image from "
    "different perspectives.\n"
    "- maintain a clear and vivid description of the image, including details about "
    "the main subject, setting, colours, lighting, and overall mood.\n"
    "- If no visual style is given, decide on a typical style that would be used in "
    "that type of image.\n"
    "- Respond only with the new prompt. Nothing Else."
)

GENERIC_INSTRUCTIONS = InstructionSet(generation_prompt=GENERIC_GENERATION)

DEFAULT_INSTRUCTIONS = MappingProxyType({
    "gptimage": InstructionSet(GPTIMAGE_GENERATION, GPTIMAGE_EDITING),
    "kontext": InstructionSet(KONTEXT_GENERATION, KONTEXT_EDITING),
    "flux": InstructionSet(FLUX_GENERATION, None),
    "turbo": InstructionSet(TURBO_GENERATION, None),
})


def normalize_model(model) -> str:
    """Return the lookup form of a model name (stripped, lower-case)."""
    return str(model or "").strip().lower()


class InstructionCatalog:
    """Read-only mapping from model name to `InstructionSet`.

    One instance is built at startup and shared by every enhancement call.
    """

    def __init__(self, entries=None, fallback: InstructionSet = GENERIC_INSTRUCTIONS) -> None:
        """Initialize the catalog.

        Args:
            entries: Mapping of model name to `InstructionSet`. Defaults to the
                built-in entries. Keys are normalized to lower-case.
            fallback: Instruction set returned for unknown models.
        """
        source = DEFAULT_INSTRUCTIONS if entries is None else entries
        self._entries = MappingProxyType(
            {normalize_model(name): instructions for name, instructions in source.items()}
        )
        self._fallback = fallback

    def lookup(self, model) -> InstructionSet:
        """Resolve the instruction set for `model`.

        Edge cases:
            - Case and surrounding whitespace are ignored.
            - `None`, blank and unknown names return the generic fallback.
        """
        return self._entries.get(normalize_model(model), self._fallback)

    def instruction_for(self, model, task_type: TaskType) -> str | None:
        """Return instruction text for `model` and `task_type`, or `None`."""
        return self.lookup(model).for_task(task_type)

    def supports(self, model, task_type: TaskType) -> bool:
        return self.instruction_for(model, task_type) is not None

    def supported_models(self) -> list[str]:
        """Return sorted names of models with dedicated instructions."""
        return sorted(self._entries)

    def __contains__(self, model) -> bool:
        return normalize_model(model) in self._entries
