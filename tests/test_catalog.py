"""Tests for the instruction catalog."""

import pytest

from prompt_enhancer.core.task_types import InstructionSet, TaskType
from prompt_enhancer.instructions.catalog import (
    FLUX_GENERATION,
    GENERIC_INSTRUCTIONS,
    KONTEXT_EDITING,
    InstructionCatalog,
    normalize_model,
)


class TestLookup:
    """Tests for InstructionCatalog.lookup."""

    @pytest.mark.parametrize("model", ["gptimage", "kontext", "flux", "turbo"])
    def test_known_models_have_generation(self, catalog, model):
        assert catalog.lookup(model).generation_prompt

    def test_lookup_is_case_insensitive(self, catalog):
        assert catalog.lookup("FLUX") is catalog.lookup("flux")
        assert catalog.lookup("  Kontext ").editing_prompt == KONTEXT_EDITING

    def test_unknown_model_gets_generic_fallback(self, catalog):
        instructions = catalog.lookup("stable-cascade")
        assert instructions is GENERIC_INSTRUCTIONS
        assert instructions.generation_prompt
        assert instructions.editing_prompt is None

    @pytest.mark.parametrize("model", [None, "", "   "])
    def test_blank_model_gets_generic_fallback(self, catalog, model):
        assert catalog.lookup(model) is GENERIC_INSTRUCTIONS


class TestCapabilities:
    """Tests for the task capability matrix."""

    @pytest.mark.parametrize(
        "model,editing",
        [("gptimage", True), ("kontext", True), ("flux", False), ("turbo", False), ("other", False)],
    )
    def test_editing_support(self, catalog, model, editing):
        assert catalog.supports(model, TaskType.EDITING) is editing
        assert catalog.supports(model, TaskType.GENERATION)

    def test_instruction_for_selects_task_field(self, catalog):
        assert catalog.instruction_for("flux", TaskType.GENERATION) == FLUX_GENERATION
        assert catalog.instruction_for("flux", TaskType.EDITING) is None

    def test_supported_models_sorted(self, catalog):
        assert catalog.supported_models() == ["flux", "gptimage", "kontext", "turbo"]
        assert "FLUX" in catalog
        assert "other" not in catalog


class TestCustomEntries:
    """Tests for catalogs built from explicit entries."""

    def test_entry_keys_are_normalized(self):
        catalog = InstructionCatalog({"MyModel": InstructionSet("gen", "edit")})
        assert catalog.lookup("mymodel").editing_prompt == "edit"

    def test_custom_fallback(self):
        fallback = InstructionSet(None, None)
        catalog = InstructionCatalog({}, fallback=fallback)
        assert catalog.lookup("flux") is fallback
        assert not catalog.supports("flux", TaskType.GENERATION)

    def test_catalog_entries_are_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog._entries["flux"] = GENERIC_INSTRUCTIONS


def test_normalize_model():
    assert normalize_model(" GPTImage ") == "gptimage"
    assert normalize_model(None) == ""


def test_task_type_from_image():
    assert TaskType.from_image(None) is TaskType.GENERATION
    assert TaskType.from_image("") is TaskType.GENERATION
    assert TaskType.from_image("data:image/png;base64,AAA") is TaskType.EDITING
