"""Tests for the Streamlit host's widget callbacks."""

from app import apply_suggestion


class TestApplySuggestion:
    def test_picked_suggestion_fills_instruction(self):
        state = {"suggestion_simple": "Add a button", "instruction_simple": "old text"}
        apply_suggestion(state, "simple")
        assert state["instruction_simple"] == "Add a button"

    def test_blank_choice_keeps_typed_instruction(self):
        state = {"suggestion_simple": "", "instruction_simple": "Make it blue"}
        apply_suggestion(state, "simple")
        assert state["instruction_simple"] == "Make it blue"

    def test_only_the_named_editor_changes(self):
        state = {"suggestion_complex": "Optimize performance"}
        apply_suggestion(state, "complex")
        assert state == {
            "suggestion_complex": "Optimize performance",
            "instruction_complex": "Optimize performance",
        }
