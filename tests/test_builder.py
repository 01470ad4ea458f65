"""test suite for the formula builder helpers."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from abrasor.formula.builder import FormulaDraft, append_element
from abrasor.formula.parser import parse_formula
from abrasor.formula.serializer import render


class TestAppendElement:
    def test_first_element(self):
        assert append_element("", "input", "vw") == "vw"
        assert append_element("", "operator", "(") == "("

    def test_operator_spacing(self):
        assert append_element("vw", "operator", "*") == "vw * "

    def test_operand_after_operator(self):
        assert append_element("vw * ", "input", "ae") == "vw * ae"

    def test_opening_paren(self):
        assert append_element("vw * ", "operator", "(") == "vw * ("

    def test_operand_after_paren(self):
        assert append_element("vw * (", "number", "60") == "vw * (60"

    def test_palette_sequence_parses(self):
        text = ""
        for kind, value in [
            ("input", "vw"),
            ("operator", "*"),
            ("operator", "("),
            ("input", "ae"),
            ("operator", "+"),
            ("number", "60"),
            ("operator", ")"),
        ]:
            text = append_element(text, kind, value)
        assert render(parse_formula(text)) == "vw * (ae + 60)"


class TestFormulaDraft:
    def test_empty_draft(self):
        draft = FormulaDraft.from_text("   ")
        assert draft.is_empty
        assert not draft.is_valid

    def test_invalid_draft_is_not_empty(self):
        draft = FormulaDraft.from_text("vw +")
        assert not draft.is_empty
        assert not draft.is_valid
        assert draft.tree is None
        assert "end of formula" in draft.error

    def test_valid_draft_with_labels(self):
        draft = FormulaDraft.from_text("vw * ae", {"vw": "Work Speed"})
        assert draft.is_valid
        assert draft.error is None
        assert draft.tree.left.label == "Work Speed"

    def test_strict_draft(self):
        draft = FormulaDraft.from_text("vw ; ae", strict=True)
        assert draft.error is not None

    def test_append_keeps_strict_mode(self):
        draft = FormulaDraft.from_text("vw", strict=True).append("operator", "*")
        assert draft.strict
        final = draft.append("input", "ae$")
        assert final.strict
        assert final.error is not None

    def test_append_stays_lenient(self):
        final = FormulaDraft.from_text("vw").append("operator", "*").append("input", "ae$")
        assert final.is_valid

    def test_append_returns_new_draft(self):
        draft = FormulaDraft.from_text("vw")
        updated = draft.append("operator", "*")
        assert draft.text == "vw"
        assert draft.is_valid
        assert updated.text == "vw * "
        assert not updated.is_valid

        final = updated.append("number", "2")
        assert final.is_valid
        assert render(final.tree) == "vw * 2"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
