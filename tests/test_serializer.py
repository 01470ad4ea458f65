"""test suite for rendering and document conversion."""
import json
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from abrasor.formula.tokenizer import tokenize
from abrasor.formula.parser import parse, parse_formula
from abrasor.formula.nodes import LiteralNode, VariableNode, BinaryOpNode, strip_labels
from abrasor.formula.serializer import (
    FormulaDocument,
    render,
    to_document,
    from_document,
    dump_formula,
    load_formula,
)
from abrasor.domain.errors import InvalidDocumentError


def var(name, label=None):
    return VariableNode(name=name, label=label)


def num(value):
    return LiteralNode(value=value)


def op(operator, left, right):
    return BinaryOpNode(operator=operator, left=left, right=right)


class TestRender:
    def test_leaves(self):
        assert render(num("60")) == "60"
        assert render(var("vw", "Work Speed")) == "vw"

    def test_flat(self):
        assert render(parse_formula("vw*ae/60")) == "vw * ae / 60"

    def test_no_parens_for_higher_precedence_child(self):
        assert render(parse_formula("a + b * c")) == "a + b * c"
        assert render(parse_formula("(a * b) + c")) == "a * b + c"

    def test_parens_for_lower_precedence_child(self):
        assert render(parse_formula("(a + b) * c")) == "(a + b) * c"
        assert render(parse_formula("a / (b - c)")) == "a / (b - c)"

    def test_parens_for_right_nested_same_level(self):
        assert render(parse_formula("vs / (vw / 60)")) == "vs / (vw / 60)"
        assert render(parse_formula("a - (b - c)")) == "a - (b - c)"
        assert render(parse_formula("a + (b + c)")) == "a + (b + c)"

    def test_redundant_parens_removed(self):
        assert render(parse_formula("((a)) + ((b * c))")) == "a + b * c"


class TestRoundTrip:
    TREES = [
        num("42"),
        var("vw"),
        op("/", op("*", var("vw"), var("ae")), num("60")),
        op("/", var("vs"), op("/", var("vw"), num("60"))),
        op("-", var("a"), op("-", var("b"), var("c"))),
        op("-", op("-", var("a"), var("b")), var("c")),
        op("*", op("+", var("a"), var("b")), op("-", var("c"), num("1.5"))),
        op("+", op("*", var("a"), var("b")), op("/", var("c"), var("d"))),
        op("-", var("a"), op("+", var("b"), var("c"))),
        op("+", var("a"), op("-", var("b"), var("c"))),
        op("/", var("a"), op("*", var("b"), var("c"))),
        op("*", var("a"), op("/", var("b"), var("c"))),
        op("/", op("+", num("1"), op("*", num("2"), op("-", num("3"), num("4")))), var("x")),
    ]

    @pytest.mark.parametrize("tree", TREES, ids=[render(t) for t in TREES])
    def test_render_then_parse(self, tree):
        assert parse(tokenize(render(tree))) == tree

    def test_labels_are_not_recovered(self):
        tree = op("*", var("vw", "Work Speed"), var("ae", "Depth of Cut"))
        assert parse(tokenize(render(tree))) == strip_labels(tree)


class TestDocuments:
    def test_to_document_shape(self):
        tree = op("*", var("vw", "Work Speed"), num("60"))
        doc = to_document(tree)
        assert doc.model_dump(exclude_none=True) == {
            "type": "operator",
            "value": "*",
            "children": [
                {"type": "input", "value": "vw", "label": "Work Speed"},
                {"type": "number", "value": "60"},
            ],
        }

    def test_from_document_keeps_labels(self):
        tree = op("-", var("vs", "Wheel Speed"), op("/", var("vw"), num("60")))
        assert from_document(to_document(tree)) == tree

    def test_from_dict(self):
        tree = from_document({
            "id": "f1",
            "type": "operator",
            "value": "/",
            "children": [
                {"id": "f2", "type": "input", "value": "vs", "label": "Wheel Speed"},
                {"id": "f3", "type": "number", "value": "60"},
            ],
        })
        assert tree == op("/", var("vs", "Wheel Speed"), num("60"))

    def test_dump_and_load(self):
        tree = parse_formula("vw * ae / 60")
        data = dump_formula(tree)
        assert json.loads(data)["type"] == "operator"
        assert "label" not in json.loads(data)["children"][1]
        assert load_formula(data) == tree

    def test_function_nodes_rejected(self):
        with pytest.raises(InvalidDocumentError):
            from_document({"type": "function", "value": "sqrt", "children": [{"type": "number", "value": "4"}]})

    def test_operator_arity(self):
        with pytest.raises(InvalidDocumentError):
            from_document({"type": "operator", "value": "+", "children": [{"type": "number", "value": "1"}]})
        with pytest.raises(InvalidDocumentError):
            from_document({"type": "operator", "value": "+"})

    def test_unknown_operator(self):
        with pytest.raises(InvalidDocumentError):
            from_document({
                "type": "operator",
                "value": "^",
                "children": [{"type": "number", "value": "2"}, {"type": "number", "value": "3"}],
            })

    def test_invalid_number(self):
        with pytest.raises(InvalidDocumentError):
            from_document({"type": "number", "value": "1e5"})

    def test_legacy_free_text_input(self):
        with pytest.raises(InvalidDocumentError):
            from_document({"type": "input", "value": "vw * ae", "label": "vw * ae"})

    def test_leaf_with_children(self):
        with pytest.raises(InvalidDocumentError):
            from_document({"type": "number", "value": "1", "children": [{"type": "number", "value": "2"}]})

    def test_malformed_document(self):
        with pytest.raises(InvalidDocumentError):
            from_document({"type": "bogus", "value": "1"})
        with pytest.raises(InvalidDocumentError):
            load_formula("not json")

    def test_document_model(self):
        doc = FormulaDocument(type="number", value="3")
        assert doc.children is None
        assert doc.label is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
