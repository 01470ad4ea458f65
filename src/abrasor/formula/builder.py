"""helpers for building formulas one palette element at a time."""
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .nodes import ExpressionNode, attach_labels
from .parser import parse_formula
from ..domain.errors import FormulaError

ElementKind = Literal["input", "number", "operator"]


def append_element(text: str, kind: ElementKind, value: str) -> str:
    """
    append a palette element to formula text with editor spacing.

    parentheses count as operators here.
    """
    if not text:
        return value

    new_text = text
    if kind == "operator":
        # space before operators, except opening parenthesis
        if value != "(" and not text.endswith(" ") and not text.endswith("("):
            new_text += " "
        new_text += value
        # space after operators, except parentheses
        if value not in ("(", ")"):
            new_text += " "
    else:
        if not text.endswith(" ") and not text.endswith("("):
            new_text += " "
        new_text += value
    return new_text


class FormulaDraft(BaseModel):
    """
    a snapshot of the formula being edited.

    every edit produces a new draft; tree and error are never both set.
    """
    model_config = ConfigDict(frozen=True)

    text: str = ""
    tree: Optional[ExpressionNode] = None
    error: Optional[str] = None
    strict: bool = False

    @classmethod
    def from_text(cls, text: str, labels: Optional[Mapping[str, str]] = None, strict: bool = False) -> "FormulaDraft":
        try:
            tree = parse_formula(text, strict=strict)
        except FormulaError as e:
            return cls(text=text, error=str(e), strict=strict)
        if tree is not None and labels:
            tree = attach_labels(tree, labels)
        return cls(text=text, tree=tree, strict=strict)

    @property
    def is_empty(self) -> bool:
        """nothing entered yet, as opposed to entered but invalid."""
        return self.tree is None and self.error is None

    @property
    def is_valid(self) -> bool:
        return self.tree is not None

    def append(self, kind: ElementKind, value: str, labels: Optional[Mapping[str, str]] = None) -> "FormulaDraft":
        return FormulaDraft.from_text(append_element(self.text, kind, value), labels, strict=self.strict)
