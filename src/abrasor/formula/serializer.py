"""text and document forms of formula trees."""
import re
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ValidationError

from .nodes import ExpressionNode, LiteralNode, VariableNode, BinaryOpNode, PRECEDENCE
from ..domain.errors import InvalidDocumentError

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def render(node: ExpressionNode) -> str:
    """
    render a tree as formula text that parses back to the same tree.

    a child is parenthesized when it binds looser than its parent, or when it
    is the right operand at the same level (operators fold left on re-parse).
    """
    if isinstance(node, LiteralNode):
        return node.value
    if isinstance(node, VariableNode):
        return node.name
    if isinstance(node, BinaryOpNode):
        left = render(node.left)
        right = render(node.right)
        level = PRECEDENCE[node.operator]
        if isinstance(node.left, BinaryOpNode) and PRECEDENCE[node.left.operator] < level:
            left = f"({left})"
        if isinstance(node.right, BinaryOpNode) and PRECEDENCE[node.right.operator] <= level:
            right = f"({right})"
        return f"{left} {node.operator} {right}"
    raise TypeError(f"Invalid expression node: {type(node).__name__}")


class FormulaDocument(BaseModel):
    """stored shape of a formula, as kept in a calculator definition."""
    type: Literal["operator", "number", "input", "function"]
    value: str
    label: Optional[str] = None
    children: Optional[List["FormulaDocument"]] = None
    id: Optional[str] = None  # legacy list key from older editors, ignored


FormulaDocument.model_rebuild()


def to_document(node: ExpressionNode) -> FormulaDocument:
    if isinstance(node, LiteralNode):
        return FormulaDocument(type="number", value=node.value)
    if isinstance(node, VariableNode):
        return FormulaDocument(type="input", value=node.name, label=node.label)
    if isinstance(node, BinaryOpNode):
        return FormulaDocument(
            type="operator",
            value=node.operator,
            children=[to_document(node.left), to_document(node.right)],
        )
    raise TypeError(f"Invalid expression node: {type(node).__name__}")


def from_document(doc: Union[FormulaDocument, Dict[str, Any]]) -> ExpressionNode:
    """
    rebuild a tree from its stored form.

    raises:
        InvalidDocumentError: if the document is not a well-formed tree
    """
    if not isinstance(doc, FormulaDocument):
        try:
            doc = FormulaDocument.model_validate(doc)
        except ValidationError as e:
            raise InvalidDocumentError(f"Malformed formula document: {e}") from e

    if doc.type == "function":
        raise InvalidDocumentError(f"Function nodes are not supported: '{doc.value}'")

    if doc.type == "operator":
        if not doc.children or len(doc.children) != 2:
            raise InvalidDocumentError(f"Operator '{doc.value}' must have exactly two children")
        try:
            return BinaryOpNode(
                operator=doc.value,
                left=from_document(doc.children[0]),
                right=from_document(doc.children[1]),
            )
        except ValidationError as e:
            raise InvalidDocumentError(f"Unsupported operator '{doc.value}'") from e

    if doc.children:
        raise InvalidDocumentError(f"Leaf node '{doc.value}' cannot have children")

    if doc.type == "number":
        try:
            return LiteralNode(value=doc.value)
        except ValidationError as e:
            raise InvalidDocumentError(f"Invalid number literal '{doc.value}'") from e

    # older editors stored raw formula text in a single input node
    if not IDENTIFIER_PATTERN.match(doc.value):
        raise InvalidDocumentError(f"Invalid input name '{doc.value}'")
    return VariableNode(name=doc.value, label=doc.label)


def dump_formula(node: ExpressionNode) -> str:
    return to_document(node).model_dump_json(exclude_none=True)


def load_formula(data: str) -> ExpressionNode:
    try:
        doc = FormulaDocument.model_validate_json(data)
    except ValidationError as e:
        raise InvalidDocumentError(f"Malformed formula document: {e}") from e
    return from_document(doc)
