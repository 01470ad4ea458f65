"""expression tree for calculator formulas."""
from typing import Dict, List, Literal, Mapping, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

Operator = Literal["+", "-", "*", "/"]

PRECEDENCE: Dict[str, int] = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
}

NUMBER_PATTERN = r"^[0-9]+(\.[0-9]+)?$"


class LiteralNode(BaseModel):
    """numeric constant, kept as text until evaluation."""
    model_config = ConfigDict(frozen=True)

    value: str = Field(pattern=NUMBER_PATTERN)


class VariableNode(BaseModel):
    """reference to a calculator input. label is display-only."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    label: Optional[str] = None


class BinaryOpNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    operator: Operator
    left: "ExpressionNode"
    right: "ExpressionNode"


ExpressionNode = Union[LiteralNode, VariableNode, BinaryOpNode]

BinaryOpNode.model_rebuild()


def variables(node: ExpressionNode) -> List[str]:
    """names referenced by the tree, in first-occurrence order."""
    names: List[str] = []

    def walk(n: ExpressionNode):
        if isinstance(n, VariableNode):
            if n.name not in names:
                names.append(n.name)
        elif isinstance(n, BinaryOpNode):
            walk(n.left)
            walk(n.right)

    walk(node)
    return names


def strip_labels(node: ExpressionNode) -> ExpressionNode:
    return attach_labels(node, {})


def attach_labels(node: ExpressionNode, labels: Mapping[str, str]) -> ExpressionNode:
    """
    return a copy of the tree with variable labels looked up by name.

    names missing from the mapping end up unlabelled.
    """
    if isinstance(node, VariableNode):
        label = labels.get(node.name)
        if label == node.label:
            return node
        return node.model_copy(update={"label": label})
    if isinstance(node, BinaryOpNode):
        return node.model_copy(update={
            "left": attach_labels(node.left, labels),
            "right": attach_labels(node.right, labels),
        })
    return node
