from typing import Mapping

from .nodes import ExpressionNode, LiteralNode, VariableNode, BinaryOpNode
from .serializer import render
from ..domain.errors import UnboundVariableError, DivisionByZeroError


class Evaluator:
    """evaluates formula trees against a fixed set of variable bindings."""

    def __init__(self, bindings: Mapping[str, float]):
        self.bindings = bindings  # {"vw": 30, "ae": 0.2}

    def eval(self, node: ExpressionNode) -> float:
        if isinstance(node, LiteralNode):
            return float(node.value)

        if isinstance(node, VariableNode):
            if node.name not in self.bindings:
                raise UnboundVariableError(node.name)
            return float(self.bindings[node.name])

        if isinstance(node, BinaryOpNode):
            left = self.eval(node.left)
            right = self.eval(node.right)

            op = node.operator
            if op == "+": return left + right
            if op == "-": return left - right
            if op == "*": return left * right
            if op == "/":
                if right == 0:
                    raise DivisionByZeroError(render(node.right))
                return left / right

            raise ValueError(f"Unsupported operator {op}")

        raise TypeError(f"Invalid expression node: {type(node).__name__}")


def evaluate(node: ExpressionNode, bindings: Mapping[str, float]) -> float:
    return Evaluator(bindings).eval(node)
