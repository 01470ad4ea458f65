"""
formula language for calculator definitions.

binary + - * / over named inputs and decimal literals, with parentheses.
"""
from .tokenizer import FormulaTokenizer, Token, TokenType, tokenize
from .nodes import (
    ExpressionNode,
    LiteralNode,
    VariableNode,
    BinaryOpNode,
    PRECEDENCE,
    variables,
    attach_labels,
    strip_labels,
)
from .parser import FormulaParser, parse, parse_formula
from .evaluator import Evaluator, evaluate
from .serializer import FormulaDocument, render, to_document, from_document, dump_formula, load_formula
from .builder import FormulaDraft, append_element

__all__ = [
    "FormulaTokenizer",
    "Token",
    "TokenType",
    "tokenize",
    "ExpressionNode",
    "LiteralNode",
    "VariableNode",
    "BinaryOpNode",
    "PRECEDENCE",
    "variables",
    "attach_labels",
    "strip_labels",
    "FormulaParser",
    "parse",
    "parse_formula",
    "Evaluator",
    "evaluate",
    "FormulaDocument",
    "render",
    "to_document",
    "from_document",
    "dump_formula",
    "load_formula",
    "FormulaDraft",
    "append_element",
]
