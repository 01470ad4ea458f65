import logging
from typing import List, Optional

from .tokenizer import FormulaTokenizer, Token, TokenType
from .nodes import ExpressionNode, LiteralNode, VariableNode, BinaryOpNode
from ..domain.errors import (
    UnexpectedTokenError,
    UnexpectedEndOfInputError,
    TrailingTokensError,
)

logger = logging.getLogger(__name__)

ADDITIVE = ("+", "-")
MULTIPLICATIVE = ("*", "/")


class FormulaParser:
    """
    recursive descent parser for calculator formulas.

    grammar:
        additive       := multiplicative (("+" | "-") multiplicative)*
        multiplicative := primary (("*" | "/") primary)*
        primary        := NUMBER | IDENTIFIER | "(" additive ")"
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> Optional[ExpressionNode]:
        """
        parse the whole token sequence.

        returns None when there are no tokens at all (no formula entered).

        raises:
            UnexpectedTokenError: a token the grammar does not allow here
            UnexpectedEndOfInputError: input ran out mid-expression
            TrailingTokensError: tokens left over after a complete expression
        """
        if not self.tokens:
            return None

        # single operand needs no descent
        if len(self.tokens) == 1 and self.tokens[0].type in (TokenType.NUMBER, TokenType.IDENTIFIER):
            return self._operand(self._consume())

        node = self._parse_additive()
        if self.pos < len(self.tokens):
            raise TrailingTokensError(self.tokens[self.pos:])
        return node

    def _peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _consume(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            t = self.tokens[self.pos]
            self.pos += 1
            return t
        return None

    def _at_operator(self, operators) -> bool:
        t = self._peek()
        return t is not None and t.type == TokenType.OPERATOR and t.value in operators

    def _parse_additive(self) -> ExpressionNode:
        node = self._parse_multiplicative()
        while self._at_operator(ADDITIVE):
            op = self._consume()
            node = BinaryOpNode(operator=op.value, left=node, right=self._parse_multiplicative())
        return node

    def _parse_multiplicative(self) -> ExpressionNode:
        node = self._parse_primary()
        while self._at_operator(MULTIPLICATIVE):
            op = self._consume()
            node = BinaryOpNode(operator=op.value, left=node, right=self._parse_primary())
        return node

    def _parse_primary(self) -> ExpressionNode:
        token = self._consume()
        if token is None:
            raise UnexpectedEndOfInputError("a number, variable or '('")

        if token.type in (TokenType.NUMBER, TokenType.IDENTIFIER):
            return self._operand(token)

        if token.type == TokenType.LPAREN:
            node = self._parse_additive()
            closing = self._consume()
            if closing is None:
                raise UnexpectedEndOfInputError("')'")
            if closing.type != TokenType.RPAREN:
                raise UnexpectedTokenError(closing)
            return node

        raise UnexpectedTokenError(token)

    def _operand(self, token: Token) -> ExpressionNode:
        if token.type == TokenType.NUMBER:
            return LiteralNode(value=token.value)
        return VariableNode(name=token.value)


def parse(tokens: List[Token]) -> Optional[ExpressionNode]:
    return FormulaParser(tokens).parse()


def parse_formula(text: str, strict: bool = False) -> Optional[ExpressionNode]:
    """tokenize and parse formula text in one step."""
    tokens = FormulaTokenizer(strict=strict).tokenize(text)
    node = FormulaParser(tokens).parse()
    logger.debug(f"parsed {text!r} into {node!r}")
    return node
