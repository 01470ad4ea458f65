from enum import Enum, auto
from typing import List, NamedTuple
import logging
import re

from ..domain.errors import UnexpectedCharacterError

logger = logging.getLogger(__name__)


class TokenType(Enum):
    IDENTIFIER = auto()
    NUMBER = auto()
    OPERATOR = auto()
    LPAREN = auto()
    RPAREN = auto()


class Token(NamedTuple):
    type: TokenType
    value: str


class FormulaTokenizer:
    """
    tokenizer for calculator formulas.
    whitespace and any character outside the formula alphabet are separators;
    in strict mode the latter raise instead of being dropped.
    """

    # order matters!
    PATTERNS = [
        (TokenType.IDENTIFIER, re.compile(r'[A-Za-z_][A-Za-z0-9_]*')),
        (TokenType.NUMBER, re.compile(r'[0-9]+(?:\.[0-9]+)?')),
        (TokenType.OPERATOR, re.compile(r'[+\-*/]')),
        (TokenType.LPAREN, re.compile(r'\(')),
        (TokenType.RPAREN, re.compile(r'\)')),
    ]

    def __init__(self, strict: bool = False):
        self.strict = strict

    def tokenize(self, formula: str) -> List[Token]:
        tokens = []
        pos = 0
        length = len(formula)

        while pos < length:
            match = None
            for token_type, pattern in self.PATTERNS:
                match = pattern.match(formula, pos)
                if match:
                    value = match.group(0)
                    tokens.append(Token(token_type, value))
                    pos += len(value)
                    break

            if not match:
                char = formula[pos]
                if not char.isspace():
                    if self.strict:
                        raise UnexpectedCharacterError(char, pos)
                    logger.debug(f"dropping unrecognized character {char!r} at {pos}")
                pos += 1

        return tokens


def tokenize(text: str) -> List[Token]:
    """tokenize formula text, silently dropping unrecognized characters."""
    return FormulaTokenizer().tokenize(text)
