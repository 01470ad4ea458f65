from typing import List, Optional


class AbrasorError(Exception):
    """base class for exceptions in Abrasor."""
    pass


class FormulaError(AbrasorError):
    """base class for formula authoring and evaluation failures."""
    pass


class UnexpectedCharacterError(FormulaError):
    """raised by the strict tokenizer for a character outside the formula alphabet."""
    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(f"Unexpected character {char!r} at position {position}")


class FormulaParseError(FormulaError):
    """raised when formula text is not a well-formed expression."""
    pass


class UnexpectedTokenError(FormulaParseError):
    def __init__(self, token, message: Optional[str] = None):
        self.token = token
        super().__init__(message or f"Unexpected token '{token.value}'")


class UnexpectedEndOfInputError(FormulaParseError):
    def __init__(self, expected: str):
        self.expected = expected
        super().__init__(f"Unexpected end of formula, expected {expected}")


class TrailingTokensError(UnexpectedTokenError):
    """a complete expression followed by tokens that were never consumed."""
    def __init__(self, tokens: list):
        self.tokens = tokens
        trailing = " ".join(t.value for t in tokens)
        super().__init__(tokens[0], f"Unexpected trailing tokens: {trailing}")


class FormulaEvalError(FormulaError):
    """raised when a parsed formula cannot be evaluated."""
    pass


class UnboundVariableError(FormulaEvalError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No value supplied for variable '{name}'")


class DivisionByZeroError(FormulaEvalError):
    def __init__(self, divisor: Optional[str] = None):
        self.divisor = divisor
        if divisor:
            super().__init__(f"Division by zero: '{divisor}' evaluated to 0")
        else:
            super().__init__("Division by zero")


class InvalidDocumentError(FormulaError):
    """raised when a stored formula document does not describe a valid tree."""
    pass


class CalculatorValidationError(AbrasorError):
    """raised when a calculator definition cannot be saved."""
    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("; ".join(problems))


class CalculatorNotFoundError(AbrasorError):
    def __init__(self, calculator_id: str):
        self.calculator_id = calculator_id
        super().__init__(f"Calculator '{calculator_id}' not found")


class CalculatorDisabledError(AbrasorError):
    def __init__(self, calculator_id: str):
        self.calculator_id = calculator_id
        super().__init__(f"Calculator '{calculator_id}' is disabled")
