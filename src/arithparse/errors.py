"""
Error types and diagnostic messages for the arithmetic parser.

User-input problems are reported through result objects carrying an
ErrorKind and one of the fixed messages below. Exceptions are reserved
for limit violations and for internal consistency failures.
"""

from enum import Enum
from typing import Optional

# Diagnostics reported for invalid input or non-finite results
MSG_EMPTY_EXPRESSION = "no expression was provided"
MSG_OPERATOR_NOT_FOUND = "expected arithmetic operator not found"
MSG_VALUE_NOT_FOUND = "expected value or open parentheses not found"
MSG_UNBALANCED_PARENS = "unmatched parentheses in expression"
MSG_INFINITE_RESULT = "infinite result encountered: possible division by zero"
MSG_NO_ERROR = ""
MSG_RECURSION_LIMIT = "Limit exceeded: interpreter recursion limit reached during evaluation"

# Diagnostics for states that a well-formed token sequence never reaches
EXMSG_INVALID_OPERATOR = (
    "execution error: invalid operator encountered while parsing expression"
)
EXMSG_UNEXPECTED_TOKEN = (
    "execution error: unexpected token type encountered during evaluation"
)


class ErrorKind(Enum):
    """Classification of why an expression was rejected."""

    EMPTY_EXPRESSION = "EMPTY_EXPRESSION"
    VALUE_NOT_FOUND = "VALUE_NOT_FOUND"
    OPERATOR_NOT_FOUND = "OPERATOR_NOT_FOUND"
    UNBALANCED_PARENS = "UNBALANCED_PARENS"
    INFINITE_RESULT = "INFINITE_RESULT"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    INTERNAL = "INTERNAL"


class ExpressionError(Exception):
    """
    Base error class for all expression-related errors.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return self.message

        pointer = " " * self.position + "^"
        return f"{self.message}\n  {self.expression}\n  {pointer}"


class TokenizerError(ExpressionError):
    """
    Lexical failure of user input.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message, position, expression)
        self.kind = kind


class InternalError(ExpressionError):
    """
    Raised when the evaluator meets a token sequence the tokenizer
    should never have produced. Indicates a parser defect, not bad input.
    """

    pass


class LimitExceededError(ExpressionError):
    """
    Error thrown when expression limits are exceeded.
    """

    def __init__(self, limit_name: str, limit: int, actual: int):
        message = f"Limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual
