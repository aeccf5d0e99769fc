"""
Token types produced by the tokenizer and consumed by the evaluator.

A successfully tokenized expression is a flat sequence of these tokens
in which operands and operators strictly alternate and parentheses are
balanced.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Sequence, Union

from .errors import EXMSG_INVALID_OPERATOR, InternalError


class Operator(Enum):
    """Binary arithmetic operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        for operator in cls:
            if operator.value == symbol:
                return operator
        raise InternalError(EXMSG_INVALID_OPERATOR)

    @property
    def is_multiplicative(self) -> bool:
        return self in (Operator.MUL, Operator.DIV)


@dataclass(frozen=True)
class TokenBase(ABC):
    """Base class for all tokens."""

    position: int
    """Position in source expression (for error reporting)."""


@dataclass(frozen=True)
class OpenParenToken(TokenBase):
    @property
    def type(self) -> Literal["OpenParen"]:
        return "OpenParen"


@dataclass(frozen=True)
class CloseParenToken(TokenBase):
    @property
    def type(self) -> Literal["CloseParen"]:
        return "CloseParen"


@dataclass(frozen=True)
class ValueToken(TokenBase):
    """Numeric literal, already converted to a float."""

    value: float

    negates_group: bool = False
    """Set on the -1 synthesized for a negated group such as -(2 + 3)."""

    @property
    def type(self) -> Literal["Value"]:
        return "Value"


@dataclass(frozen=True)
class OperatorToken(TokenBase):
    operator: Operator

    @property
    def type(self) -> Literal["Operator"]:
        return "Operator"


Token = Union[OpenParenToken, CloseParenToken, ValueToken, OperatorToken]


def tokens_to_string(tokens: Sequence[Token]) -> str:
    """Returns a compact, space-separated rendering of a token sequence for debugging."""
    parts = []
    for token in tokens:
        if isinstance(token, OpenParenToken):
            parts.append("(")
        elif isinstance(token, CloseParenToken):
            parts.append(")")
        elif isinstance(token, ValueToken):
            parts.append(f"{token.value:g}")
        else:
            parts.append(token.operator.value)
    return " ".join(parts)
