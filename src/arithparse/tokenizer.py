"""
Tokenizer (lexer) for arithmetic expressions.

The tokenizer is a small state machine. Each state tries to match one
grammatical category at the front of the unconsumed input, skipping any
leading whitespace as part of that match:

1. FIND_OPEN_PAREN: zero or more optionally signed "(".
2. FIND_VALUE: a signed decimal number. Required.
3. FIND_CLOSE_PAREN: zero or more ")", each closing a group still open.
4. FIND_OPERATOR: one of + - * /. On a match, go back to 1.
5. OPERATOR_NOT_FOUND: only whitespace may remain, and parentheses
   must balance.

Because operands and operators can only be appended in this order, a
successful token sequence always alternates operand and operator.
Precedence and grouping are left to the evaluator.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import (
    MSG_OPERATOR_NOT_FOUND,
    MSG_UNBALANCED_PARENS,
    MSG_VALUE_NOT_FOUND,
    ErrorKind,
    LimitExceededError,
    TokenizerError,
)
from .limits import ExpressionLimits, check_expression_length, check_nesting_depth
from .tokens import (
    CloseParenToken,
    OpenParenToken,
    Operator,
    OperatorToken,
    Token,
    ValueToken,
)

logger = logging.getLogger(__name__)


class TokenizerState(Enum):
    """States of the tokenizer state machine."""

    FIND_OPEN_PAREN = "FIND_OPEN_PAREN"
    FIND_VALUE = "FIND_VALUE"
    FIND_CLOSE_PAREN = "FIND_CLOSE_PAREN"
    FIND_OPERATOR = "FIND_OPERATOR"
    OPERATOR_NOT_FOUND = "OPERATOR_NOT_FOUND"
    FINISHED = "FINISHED"


@dataclass
class TokenizeResult:
    """Outcome of tokenizing an expression string."""

    tokens: List[Token] = field(default_factory=list)
    """Tokens produced. Empty when tokenization failed."""

    error: Optional[TokenizerError] = None
    """The first error encountered, if any."""

    position: int = 0
    """Index in the source where scanning stopped."""

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return None if self.error is None else self.error.kind


def _is_digit(ch: str) -> bool:
    """Checks if a character is an ASCII digit."""
    return "0" <= ch <= "9"


def _is_sign(ch: str) -> bool:
    return ch in ("+", "-")


def _is_whitespace(ch: str) -> bool:
    """Checks if a character is whitespace."""
    return ch in (" ", "\t", "\n", "\r", "\v", "\f")


class Tokenizer:
    """Tokenizer for arithmetic expression strings."""

    def __init__(self, source: str, limits: Optional[ExpressionLimits] = None):
        self._source = source
        self._limits = limits
        self._position = 0
        self._paren_balance = 0
        self._tokens: List[Token] = []
        self._error: Optional[TokenizerError] = None

    def tokenize(self) -> TokenizeResult:
        """Runs the state machine over the whole source string."""
        state = TokenizerState.FIND_OPEN_PAREN

        try:
            check_expression_length(self._source, self._limits)
            while state != TokenizerState.FINISHED:
                state = self._step(state)
        except LimitExceededError as error:
            self._fail(ErrorKind.LIMIT_EXCEEDED, error.message)

        if self._error is not None:
            logger.debug(
                "tokenization_failed",
                extra={
                    "kind": self._error.kind.value,
                    "position": self._error.position,
                },
            )
            return TokenizeResult(error=self._error, position=self._error.position)

        logger.debug("tokenization_succeeded", extra={"token_count": len(self._tokens)})
        return TokenizeResult(tokens=self._tokens, position=len(self._source))

    def _step(self, state: TokenizerState) -> TokenizerState:
        if state == TokenizerState.FIND_OPEN_PAREN:
            return self._find_open_paren()
        if state == TokenizerState.FIND_VALUE:
            return self._find_value()
        if state == TokenizerState.FIND_CLOSE_PAREN:
            return self._find_close_paren()
        if state == TokenizerState.FIND_OPERATOR:
            return self._find_operator()
        return self._check_remainder()

    # ============================================================
    # Character Helpers
    # ============================================================

    def _char_at(self, index: int) -> str:
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _skip_whitespace(self, index: int) -> int:
        """Returns the first non-whitespace index at or after index."""
        while _is_whitespace(self._char_at(index)):
            index += 1
        return index

    def _fail(self, kind: ErrorKind, message: str, position: Optional[int] = None) -> None:
        self._error = TokenizerError(
            kind,
            message,
            self._position if position is None else position,
            self._source,
        )

    # ============================================================
    # States
    # ============================================================

    def _find_open_paren(self) -> TokenizerState:
        start = self._skip_whitespace(self._position)
        cursor = start
        sign = self._char_at(cursor)
        if _is_sign(sign):
            cursor += 1
        if self._char_at(cursor) != "(":
            return TokenizerState.FIND_VALUE

        check_nesting_depth(self._paren_balance + 1, self._limits)

        # -( becomes -1 * (, with the -1 marked so the evaluator binds it to the group
        if sign == "-":
            self._tokens.append(ValueToken(position=start, value=-1.0, negates_group=True))
            self._tokens.append(OperatorToken(position=start, operator=Operator.MUL))

        self._tokens.append(OpenParenToken(position=cursor))
        self._paren_balance += 1
        self._position = cursor + 1
        return TokenizerState.FIND_OPEN_PAREN

    def _find_value(self) -> TokenizerState:
        start = self._skip_whitespace(self._position)
        cursor = start
        if _is_sign(self._char_at(cursor)):
            cursor += 1

        digits_start = cursor
        while _is_digit(self._char_at(cursor)):
            cursor += 1
        if cursor == digits_start:
            self._fail(ErrorKind.VALUE_NOT_FOUND, MSG_VALUE_NOT_FOUND, start)
            return TokenizerState.FINISHED

        # Fractional part
        if self._char_at(cursor) == "." and _is_digit(self._char_at(cursor + 1)):
            cursor += 1
            while _is_digit(self._char_at(cursor)):
                cursor += 1

        # Literals beyond the float range become inf and are rejected by
        # the finite-result check rather than here.
        value = float(self._source[start:cursor])
        self._tokens.append(ValueToken(position=start, value=value))
        self._position = cursor
        return TokenizerState.FIND_CLOSE_PAREN

    def _find_close_paren(self) -> TokenizerState:
        start = self._skip_whitespace(self._position)
        if self._char_at(start) != ")":
            return TokenizerState.FIND_OPERATOR

        if self._paren_balance == 0:
            self._fail(ErrorKind.UNBALANCED_PARENS, MSG_UNBALANCED_PARENS, start)
            return TokenizerState.FINISHED

        self._tokens.append(CloseParenToken(position=start))
        self._paren_balance -= 1
        self._position = start + 1
        return TokenizerState.FIND_CLOSE_PAREN

    def _find_operator(self) -> TokenizerState:
        start = self._skip_whitespace(self._position)
        symbol = self._char_at(start)
        if symbol not in ("+", "-", "*", "/"):
            return TokenizerState.OPERATOR_NOT_FOUND

        self._tokens.append(
            OperatorToken(position=start, operator=Operator.from_symbol(symbol))
        )
        self._position = start + 1
        return TokenizerState.FIND_OPEN_PAREN

    def _check_remainder(self) -> TokenizerState:
        rest = self._skip_whitespace(self._position)
        if rest < len(self._source):
            self._fail(ErrorKind.OPERATOR_NOT_FOUND, MSG_OPERATOR_NOT_FOUND, rest)
        elif self._paren_balance != 0:
            self._fail(ErrorKind.UNBALANCED_PARENS, MSG_UNBALANCED_PARENS, rest)
        return TokenizerState.FINISHED


def tokenize(source: str, limits: Optional[ExpressionLimits] = None) -> TokenizeResult:
    """
    Tokenizes an arithmetic expression string.

    Args:
        source: The expression string to tokenize
        limits: Optional expression limits

    Returns:
        A result holding either the tokens or the first error found
    """
    return Tokenizer(source, limits).tokenize()
