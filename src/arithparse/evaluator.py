"""
Expression evaluator.

Resolves a token sequence produced by the tokenizer into a float
without building a syntax tree. Two mutually recursive operations walk
the flat sequence by index range:

- resolve_range(start, end) sums the multiplicative terms in the range
  left to right.
- resolve_value(pos) returns the operand at pos, descending into the
  range enclosed by a parenthesized group.

Arithmetic follows IEEE double semantics: overflow and division by zero
yield infinities, 0 / 0 yields NaN. Callers decide whether a non-finite
result is acceptable.
"""

import logging
import math
from typing import Sequence, Tuple

from .errors import EXMSG_UNEXPECTED_TOKEN, InternalError
from .tokens import (
    CloseParenToken,
    OpenParenToken,
    Operator,
    OperatorToken,
    Token,
    ValueToken,
)

logger = logging.getLogger(__name__)


def _divide(dividend: float, divisor: float) -> float:
    """Float division that returns inf/NaN instead of raising on a zero divisor."""
    if divisor != 0:
        return dividend / divisor
    if dividend == 0 or math.isnan(dividend):
        return math.nan
    return math.copysign(math.inf, dividend) * math.copysign(1.0, divisor)


class Evaluator:
    """Evaluates a tokenized arithmetic expression."""

    def __init__(self, tokens: Sequence[Token], source: str = ""):
        self._tokens = tokens
        self._source = source

    def evaluate(self) -> float:
        """Evaluates the whole token sequence."""
        value = self.resolve_range(0, len(self._tokens) - 1)
        logger.debug(
            "expression_resolved",
            extra={"token_count": len(self._tokens), "value": value},
        )
        return value

    def resolve_range(self, start: int, end: int) -> float:
        """
        Resolves the sub-expression occupying tokens[start..end] inclusive.

        Additive operators are applied left to right between terms, so
        10 - 2 - 3 is (10 - 2) - 3.
        """
        result, position = self._resolve_term(start, end)

        while position <= end:
            operator_position = position
            operator = self._operator_at(operator_position)
            operand, position = self._resolve_term(operator_position + 1, end)
            if operator == Operator.ADD:
                result += operand
            elif operator == Operator.SUB:
                result -= operand
            else:
                # _resolve_term consumes every multiplicative operator
                raise self._unexpected(operator_position)

        return result

    def resolve_value(self, position: int) -> float:
        """
        Resolves a single operand: a value, a parenthesized group, or a
        negated group.
        """
        token = self._token_at(position)

        if isinstance(token, ValueToken):
            if token.negates_group:
                self._expect_negated_group(position)
                return token.value * self.resolve_value(position + 2)
            return token.value

        if isinstance(token, OpenParenToken):
            close = self.matching_close_paren(position)
            return self.resolve_range(position + 1, close - 1)

        raise self._unexpected(position)

    def matching_close_paren(self, position: int) -> int:
        """
        Returns the index of the close paren matching the open paren at
        position. For any other token, returns position unchanged.
        """
        if not isinstance(self._token_at(position), OpenParenToken):
            return position

        balance = 1
        current = position
        while balance != 0:
            current += 1
            token = self._token_at(current)
            if isinstance(token, OpenParenToken):
                balance += 1
            elif isinstance(token, CloseParenToken):
                balance -= 1
        return current

    # ============================================================
    # Helpers
    # ============================================================

    def _resolve_term(self, start: int, end: int) -> Tuple[float, int]:
        """
        Resolves the operand at start and every * or / that follows it.

        Returns the term's value and the index of the first token after it.
        """
        if start > end:
            raise self._unexpected(start)

        result = self.resolve_value(start)
        position = self._operand_end(start) + 1

        while position <= end:
            operator = self._operator_at(position)
            if not operator.is_multiplicative:
                break
            operand_position = position + 1
            if operand_position > end:
                raise self._unexpected(operand_position)
            operand = self.resolve_value(operand_position)
            if operator == Operator.MUL:
                result *= operand
            else:
                result = _divide(result, operand)
            position = self._operand_end(operand_position) + 1

        return result, position

    def _operand_end(self, position: int) -> int:
        """Returns the index of the last token of the operand starting at position."""
        token = self._token_at(position)
        if isinstance(token, ValueToken) and token.negates_group:
            return self.matching_close_paren(position + 2)
        return self.matching_close_paren(position)

    def _expect_negated_group(self, position: int) -> None:
        operator = self._token_at(position + 1)
        if not (isinstance(operator, OperatorToken) and operator.operator == Operator.MUL):
            raise self._unexpected(position + 1)
        if not isinstance(self._token_at(position + 2), OpenParenToken):
            raise self._unexpected(position + 2)

    def _operator_at(self, position: int) -> Operator:
        token = self._token_at(position)
        if not isinstance(token, OperatorToken):
            raise self._unexpected(position)
        return token.operator

    def _token_at(self, position: int) -> Token:
        if position < 0 or position >= len(self._tokens):
            raise self._unexpected(position)
        return self._tokens[position]

    def _unexpected(self, position: int) -> InternalError:
        source_position = None
        if 0 <= position < len(self._tokens):
            source_position = self._tokens[position].position
        return InternalError(EXMSG_UNEXPECTED_TOKEN, source_position, self._source or None)


def resolve(tokens: Sequence[Token], source: str = "") -> float:
    """
    Evaluates a token sequence.

    Args:
        tokens: Tokens produced by a successful tokenization
        source: Source expression for error reporting

    Returns:
        The (possibly non-finite) value of the expression

    Raises:
        InternalError: If the sequence is empty or malformed
    """
    return Evaluator(tokens, source).evaluate()
