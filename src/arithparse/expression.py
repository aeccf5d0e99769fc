"""
Evaluation driver.

An Expression holds one input string and the outcome of evaluating it:
a validity flag, an error message (empty when valid) and the value.
Every assignment of a new string is an independent run:

    empty check -> tokenize -> evaluate -> finite check

Failures from any step are converted into the flag/message pair here;
nothing propagates to the caller. An instance keeps scratch state while
evaluating and must not be shared between threads.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from .errors import (
    MSG_EMPTY_EXPRESSION,
    MSG_INFINITE_RESULT,
    MSG_NO_ERROR,
    MSG_RECURSION_LIMIT,
    ErrorKind,
    InternalError,
)
from .evaluator import Evaluator
from .limits import ExpressionLimits
from .tokenizer import Tokenizer
from .tokens import Token

logger = logging.getLogger(__name__)


class Expression:
    """An arithmetic expression and the result of evaluating it."""

    def __init__(self, expression: str = "", limits: Optional[ExpressionLimits] = None):
        self._limits = limits
        self._expression = expression
        self._tokens: List[Token] = []
        self._is_valid = False
        self._error_message = MSG_NO_ERROR
        self._error_kind: Optional[ErrorKind] = None
        self._value = math.nan
        self._evaluate()

    def set_expression(self, expression: str) -> None:
        """Replaces the expression string and re-evaluates it from scratch."""
        self._expression = expression
        self._evaluate()

    @property
    def expression(self) -> str:
        """The input string exactly as it was last set."""
        return self._expression

    @expression.setter
    def expression(self, expression: str) -> None:
        self.set_expression(expression)

    @property
    def is_valid(self) -> bool:
        return self._is_valid

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self._error_kind

    @property
    def value(self) -> float:
        """The result. Meaningless (NaN) when is_valid is False."""
        return self._value

    def __repr__(self) -> str:
        if self._is_valid:
            return f"Expression({self._expression!r}, value={self._value!r})"
        return f"Expression({self._expression!r}, error={self._error_message!r})"

    def _evaluate(self) -> None:
        self._tokens.clear()
        self._is_valid = False
        self._error_message = MSG_NO_ERROR
        self._error_kind = None
        self._value = math.nan

        try:
            self._run()
        finally:
            self._tokens.clear()

    def _run(self) -> None:
        # Only the exact empty string counts; whitespace goes to the tokenizer
        if self._expression == "":
            self._reject(ErrorKind.EMPTY_EXPRESSION, MSG_EMPTY_EXPRESSION)
            return

        result = Tokenizer(self._expression, self._limits).tokenize()
        if result.error is not None:
            self._reject(result.error.kind, result.error.message)
            return
        self._tokens = result.tokens

        try:
            value = Evaluator(self._tokens, self._expression).evaluate()
        except InternalError as error:
            logger.error(
                "expression_evaluation_defect",
                extra={
                    "expression": self._expression,
                    "error": error.format_with_context(),
                },
            )
            self._reject(ErrorKind.INTERNAL, error.message)
            return
        except RecursionError:
            # Only reachable when the caller is already deep in its own stack
            logger.warning(
                "expression_recursion_limit",
                extra={"expression_length": len(self._expression)},
            )
            self._reject(ErrorKind.LIMIT_EXCEEDED, MSG_RECURSION_LIMIT)
            return

        if not math.isfinite(value):
            self._reject(ErrorKind.INFINITE_RESULT, MSG_INFINITE_RESULT)
            return

        self._is_valid = True
        self._value = value

    def _reject(self, kind: ErrorKind, message: str) -> None:
        self._error_kind = kind
        self._error_message = message
        logger.debug(
            "expression_rejected",
            extra={"expression": self._expression, "kind": kind.value},
        )


@dataclass
class EvaluationResult:
    """Result of a one-shot expression evaluation."""

    value: float
    """The evaluated value (NaN when evaluation failed)."""

    success: bool
    """Whether evaluation succeeded."""

    error: Optional[str] = None
    """Error message if evaluation failed."""

    kind: Optional[ErrorKind] = None
    """Classification of the failure, if any."""


def evaluate(source: str, limits: Optional[ExpressionLimits] = None) -> EvaluationResult:
    """
    Evaluates an arithmetic expression string.

    Args:
        source: The expression string to evaluate
        limits: Optional expression limits

    Returns:
        The evaluation result with value and success status
    """
    expression = Expression(source, limits)
    if expression.is_valid:
        return EvaluationResult(value=expression.value, success=True)
    return EvaluationResult(
        value=expression.value,
        success=False,
        error=expression.error_message,
        kind=expression.error_kind,
    )
