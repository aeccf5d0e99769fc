"""
Resource limits for tokenizing and evaluating expressions.

Evaluation recurses a few frames deep per nested group, so the nesting
depth limit also bounds the evaluator's stack usage. It is capped at
MAX_NESTING_DEPTH to stay well inside the interpreter's recursion limit.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import LimitExceededError

ENV_VAR_MAX_EXPRESSION_LENGTH = "ARITHPARSE_MAX_EXPRESSION_LENGTH"
ENV_VAR_MAX_NESTING_DEPTH = "ARITHPARSE_MAX_NESTING_DEPTH"

# 128 levels at up to four evaluator frames each stays under 600 frames
MAX_NESTING_DEPTH = 128


@dataclass(frozen=True)
class ExpressionLimits:
    """Expression limits configuration."""

    # Maximum expression string length in characters
    max_expression_length: int = 4096

    # Maximum number of simultaneously open parentheses
    max_nesting_depth: int = MAX_NESTING_DEPTH

    def __post_init__(self) -> None:
        if self.max_expression_length <= 0:
            raise ValueError(
                f"max_expression_length must be positive, got {self.max_expression_length}"
            )
        if not 0 < self.max_nesting_depth <= MAX_NESTING_DEPTH:
            raise ValueError(
                f"max_nesting_depth must be between 1 and {MAX_NESTING_DEPTH}, "
                f"got {self.max_nesting_depth}"
            )


DEFAULT_EXPRESSION_LIMITS = ExpressionLimits()


def check_expression_length(
    expression: str, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates that expression length is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if len(expression) > limits.max_expression_length:
        raise LimitExceededError(
            "max_expression_length", limits.max_expression_length, len(expression)
        )


def check_nesting_depth(depth: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates parenthesis nesting depth during tokenization."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if depth > limits.max_nesting_depth:
        raise LimitExceededError("max_nesting_depth", limits.max_nesting_depth, depth)


def _read_positive_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def limits_from_env(environ: Optional[Mapping[str, str]] = None) -> ExpressionLimits:
    """
    Builds limits from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Limits with unset variables falling back to the defaults

    Raises:
        ValueError: If a variable is set to a non-integer or non-positive value
    """
    environ = os.environ if environ is None else environ
    return ExpressionLimits(
        max_expression_length=_read_positive_int(
            environ,
            ENV_VAR_MAX_EXPRESSION_LENGTH,
            DEFAULT_EXPRESSION_LIMITS.max_expression_length,
        ),
        max_nesting_depth=_read_positive_int(
            environ,
            ENV_VAR_MAX_NESTING_DEPTH,
            DEFAULT_EXPRESSION_LIMITS.max_nesting_depth,
        ),
    )
