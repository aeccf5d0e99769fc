"""
Arithmetic expression parser.

Evaluates expressions made of signed decimal numbers, the operators
+ - * /, optionally negated parenthesized groups and whitespace, and
reports either the value or a specific diagnostic.
"""

from .errors import (
    EXMSG_INVALID_OPERATOR,
    EXMSG_UNEXPECTED_TOKEN,
    MSG_EMPTY_EXPRESSION,
    MSG_INFINITE_RESULT,
    MSG_NO_ERROR,
    MSG_RECURSION_LIMIT,
    MSG_OPERATOR_NOT_FOUND,
    MSG_UNBALANCED_PARENS,
    MSG_VALUE_NOT_FOUND,
    ErrorKind,
    ExpressionError,
    InternalError,
    LimitExceededError,
    TokenizerError,
)
from .evaluator import Evaluator, resolve
from .expression import EvaluationResult, Expression, evaluate
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    MAX_NESTING_DEPTH,
    ExpressionLimits,
    check_expression_length,
    check_nesting_depth,
    limits_from_env,
)
from .tokenizer import TokenizeResult, Tokenizer, TokenizerState, tokenize
from .tokens import (
    CloseParenToken,
    OpenParenToken,
    Operator,
    OperatorToken,
    Token,
    TokenBase,
    ValueToken,
    tokens_to_string,
)

__all__ = [
    # Tokens
    "Token",
    "TokenBase",
    "OpenParenToken",
    "CloseParenToken",
    "ValueToken",
    "OperatorToken",
    "Operator",
    "tokens_to_string",
    # Errors
    "ErrorKind",
    "ExpressionError",
    "TokenizerError",
    "InternalError",
    "LimitExceededError",
    "MSG_EMPTY_EXPRESSION",
    "MSG_OPERATOR_NOT_FOUND",
    "MSG_VALUE_NOT_FOUND",
    "MSG_UNBALANCED_PARENS",
    "MSG_INFINITE_RESULT",
    "MSG_NO_ERROR",
    "MSG_RECURSION_LIMIT",
    "EXMSG_INVALID_OPERATOR",
    "EXMSG_UNEXPECTED_TOKEN",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    "MAX_NESTING_DEPTH",
    "check_expression_length",
    "check_nesting_depth",
    "limits_from_env",
    # Tokenizer
    "Tokenizer",
    "TokenizerState",
    "TokenizeResult",
    "tokenize",
    # Evaluator
    "Evaluator",
    "resolve",
    # Driver
    "Expression",
    "EvaluationResult",
    "evaluate",
]
