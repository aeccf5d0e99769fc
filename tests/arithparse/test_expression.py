"""
Tests for the Expression driver and the one-shot evaluate() helper.
"""

import logging
import math

import pytest

from arithparse import (
    EXMSG_UNEXPECTED_TOKEN,
    MAX_NESTING_DEPTH,
    MSG_EMPTY_EXPRESSION,
    MSG_INFINITE_RESULT,
    MSG_NO_ERROR,
    MSG_OPERATOR_NOT_FOUND,
    MSG_RECURSION_LIMIT,
    MSG_UNBALANCED_PARENS,
    MSG_VALUE_NOT_FOUND,
    ErrorKind,
    Evaluator,
    Expression,
    ExpressionLimits,
    evaluate,
)
from arithparse import expression as expression_module
from arithparse.tokenizer import TokenizeResult
from arithparse.tokens import ValueToken


class TestConstruction:
    """Tests for constructing expressions."""

    def test_default_expression_is_empty_and_invalid(self):
        expression = Expression()
        assert expression.expression == ""
        assert expression.is_valid is False
        assert expression.error_message == MSG_EMPTY_EXPRESSION
        assert expression.error_kind == ErrorKind.EMPTY_EXPRESSION

    def test_simple_valid_expression(self):
        expression = Expression("5")
        assert expression.expression == "5"
        assert expression.is_valid is True
        assert expression.error_message == MSG_NO_ERROR
        assert expression.error_kind is None
        assert expression.value == pytest.approx(5)

    def test_complex_valid_expression(self):
        source = "-(-2 + 4.1) * 6 + (2.0 / +(-3 - 2))"
        expression = Expression(source)
        assert expression.expression == source
        assert expression.is_valid is True
        assert expression.error_message == MSG_NO_ERROR
        assert expression.value == pytest.approx(-13)

    def test_repr(self):
        assert repr(Expression("1 + 1")) == "Expression('1 + 1', value=2.0)"
        assert repr(Expression("")) == (
            f"Expression('', error={MSG_EMPTY_EXPRESSION!r})"
        )


class TestReassignment:
    """Tests for re-evaluating an expression with a new string."""

    def test_set_expression_replaces_result(self):
        expression = Expression("3 + 4")
        expression.set_expression("2 * -3")
        assert expression.expression == "2 * -3"
        assert expression.is_valid is True
        assert expression.error_message == MSG_NO_ERROR
        assert expression.value == pytest.approx(-6)

    def test_property_setter_re_evaluates(self):
        expression = Expression("1")
        expression.expression = "(1 + 1"
        assert expression.is_valid is False
        assert expression.error_message == MSG_UNBALANCED_PARENS

    def test_failure_does_not_keep_previous_value(self):
        expression = Expression("3 + 4")
        expression.set_expression("3 +")
        assert expression.is_valid is False
        assert math.isnan(expression.value)

    def test_valid_after_invalid_clears_error(self):
        expression = Expression("7 + 8 9")
        expression.set_expression("7 + 8")
        assert expression.is_valid is True
        assert expression.error_message == MSG_NO_ERROR
        assert expression.error_kind is None

    @pytest.mark.parametrize("source", ["1 + 2 * 3", "7 + 8 9", "", "6 / 0"])
    def test_evaluation_is_idempotent(self, source):
        expression = Expression(source)
        first = (expression.is_valid, expression.error_message, expression.value)
        expression.set_expression(source)
        second = (expression.is_valid, expression.error_message, expression.value)
        assert first[:2] == second[:2]
        assert first[2] == second[2] or (math.isnan(first[2]) and math.isnan(second[2]))

    def test_expression_text_is_returned_unmodified(self):
        source = "  ( 1+2 )\t* 3  "
        expression = Expression(source)
        assert expression.expression == source
        assert expression.value == pytest.approx(9)


class TestInvalidInput:
    """Tests for each user-facing diagnostic."""

    @pytest.mark.parametrize(
        "source, message",
        [
            ("", MSG_EMPTY_EXPRESSION),
            ("+", MSG_VALUE_NOT_FOUND),
            (")", MSG_VALUE_NOT_FOUND),
            (" ", MSG_VALUE_NOT_FOUND),
            ("(3 + )", MSG_VALUE_NOT_FOUND),
            ("7 + 8 9", MSG_OPERATOR_NOT_FOUND),
            ("4(3 + 2)", MSG_OPERATOR_NOT_FOUND),
            ("7.8.9", MSG_OPERATOR_NOT_FOUND),
            ("(1 + 1", MSG_UNBALANCED_PARENS),
            ("(1 + 1))", MSG_UNBALANCED_PARENS),
            ("1) + (2", MSG_UNBALANCED_PARENS),
            ("(1)) + ((2)", MSG_UNBALANCED_PARENS),
            ("6 / 0", MSG_INFINITE_RESULT),
            ("0 / 0", MSG_INFINITE_RESULT),
            ("1" * 400, MSG_INFINITE_RESULT),
            ("-" + "1" * 400, MSG_INFINITE_RESULT),
        ],
    )
    def test_reports_message(self, source, message):
        expression = Expression(source)
        assert expression.is_valid is False
        assert expression.error_message == message

    def test_whitespace_only_is_not_treated_as_empty(self):
        expression = Expression("   ")
        assert expression.error_kind == ErrorKind.VALUE_NOT_FOUND

    def test_infinite_result_kind(self):
        assert Expression("1 / 0").error_kind == ErrorKind.INFINITE_RESULT

    def test_limits_are_applied(self):
        expression = Expression("((1))", ExpressionLimits(max_nesting_depth=1))
        assert expression.is_valid is False
        assert expression.error_kind == ErrorKind.LIMIT_EXCEEDED

    def test_reordered_parens_are_an_input_error(self):
        expression = Expression("1) + (2")
        assert expression.error_kind == ErrorKind.UNBALANCED_PARENS


class TestDeepNesting:
    """Tests for nesting at the maximum supported depth."""

    def test_maximum_nesting_is_valid_by_default(self):
        depth = MAX_NESTING_DEPTH
        expression = Expression("(" * depth + "1 + 2" + ")" * depth)
        assert expression.is_valid is True
        assert expression.value == pytest.approx(3)

    def test_maximum_negated_nesting(self):
        depth = MAX_NESTING_DEPTH
        expression = Expression("-(" * depth + "2" + ")" * depth + " * 3")
        assert expression.is_valid is True
        assert expression.value == pytest.approx(6)

    def test_nesting_under_explicit_maximum_limit(self):
        limits = ExpressionLimits(max_nesting_depth=MAX_NESTING_DEPTH)
        expression = Expression("2 * " + "(" * 100 + "4 / 2" + ")" * 100, limits)
        assert expression.is_valid is True
        assert expression.value == pytest.approx(4)

    def test_recursion_error_is_reported_as_limit(self, monkeypatch):
        def overflow(self):
            raise RecursionError("maximum recursion depth exceeded")

        monkeypatch.setattr(Evaluator, "evaluate", overflow)

        expression = Expression("(1)")
        assert expression.is_valid is False
        assert expression.error_kind == ErrorKind.LIMIT_EXCEEDED
        assert expression.error_message == MSG_RECURSION_LIMIT


class TestInternalFailures:
    """Tests for defects surfaced distinctly from input errors."""

    def test_internal_error_is_reported_as_defect(self, monkeypatch, caplog):
        class BrokenTokenizer:
            def __init__(self, source, limits=None):
                pass

            def tokenize(self):
                tokens = [ValueToken(position=0, value=1.0)] * 2
                return TokenizeResult(tokens=tokens)

        monkeypatch.setattr(expression_module, "Tokenizer", BrokenTokenizer)

        with caplog.at_level(logging.ERROR, logger="arithparse.expression"):
            expression = Expression("1 1")

        assert expression.is_valid is False
        assert expression.error_kind == ErrorKind.INTERNAL
        assert expression.error_message == EXMSG_UNEXPECTED_TOKEN
        assert any(
            record.getMessage() == "expression_evaluation_defect" for record in caplog.records
        )


class TestEvaluate:
    """Tests for the one-shot evaluate() helper."""

    def test_success(self):
        result = evaluate("2 * (3 + 4)")
        assert result.success is True
        assert result.value == pytest.approx(14)
        assert result.error is None
        assert result.kind is None

    def test_failure(self):
        result = evaluate("7 + 8 9")
        assert result.success is False
        assert result.error == MSG_OPERATOR_NOT_FOUND
        assert result.kind == ErrorKind.OPERATOR_NOT_FOUND
        assert math.isnan(result.value)
