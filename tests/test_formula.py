"""
Tests for the formula evaluator.
"""
import pytest

from fieldline_engine.errors import DivisionByZeroError, GeometryError, InvalidFormulaError
from fieldline_engine.formula import Formula, constant_literals, evaluate, field_variables, parse_formula


class TestEvaluate:
    """Tests for evaluate()."""

    def test_number_returned_unchanged(self, soccer_vars):
        assert evaluate(9.15, soccer_vars) == 9.15
        assert evaluate(0, soccer_vars) == 0

    def test_half_width(self, soccer_vars):
        assert evaluate("field_width / 2", soccer_vars) == 32.0

    def test_centred_offset(self, soccer_vars):
        assert evaluate("(field_width - 40.3) / 2", soccer_vars) == pytest.approx(11.85)

    def test_length_minus_constant(self, soccer_vars):
        assert evaluate("field_length - 16.5", soccer_vars) == pytest.approx(83.5)

    def test_formula_object(self, soccer_vars):
        assert evaluate(Formula("field_length / 2"), soccer_vars) == 50.0

    def test_precedence(self, soccer_vars):
        assert evaluate("2 + 3 * 4", soccer_vars) == 14
        assert evaluate("(2 + 3) * 4", soccer_vars) == 20

    def test_left_associative(self, soccer_vars):
        assert evaluate("10 - 4 - 3", soccer_vars) == 3
        assert evaluate("64 / 4 / 2", soccer_vars) == 8

    def test_unary_minus(self, soccer_vars):
        assert evaluate("-field_width + 100", soccer_vars) == 36
        assert evaluate("field_width * -1", soccer_vars) == -64

    def test_whitespace_is_ignored(self, soccer_vars):
        assert evaluate("  field_width/2  ", soccer_vars) == 32.0

    def test_decimal_and_exponent_literals(self, soccer_vars):
        assert evaluate(".5 * field_width", soccer_vars) == 32.0
        assert evaluate("1e1 + field_length", soccer_vars) == 110.0

    def test_same_formula_different_sizes(self):
        assert evaluate("field_width / 2", field_variables(45, 90)) == 22.5
        assert evaluate("field_width / 2", field_variables(90, 120)) == 45.0


class TestEvaluateErrors:
    """Malformed formulas fail fast."""

    @pytest.mark.parametrize("source", ["", "   "])
    def test_empty(self, source, soccer_vars):
        with pytest.raises(InvalidFormulaError, match="Empty formula"):
            evaluate(source, soccer_vars)

    def test_unknown_identifier(self, soccer_vars):
        with pytest.raises(InvalidFormulaError, match="Unknown identifier 'field_height'"):
            evaluate("field_height / 2", soccer_vars)

    def test_unknown_identifier_position(self, soccer_vars):
        with pytest.raises(InvalidFormulaError) as exc_info:
            evaluate("field_width + foo", soccer_vars)
        assert exc_info.value.position == 14
        assert exc_info.value.formula == "field_width + foo"

    @pytest.mark.parametrize("source", ["(field_width", "field_width)", "((field_width - 2)"])
    def test_unbalanced_parentheses(self, source, soccer_vars):
        with pytest.raises(InvalidFormulaError, match="Unbalanced parentheses"):
            evaluate(source, soccer_vars)

    def test_no_code_execution(self, soccer_vars):
        with pytest.raises(InvalidFormulaError):
            evaluate("__import__('os').getcwd()", soccer_vars)

    @pytest.mark.parametrize("source", ["2 ** 3", "field_width;1", "field_width +", "3 4"])
    def test_stray_tokens(self, source, soccer_vars):
        with pytest.raises(InvalidFormulaError):
            evaluate(source, soccer_vars)

    def test_division_by_literal_zero(self, soccer_vars):
        with pytest.raises(DivisionByZeroError):
            evaluate("field_width / 0", soccer_vars)

    def test_division_by_evaluated_zero(self, soccer_vars):
        with pytest.raises(DivisionByZeroError):
            evaluate("field_width / (field_length - 100)", soccer_vars)

    def test_non_finite_result(self, soccer_vars):
        with pytest.raises(InvalidFormulaError, match="non-finite"):
            evaluate("1e400 * field_width", soccer_vars)

    def test_boolean_rejected(self, soccer_vars):
        with pytest.raises(InvalidFormulaError):
            evaluate(True, soccer_vars)

    def test_errors_are_value_errors(self, soccer_vars):
        with pytest.raises(ValueError):
            evaluate("field_width / 0", soccer_vars)
        assert issubclass(DivisionByZeroError, GeometryError)
        assert issubclass(InvalidFormulaError, GeometryError)


class TestParseFormula:
    """Tests for the parser cache and literal extraction."""

    def test_parse_is_memoised(self):
        assert parse_formula("field_width / 2") is parse_formula("field_width / 2")

    def test_constant_literals_skip_proportions(self):
        assert constant_literals("field_width / 2") == []
        assert constant_literals("field_length * 0.5") == []

    def test_constant_literals_keep_offsets(self):
        assert constant_literals("(field_width - 40.3) / 2") == [40.3]
        assert constant_literals("field_length - 16.5") == [16.5]

    def test_constant_literals_keep_literal_products(self):
        assert constant_literals("field_length - 2 * 5.5") == [2.0, 5.5]
        assert constant_literals("field_width / 2 - 3 / 4") == [3.0, 4.0]

    def test_constant_literals_skip_scaled_subexpressions(self):
        assert constant_literals("2 * (field_width - 7.32)") == [7.32]
        assert constant_literals("field_length * -0.5") == []

    def test_constant_literals_plain_numbers(self):
        assert constant_literals(9.15) == [9.15]
        assert constant_literals(0) == []
