"""
Tests for the split engine: applicator, validator, parser, reconciler and
the derived calculation state.
"""

import math
from decimal import Decimal

import pytest

from split_calculator.engine import (
    apply,
    calculate,
    describe_problem,
    format_components,
    format_currency,
    parse,
    parse_currency,
    parse_total,
    reconcile,
    resolve_selection,
    round_half_away,
    to_single_precision,
    validate,
)
from split_calculator.engine.validator import (
    NO_VALUES_MESSAGE,
    NOT_FINITE_MESSAGE,
    NOT_POSITIVE_MESSAGE,
)
from split_calculator.errors import InvalidTotal
from split_calculator.models.split import SplitRatio


class TestMoney:
    """Tests for currency rounding and formatting."""

    def test_round_half_away_on_exact_tie(self):
        """Test that exact binary ties round away from zero."""
        assert round_half_away(0.125, 2) == Decimal("0.13")
        assert round_half_away(-0.125, 2) == Decimal("-0.13")

    def test_round_half_away_uses_binary_value(self):
        """Test that 2.675 (stored just below the tie) rounds down."""
        assert round_half_away(2.675, 2) == Decimal("2.67")

    def test_format_currency(self):
        """Test dollar formatting with thousands separators."""
        assert format_currency(1234567.891) == "$1,234,567.89"
        assert format_currency(50) == "$50.00"
        assert format_currency(0) == "$0.00"
        assert format_currency(-0.5) == "-$0.50"

    def test_format_currency_never_prints_negative_zero(self):
        """Test that tiny negatives show as $0.00."""
        assert format_currency(-0.001) == "$0.00"

    def test_parse_currency(self):
        """Test stripping symbol and separators."""
        assert parse_currency("$1,234.50") == 1234.5
        assert parse_currency("-$0.50") == -0.5

    def test_to_single_precision(self):
        """Test reduction to float32."""
        assert to_single_precision(0.5) == 0.5
        assert to_single_precision(0.1) != 0.1
        assert to_single_precision(0.1) == pytest.approx(0.1, abs=1e-7)

    def test_to_single_precision_overflow(self):
        """Test that values beyond float32 range become infinite."""
        assert to_single_precision(1e39) == math.inf
        assert to_single_precision(-1e39) == -math.inf


class TestPercentApplicator:
    """Tests for apply()."""

    def test_apply_half(self):
        """Test a simple share."""
        share = apply(100.0, 50)
        assert share.exact == 50.0
        assert share.rounded == "$50.00"
        assert share.rounded_value == 50.0

    def test_apply_formats_thousands(self):
        """Test currency formatting of large shares."""
        share = apply(2469.0, 50)
        assert share.rounded == "$1,234.50"
        assert share.rounded_value == 1234.5

    def test_apply_keeps_unrounded_exact(self):
        """Test that exact is not rounded."""
        share = apply(10.01, 50)
        assert share.exact == 10.01 * (50 / 100)
        assert share.rounded == "$5.00"

    def test_apply_zero_total(self):
        """Test a zero total."""
        share = apply(0.0, 40)
        assert share.exact == 0.0
        assert share.rounded == "$0.00"

    def test_apply_negative_percent_is_structurally_allowed(self):
        """Test that a negative percent still computes."""
        share = apply(100.0, -10)
        assert share.exact == -10.0
        assert share.rounded == "-$10.00"

    @pytest.mark.parametrize("total", [0.0, 0.01, 10.01, 99.99, 123456.78])
    @pytest.mark.parametrize("components", [
        (50, 50),
        (50, 40, 10),
        (33.33, 33.33, 33.34),
        (12.5, 12.5, 25, 50),
    ])
    def test_exact_shares_sum_to_total(self, total, components):
        """Test that exact shares of a valid ratio add back to the total."""
        exact_sum = sum(apply(total, p).exact for p in components)
        assert exact_sum == pytest.approx(total, rel=1e-9, abs=1e-9)


class TestSplitRatioValidator:
    """Tests for validate() and describe_problem()."""

    def test_empty_is_invalid(self):
        """Test the empty ratio."""
        result = validate([])
        assert result.is_valid is False
        assert result.sum == 0
        assert result.remaining == 100

    def test_fifty_fifty_is_valid(self):
        """Test a simple valid ratio."""
        result = validate([50, 50])
        assert result.is_valid is True
        assert result.sum == 100
        assert result.remaining == 0

    def test_short_ratio_reports_remaining(self):
        """Test a ratio that does not reach 100."""
        result = validate([50, 49])
        assert result.is_valid is False
        assert result.sum == 99
        assert result.remaining == 1

    def test_over_ratio_reports_negative_remaining(self):
        """Test a ratio that exceeds 100."""
        result = validate([60, 50])
        assert result.is_valid is False
        assert result.remaining == -10

    def test_negative_component_rejected_even_if_sum_is_100(self):
        """Test that every component must be positive."""
        assert validate([-10, 110]).is_valid is False

    def test_zero_component_rejected(self):
        """Test that zero is not positive."""
        assert validate([0, 100]).is_valid is False

    def test_float_accumulation_within_tolerance(self):
        """Test that thirds-style ratios are accepted."""
        result = validate([33.33, 33.33, 33.34])
        assert result.is_valid is True
        assert result.sum == 100
        assert result.remaining == 0

    def test_sum_rounded_for_reporting(self):
        """Test that reported sum has at most 2 decimals."""
        result = validate([10.111, 20.222])
        assert result.sum == 30.33
        assert result.remaining == 69.67

    def test_non_finite_components_are_invalid(self):
        """Test that NaN, infinity and overflowing sums give a verdict, not an error."""
        assert validate([math.inf]).is_valid is False
        assert validate([math.nan, 50]).is_valid is False
        assert validate([1e308, 1e308]).is_valid is False
        assert describe_problem([math.inf]) == NOT_FINITE_MESSAGE
        assert describe_problem([math.nan, 100]) == NOT_FINITE_MESSAGE

    def test_describe_problem_messages(self):
        """Test the user-facing explanations."""
        assert describe_problem([]) == NO_VALUES_MESSAGE
        assert describe_problem([-10, 110]) == NOT_POSITIVE_MESSAGE
        assert describe_problem([50, 49]) == (
            "Percentages must sum to 100 (current sum: 99%, remaining: 1%)"
        )
        assert describe_problem([50, 50]) is None


class TestRatioParser:
    """Tests for parse()."""

    @pytest.mark.parametrize("text", ["50, 30, 20", "50 30 20", "50-30-20", "50,30,20"])
    def test_separators(self, text):
        """Test commas, spaces and hyphens."""
        assert parse(text) == [50, 30, 20]

    def test_separator_runs_act_as_one(self):
        """Test that '50--50' and '50, 50' behave identically."""
        assert parse("50--50") == parse("50, 50") == [50, 50]
        assert parse(" 60 ,\t- 40 ") == [60, 40]

    def test_garbage_tokens_dropped(self):
        """Test that non-numeric tokens are silently dropped."""
        assert parse("abc, 50, xyz") == [50]

    def test_empty_and_all_garbage(self):
        """Test inputs that yield nothing."""
        assert parse("") == []
        assert parse("   ") == []
        assert parse("abc, xyz") == []

    def test_decimals(self):
        """Test fractional percentages."""
        assert parse("12.5, 87.5") == [12.5, 87.5]
        assert parse(".5 99.5") == [0.5, 99.5]

    def test_numeric_prefix(self):
        """Test that a trailing unit is ignored."""
        assert parse("50%, 50%") == [50, 50]

    def test_leading_minus_is_a_separator(self):
        """Test the known limitation: negatives cannot be entered."""
        assert parse("-50") == [50]
        assert parse("-10, 110") == [10, 110]

    def test_non_finite_dropped(self):
        """Test that overflowing tokens are dropped."""
        assert parse("1e999, 100") == [100]
        assert parse("inf, nan, 100") == [100]

    def test_format_components(self):
        """Test rendering back into an edit field."""
        assert format_components([50.0, 30.0, 20.0]) == "50, 30, 20"
        assert format_components([12.5, 87.5]) == "12.5, 87.5"
        assert parse(format_components([33.33, 33.33, 33.34])) == [33.33, 33.33, 33.34]


class TestReconciliationReporter:
    """Tests for reconcile()."""

    def test_equal_totals_match(self):
        """Test identical totals."""
        result = reconcile(100.0, 100.0)
        assert result.matches is True
        assert result.difference == 0.0
        assert result.show_difference is False

    def test_double_precision_noise_matches(self):
        """Test that 0.1 + 0.2 vs 0.3 is treated as a match."""
        exact = 0.1 + 0.2
        assert exact != 0.3
        result = reconcile(exact, 0.3)
        assert result.matches is True
        assert result.difference_display == "0.00"

    def test_cent_drift_does_not_match(self):
        """Test that a one-cent drift is flagged."""
        result = reconcile(10.01, 10.0)
        assert result.matches is False
        assert result.difference == pytest.approx(-0.01)
        assert result.difference_display == "-0.01"
        assert result.difference_detail == "-0.010000"
        assert result.show_difference is True
        assert result.totals_differ_at_cents is True
        assert result.difference_is_shortfall is True

    def test_overshoot_is_not_shortfall(self):
        """Test the sign of a positive difference."""
        result = reconcile(10.0, 10.01)
        assert result.matches is False
        assert result.difference_display == "0.01"
        assert result.difference_is_shortfall is False

    def test_sub_cent_mismatch_is_not_shown(self):
        """Test a mismatch that rounds to 0.00."""
        result = reconcile(10.0, 10.001)
        assert result.matches is False
        assert result.show_difference is False


class TestParseTotal:
    """Tests for parse_total()."""

    def test_blank_is_zero(self):
        """Test blank input."""
        assert parse_total("") == 0.0
        assert parse_total("   ") == 0.0
        assert parse_total(None) == 0.0

    @pytest.mark.parametrize("text, expected", [
        ("100", 100.0),
        ("10.01", 10.01),
        ("0.5", 0.5),
        ("  42.10 ", 42.1),
    ])
    def test_valid_totals(self, text, expected):
        """Test accepted amounts."""
        assert parse_total(text) == expected

    @pytest.mark.parametrize("text", ["10.001", "-5", "abc", "inf", "NaN", "1,000", "9" * 400])
    def test_invalid_totals(self, text):
        """Test rejected amounts."""
        with pytest.raises(InvalidTotal):
            parse_total(text)

    def test_invalid_total_is_value_error(self):
        """Test InvalidTotal can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_total("12.345")


class TestCalculate:
    """Tests for the derived calculation state."""

    def test_even_split_scenario(self):
        """Test 100.00 split 50-50."""
        ratio = SplitRatio(name="50-50", components=(50, 50))
        result = calculate(100.0, ratio)
        assert result.exact_shares == [50.0, 50.0]
        assert result.rounded_shares == ["$50.00", "$50.00"]
        assert result.exact_total == 100.0
        assert result.rounded_total == 100.0
        assert result.reconciliation.matches is True
        assert result.reconciliation.difference == 0.0

    def test_rounding_drift_scenario(self):
        """Test 10.01 split 50-40-10."""
        ratio = SplitRatio(name="50-40-10", components=(50, 40, 10))
        result = calculate(10.01, ratio)
        assert result.exact_shares == pytest.approx([5.005, 4.004, 1.001])
        assert result.rounded_shares == ["$5.00", "$4.00", "$1.00"]
        assert result.exact_total == pytest.approx(10.01)
        assert result.rounded_total == 10.0
        assert result.reconciliation.matches is False
        assert result.reconciliation.difference != 0
        assert abs(result.reconciliation.difference) < 0.02

    def test_zero_total(self):
        """Test the initial state with nothing entered."""
        ratio = SplitRatio(name="50-40-10", components=(50, 40, 10))
        result = calculate(0.0, ratio)
        assert result.rounded_shares == ["$0.00", "$0.00", "$0.00"]
        assert result.reconciliation.matches is True


class TestResolveSelection:
    """Tests for resolve_selection()."""

    def setup_method(self):
        self.entries = (
            SplitRatio(name="50-50", components=(50, 50)),
            SplitRatio(name="60-40", components=(60, 40)),
        )

    def test_known_name(self):
        """Test selecting an existing ratio."""
        assert resolve_selection(self.entries, "60-40").name == "60-40"

    def test_missing_name_falls_back_to_first(self):
        """Test fall-back after the selection was deleted."""
        assert resolve_selection(self.entries, "gone").name == "50-50"
        assert resolve_selection(self.entries, None).name == "50-50"

    def test_no_entries(self):
        """Test the empty case."""
        assert resolve_selection((), "50-50") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
