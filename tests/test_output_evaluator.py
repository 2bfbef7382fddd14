"""Unit tests for OutputEvaluator."""
import sys
sys.path.insert(0, 'backend')

import pytest
from services.output_evaluator import OutputEvaluator


@pytest.fixture
def evaluator():
    """Create OutputEvaluator instance."""
    return OutputEvaluator()


class TestNegativeResults:
    """Tests for "nothing to report" detection."""

    @pytest.mark.parametrize("response", ["No bugs found.", "No typos found.", "Nothing found."])
    def test_initial_negative(self, evaluator, response):
        assert evaluator.is_negative_result(response)

    @pytest.mark.parametrize("response", ["Found a bug in main.go.", "No bugs found. But see main.go", ""])
    def test_initial_not_negative(self, evaluator, response):
        assert not evaluator.is_negative_result(response)

    @pytest.mark.parametrize("response", ["No diff needed.", "No bugs found.", "No changes needed."])
    def test_fix_negative(self, evaluator, response):
        assert evaluator.is_negative_fix(response)

    def test_fix_requires_space_after_no(self, evaluator):
        """"Nothing found." is not a fix-pass negative."""
        assert not evaluator.is_negative_fix("Nothing found.")

    def test_combine_initial_drops_negatives(self, evaluator):
        combined = evaluator.combine_initial(["No bugs found.", "Bug in a.py", "No bugs found.", "Bug in b.py"])
        assert combined == "Bug in a.py\nBug in b.py"

    def test_combine_initial_all_negative_is_empty(self, evaluator):
        assert evaluator.combine_initial(["No bugs found.", "No bugs found."]) == ""

    def test_combine_fixes_drops_negatives(self, evaluator):
        combined = evaluator.combine_fixes(["No diff needed.", "--- a.py\n+++ a.py", "No bugs found."])
        assert combined == "--- a.py\n+++ a.py"


class TestNothingFound:
    """Tests for short-circuiting the follow-up passes."""

    def test_empty(self, evaluator):
        assert evaluator.nothing_found("")

    def test_short_negative(self, evaluator):
        assert evaluator.nothing_found("No issues here at all")

    def test_long_text_starting_with_no(self, evaluator):
        assert not evaluator.nothing_found("No tests cover the parser, which has an off by one error")

    def test_findings(self, evaluator):
        assert not evaluator.nothing_found("Bug in a.py")


class TestConfidence:
    """Tests for confidence aggregation."""

    def test_mean_of_two_ignoring_text(self, evaluator):
        """["6", "8", "x"] gives 7."""
        assert evaluator.aggregate_confidence(["6", "8", "x"]) == 7

    def test_default_when_nothing_numeric(self, evaluator):
        assert evaluator.aggregate_confidence(["high", "", "about 8"]) == 5

    def test_default_when_no_responses(self, evaluator):
        assert evaluator.aggregate_confidence([]) == 5

    def test_single_value(self, evaluator):
        assert evaluator.aggregate_confidence(["9"]) == 9

    def test_running_average_weights_later_values(self, evaluator):
        """((2 + 4) / 2 + 10) / 2 = 6.5, truncated to 6 (a true mean would give 5)."""
        assert evaluator.aggregate_confidence(["2", "4", "10"]) == 6

    def test_truncates(self, evaluator):
        """(7 + 8) / 2 = 7.5 truncates to 7."""
        assert evaluator.aggregate_confidence(["7", "8"]) == 7

    @pytest.mark.parametrize("response,expected", [("7", 7), (" 8\n", 8), ("+3", 3), ("1_0", None), ("7/10", None)])
    def test_parse_confidence(self, evaluator, response, expected):
        assert evaluator.parse_confidence(response) == expected
