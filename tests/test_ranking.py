"""
Tests for result ranking and the results summary.
"""

import pytest
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from codeexam.models import ResultRecord, SubmissionRecord
from codeexam.ranking import RANK_BY_SCORE, RANK_BY_TIME, format_time, rank, summarize


def result(name, marks, time_taken=0, solved=0, total=50):
    return ResultRecord(
        student_name=name,
        roll_number=name.lower(),
        obtained_marks=marks,
        total_marks=total,
        time_taken=time_taken,
        answers=[SubmissionRecord(f"q{i}", "", "python", True, 10) for i in range(solved)]
    )


class TestRank:
    """Test deterministic ordering."""

    def test_marks_then_time(self):
        """Test higher marks first, then the faster of equal scores."""
        results = [result("A", 20, 100), result("B", 20, 50), result("C", 30, 200)]

        ranked = rank(results, by=RANK_BY_TIME)

        assert [r.student_name for r in ranked] == ["C", "B", "A"]

    def test_marks_then_solved_count(self):
        results = [result("A", 20, solved=1), result("B", 20, solved=2), result("C", 10, solved=5)]

        ranked = rank(results, by=RANK_BY_SCORE)

        assert [r.student_name for r in ranked] == ["B", "A", "C"]

    def test_full_ties_keep_input_order(self):
        results = [result("A", 20, 60), result("B", 20, 60), result("C", 20, 60)]

        assert [r.student_name for r in rank(results, by=RANK_BY_TIME)] == ["A", "B", "C"]

    def test_input_not_mutated(self):
        results = [result("A", 10), result("B", 20)]

        rank(results)

        assert [r.student_name for r in results] == ["A", "B"]

    def test_unknown_ranking(self):
        with pytest.raises(ValueError):
            rank([], by="name")


class TestSummarize:
    """Test the results header statistics."""

    def test_summary(self):
        results = [result("A", 50, total=50), result("B", 25, total=50)]

        assert summarize(results) == {"students": 2, "average_percentage": 75, "top_score": 50}

    def test_empty(self):
        assert summarize([]) == {"students": 0, "average_percentage": 0, "top_score": 0}

    def test_zero_total_counts_as_zero_percent(self):
        assert summarize([result("A", 0, total=0)])["average_percentage"] == 0


def test_format_time():
    assert format_time(125) == "2m 5s"
    assert format_time(0) == "0m 0s"
