"""
Deterministic ranking of recorded results for the leaderboard and the
admin results table.
"""

from typing import Dict, List

from .models import ResultRecord


RANK_BY_SCORE = "score"
RANK_BY_TIME = "time"


def rank(results: List[ResultRecord], by: str = RANK_BY_SCORE) -> List[ResultRecord]:
    """
    Sort results into a total order.

    Primary key is obtained marks (descending). The secondary key is the
    number of recorded answers (descending) for the leaderboard, or the time
    taken (ascending) for the results table. Remaining ties keep input order.
    """
    if by == RANK_BY_SCORE:
        return sorted(results, key=lambda r: (-r.obtained_marks, -len(r.answers)))
    if by == RANK_BY_TIME:
        return sorted(results, key=lambda r: (-r.obtained_marks, r.time_taken))
    raise ValueError(f"Unknown ranking: {by}")


def score_percentage(obtained: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(obtained / total * 100)


def summarize(results: List[ResultRecord]) -> Dict[str, int]:
    """Header statistics for the results table."""
    if not results:
        return {"students": 0, "average_percentage": 0, "top_score": 0}

    percentages = [score_percentage(r.obtained_marks, r.total_marks) for r in results]
    return {
        "students": len(results),
        "average_percentage": round(sum(percentages) / len(percentages)),
        "top_score": max(r.obtained_marks for r in results),
    }


def format_time(seconds: int) -> str:
    return f"{seconds // 60}m {seconds % 60}s"
