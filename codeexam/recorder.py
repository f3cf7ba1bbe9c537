"""
Score recording for fully passing submissions.

The score store accumulates one learner's marks. Updates are keyed by
(learner, problem id): a problem already recorded is never counted twice.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Optional

import requests

from .errors import ScoreRecordFailed
from .models import Learner, ResultRecord, SubmissionRecord


class ScoreRecorder:
    """Pushes a single-problem score increment to the remote store."""

    def __init__(
        self,
        score_service,
        learner: Learner,
        total_marks: int,
        elapsed_seconds: Optional[Callable[[], int]] = None
    ):
        self.score_service = score_service
        self.learner = learner
        self.total_marks = total_marks
        self.elapsed_seconds = elapsed_seconds or (lambda: 0)
        # problem id -> ack returned by the store
        self.recorded: Dict[str, Any] = {}

    def build_payload(self, submission: SubmissionRecord) -> dict:
        """Payload for one increment: only this problem's marks and answer."""
        return {
            "studentName": self.learner.name,
            "rollNumber": self.learner.roll_number,
            "obtainedMarks": submission.marks,
            "totalMarks": self.total_marks,
            "correctAnswers": 1,
            "wrongAnswers": 0,
            "timeTaken": int(self.elapsed_seconds()),
            "answers": [submission.to_dict()]
        }

    def record(self, problem_id: str, code: str, language: str, marks: int) -> Any:
        """
        Record a fully passing submission.

        Returns:
            The store's acknowledgment

        Raises:
            ScoreRecordFailed: the store did not acknowledge the increment
        """
        if problem_id in self.recorded:
            # Already counted for this learner; never increment twice
            return self.recorded[problem_id]

        submission = SubmissionRecord(
            problem_id=problem_id,
            code=code,
            language=language,
            passed=True,
            marks=marks
        )

        try:
            ack = self.score_service.save_result(self.build_payload(submission))
        except (requests.RequestException, ValueError) as e:
            raise ScoreRecordFailed(problem_id, str(e)) from e

        if isinstance(ack, dict) and ack.get("success") is False:
            raise ScoreRecordFailed(problem_id, ack.get("message") or "rejected by score store")

        self.recorded[problem_id] = ack
        return ack


def accumulate(result: Optional[ResultRecord], payload: dict) -> ResultRecord:
    """
    Apply one score increment to a learner's ResultRecord.

    Answers are keyed by problem id: a problem already recorded is replaced
    only when the new marks are higher, otherwise the increment is ignored.
    Totals are recomputed from the answers, never blindly incremented.
    """
    if result is None:
        result = ResultRecord(
            student_name=payload.get("studentName", ""),
            roll_number=str(payload.get("rollNumber", "")),
            obtained_marks=0,
            total_marks=int(payload.get("totalMarks", 0)),
        )

    answers = {answer.problem_id: answer for answer in result.answers}
    for raw in payload.get("answers") or []:
        submission = SubmissionRecord.from_dict(raw)
        if not submission.passed:
            continue
        existing = answers.get(submission.problem_id)
        if existing is None or submission.marks > existing.marks:
            answers[submission.problem_id] = submission

    result.answers = list(answers.values())
    result.obtained_marks = sum(answer.marks for answer in result.answers)
    result.correct_answers = len(result.answers)
    result.total_marks = int(payload.get("totalMarks", result.total_marks))
    result.time_taken = max(result.time_taken, int(payload.get("timeTaken", 0)))
    result.submitted_at = datetime.now().isoformat()
    return result
