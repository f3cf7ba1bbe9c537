"""
Exceptions raised by the exam controller and its remote collaborators.

Wrong answers are not exceptions: they are reported as a case status by the
evaluator. Nothing here is fatal; every failure is recoverable by retrying or
restarting from the persisted session.
"""


class ExamError(Exception):
    """Base class for all exam controller errors."""


class NetworkUnavailable(ExamError):
    """A catalog, completion-status or results fetch failed."""


class ExecutionUnavailable(ExamError):
    """The remote code execution call itself failed."""


class ScoreRecordFailed(ExamError):
    """A fully passing submission could not be recorded by the score store."""

    def __init__(self, problem_id: str, reason: str):
        super().__init__(f"Score for '{problem_id}' was not recorded: {reason}")
        self.problem_id = problem_id
        self.reason = reason


class ActionInProgress(ExamError):
    """A run or submit for the same problem is still outstanding."""

    def __init__(self, action: str, problem_id: str):
        super().__init__(f"'{action}' is already in progress for '{problem_id}'")
        self.action = action
        self.problem_id = problem_id


class BankError(ExamError):
    """A local problem bank could not be read, decrypted or parsed."""
