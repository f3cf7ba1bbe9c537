"""
Tests for the exam session controller.

Runs whole load/edit/run/submit flows against in-memory fakes of the
catalog, completion, execution and score services.
"""

import json
import pytest
import requests
from datetime import datetime, timedelta
from unittest.mock import Mock
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from codeexam.errors import ActionInProgress, ExecutionUnavailable, NetworkUnavailable
from codeexam.models import ClientConfig, Learner, PerProblemWork, Problem, SessionState, TestCase
from codeexam.persistence import PersistentSession
from codeexam.services import ExecutionResult
from codeexam.session import ExamSession


ECHO = "echo"
EXPECTED = "expected"


def make_problem(problem_id, cases, marks=10, solution=None):
    return Problem(
        id=problem_id,
        title=f"Problem {problem_id}",
        description="",
        difficulty="Easy",
        marks=marks,
        sample_input="sample",
        sample_output="sample",
        test_cases=[
            TestCase(id=f"{problem_id}-t{i}", input=inp, expected_output=exp)
            for i, (inp, exp) in enumerate(cases, start=1)
        ],
        starter_code={"python": f"# {problem_id} starter", "java": f"// {problem_id} starter"},
        solution=solution
    )


class FakeExecution:
    """
    Interprets two toy programs: ECHO prints its input unchanged and
    EXPECTED prints the expected output of whichever case it is given.
    """

    def __init__(self, problems):
        self.expected = {tc.input: tc.expected_output for p in problems for tc in p.test_cases}
        self.calls = []

    def execute(self, language, source, stdin):
        self.calls.append((language, source, stdin))
        if source == EXPECTED:
            return ExecutionResult(stdout=self.expected.get(stdin, ""), stderr="")
        return ExecutionResult(stdout=stdin, stderr="")


class FakeCompletion:
    def __init__(self, ids=()):
        self.ids = set(ids)
        self.error = None

    def completed_ids(self, roll_number):
        if self.error:
            raise self.error
        return set(self.ids)


@pytest.fixture
def problems():
    return [
        make_problem("q1", [("1", "1"), ("2", "3")], solution="print(model)"),
        make_problem("q2", [("10", "10")], marks=20),
    ]


@pytest.fixture
def config(tmp_path):
    return ClientConfig.from_dict({"session_dir": str(tmp_path / "sessions")})


@pytest.fixture
def score_service():
    service = Mock()
    service.save_result.return_value = {"success": True}
    return service


@pytest.fixture
def make_session(problems, config, score_service):
    def factory(completed=(), execution=None, catalog=None):
        if catalog is None:
            catalog = Mock()
            catalog.list_problems.return_value = list(problems)
        return ExamSession(
            Learner(name="Ada", roll_number="R-1"),
            config,
            catalog,
            FakeCompletion(completed),
            execution or FakeExecution(problems),
            score_service
        )
    return factory


class TestStart:
    """Test loading a session."""

    def test_new_session(self, make_session):
        session = make_session()

        problem = session.start()

        assert problem.id == "q1"
        assert session.current_work().code == "# q1 starter"
        assert session.store.load() is not None
        assert "SESSION_START" in session.log_path.read_text(encoding='utf-8')

    def test_skips_completed_problems(self, make_session):
        session = make_session(completed=["q1"])

        assert session.start().id == "q2"
        assert [p.id for p in session.pending_problems()] == ["q2"]
        assert [p.id for p in session.completed_problems()] == ["q1"]

    def test_all_completed_review_mode(self, make_session):
        session = make_session(completed=["q1", "q2"])

        assert session.start().id == "q1"

    def test_resume_restores_code(self, make_session):
        first = make_session()
        first.start()
        first.edit_code("print('work in progress')")
        start_time = first.state.start_time

        second = make_session()
        second.start()

        assert second.state.start_time == start_time
        assert second.current_work().code == "print('work in progress')"
        assert "SESSION_RESUME" in second.log_path.read_text(encoding='utf-8')

    def test_remote_set_replaces_cached_completion(self, make_session, config):
        """Test a locally cached pass is not trusted over the remote set."""
        store = PersistentSession(Path(config.session_dir), "R-1")
        store.save(SessionState(
            start_time=datetime.now(),
            work={"q1": PerProblemWork(code="x", language="python", passed=True)}
        ))

        session = make_session(completed=[])
        session.start()

        assert session.completed == set()

    def test_catalog_unavailable(self, make_session):
        catalog = Mock()
        catalog.list_problems.side_effect = NetworkUnavailable("catalog down")
        session = make_session(catalog=catalog)

        assert session.start() is None
        assert session.problems == []
        assert session.load_errors == ["catalog down"]
        assert "LOAD_ERROR" in session.log_path.read_text(encoding='utf-8')

    def test_completion_unavailable_trusts_no_local_pass(self, make_session, config):
        """Test saved pass flags do not mark a problem solved while offline."""
        store = PersistentSession(Path(config.session_dir), "R-1")
        store.save(SessionState(
            start_time=datetime.now(),
            work={"q1": PerProblemWork(code="x", language="python", passed=True)}
        ))
        session = make_session()
        session.completion_service.error = NetworkUnavailable("status down")

        assert session.start().id == "q1"
        assert session.completed == set()
        assert session.load_errors == ["status down"]
        assert not session.reconciler.synced


class TestEditing:
    """Test code edits and language changes."""

    def test_edit_is_persisted(self, make_session):
        session = make_session()
        session.start()

        session.edit_code("new code")

        assert session.store.load().work["q1"].code == "new code"

    def test_change_language_swaps_untouched_starter(self, make_session):
        session = make_session()
        session.start()

        session.change_language("java")

        work = session.current_work()
        assert work.language == "java"
        assert work.code == "// q1 starter"

    def test_change_language_keeps_edited_code(self, make_session):
        session = make_session()
        session.start()
        session.edit_code("mine")

        session.change_language("java")

        assert session.current_work().code == "mine"

    def test_unsupported_language(self, make_session):
        session = make_session()
        session.start()

        with pytest.raises(ValueError):
            session.change_language("cobol")

    def test_select_problem_restores_each_problem(self, make_session):
        session = make_session()
        session.start()
        session.edit_code("q1 code")

        session.select_problem("q2")
        assert session.current_work().code == "# q2 starter"

        session.select_problem("q1")
        assert session.current_work().code == "q1 code"

    def test_unknown_problem(self, make_session):
        session = make_session()
        session.start()

        with pytest.raises(KeyError):
            session.select_problem("q9")


class TestSubmit:
    """Test full submissions and score recording."""

    def test_echo_code_fails_second_case(self, make_session, score_service):
        """Test a partially passing submission is never scored."""
        session = make_session()
        session.start()
        session.edit_code(ECHO)

        outcome = session.submit()

        assert [c.passed for c in outcome.report.cases] == [True, False]
        assert outcome.report.all_passed is False
        assert not outcome.recorded
        score_service.save_result.assert_not_called()
        assert session.completed == set()

    def test_passing_code_recorded_once(self, make_session, score_service):
        session = make_session()
        session.start()
        session.edit_code(EXPECTED)

        outcome = session.submit()

        assert [c.passed for c in outcome.report.cases] == [True, True]
        assert outcome.report.all_passed is True
        assert outcome.recorded
        score_service.save_result.assert_called_once()
        payload = score_service.save_result.call_args[0][0]
        assert payload["obtainedMarks"] == 10
        assert payload["totalMarks"] == 30
        assert "q1" in session.completed

    def test_resubmitting_completed_problem_adds_nothing(self, make_session, score_service):
        session = make_session()
        session.start()
        session.edit_code(EXPECTED)
        session.submit()

        outcome = session.submit()

        assert outcome.already_completed
        assert not outcome.recorded
        assert score_service.save_result.call_count == 1

    def test_remotely_completed_problem_not_rescored(self, make_session, score_service):
        session = make_session(completed=["q1"])
        session.start()
        session.select_problem("q1")
        session.edit_code(EXPECTED)

        outcome = session.submit()

        assert outcome.report.all_passed
        assert outcome.already_completed
        score_service.save_result.assert_not_called()

    def test_score_failure_leaves_completed_unchanged(self, make_session, score_service):
        score_service.save_result.side_effect = requests.ConnectionError("refused")
        session = make_session()
        session.start()
        session.edit_code(EXPECTED)

        outcome = session.submit()

        assert outcome.report.all_passed
        assert not outcome.recorded
        assert "refused" in outcome.score_error
        assert session.completed == set()
        assert session.current_work().code == EXPECTED
        assert "SCORE_FAILED" in session.log_path.read_text(encoding='utf-8')

    def test_retry_after_score_failure(self, make_session, score_service):
        score_service.save_result.side_effect = [requests.Timeout("slow"), {"success": True}]
        session = make_session()
        session.start()
        session.edit_code(EXPECTED)
        session.submit()

        outcome = session.submit()

        assert outcome.recorded
        assert "q1" in session.completed

    def test_failed_push_retried_after_offline_reload(self, make_session, score_service):
        """Test a pass whose score was never saved stays pending across a reload."""
        score_service.save_result.side_effect = [requests.ConnectionError("refused"), {"success": True}]
        first = make_session()
        first.start()
        first.edit_code(EXPECTED)
        first.submit()

        second = make_session()
        second.completion_service.error = NetworkUnavailable("status down")

        assert second.start().id == "q1"
        assert second.completed == set()

        outcome = second.submit("q1")

        assert not outcome.already_completed
        assert outcome.recorded
        assert score_service.save_result.call_count == 2

    def test_submission_logged_as_report_summary(self, make_session):
        session = make_session()
        session.start()
        session.edit_code(ECHO)

        session.submit()

        lines = session.log_path.read_text(encoding='utf-8').splitlines()
        entry = next(line for line in lines if " - SUBMISSION - " in line)
        summary = json.loads(entry.split(" - SUBMISSION - ", 1)[1])
        assert summary["problemId"] == "q1"
        assert summary["cases"] == ["passed", "wrong_answer"]
        assert summary["allPassed"] is False
        assert summary["executionFailed"] is False

    def test_execution_failure_not_scored(self, make_session, problems, score_service):
        execution = Mock()
        execution.execute.side_effect = ExecutionUnavailable("down")
        session = make_session(execution=execution)
        session.start()

        outcome = session.submit()

        assert outcome.report.execution_failed
        assert outcome.report.total == 2
        score_service.save_result.assert_not_called()

    def test_submit_applies_to_captured_problem(self, make_session):
        """Test results land on the submitted problem, not the one now selected."""
        session = make_session()
        session.start()
        session.select_problem("q2")
        session.edit_code(EXPECTED)
        session.select_problem("q1")

        outcome = session.submit("q2")

        assert outcome.problem_id == "q2"
        assert outcome.recorded
        assert session.state.work["q2"].passed
        assert not session.state.work["q1"].passed
        assert session.current.id == "q1"

    def test_submit_unlocks_solution(self, make_session):
        session = make_session()
        session.start()
        assert not session.can_reveal_solution("q1")

        session.edit_code(ECHO)
        session.submit()

        assert session.can_reveal_solution("q1")
        assert session.store.load().work["q1"].attempted

    def test_busy_submit_rejected(self, make_session):
        session = make_session()
        session.start()
        session._acquire("submit", "q1")

        with pytest.raises(ActionInProgress):
            session.submit("q1")

        session._release("submit", "q1")
        assert not session.is_busy("submit", "q1")
        session.submit("q1")

    def test_submit_syncs_when_start_could_not(self, make_session, score_service):
        session = make_session(completed=["q1"])
        session.completion_service.error = NetworkUnavailable("status down")
        session.start()
        session.completion_service.error = None
        session.select_problem("q1")
        session.edit_code(EXPECTED)

        outcome = session.submit()

        assert outcome.already_completed
        score_service.save_result.assert_not_called()


class TestRunSample:
    """Test sample runs."""

    def test_run_sample(self, make_session):
        execution = Mock()
        execution.execute.return_value = ExecutionResult(stdout="out", stderr="")
        session = make_session(execution=execution)
        session.start()

        report = session.run_sample()

        assert report.sample
        assert report.stdout == "out"
        execution.execute.assert_called_once_with("python", "# q1 starter", "sample")
        assert not session.is_busy("run", "q1")


class TestTimerAndLogout:
    """Test the exam timer and logout."""

    def test_no_time_limit(self, make_session):
        session = make_session()
        session.start()

        assert session.format_remaining_time() == "infinite"
        assert not session.is_time_expired()

    def test_time_expired(self, make_session, config):
        config.exam_time_minutes = 30
        session = make_session()
        session.start()
        session.state.start_time = datetime.now() - timedelta(minutes=31)

        assert session.is_time_expired()
        assert session.format_remaining_time() == "00:00:00"

    def test_remaining_time(self, make_session, config):
        config.exam_time_minutes = 60
        session = make_session()
        session.start()

        assert timedelta(minutes=59) < session.get_remaining_time() <= timedelta(minutes=60)

    def test_logout_clears_session(self, make_session):
        session = make_session()
        session.start()

        session.logout()

        assert session.state is None
        assert session.store.load() is None
        assert "SESSION_LOGOUT" in session.log_path.read_text(encoding='utf-8')
