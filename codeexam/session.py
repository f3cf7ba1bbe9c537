"""
Exam session controller.

Owns the learner's SessionState and working CompletedSet and wires the
persistent session, completion reconciliation, evaluation and score
recording together. Every state change is persisted before the call returns.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Set, Tuple

from .errors import ActionInProgress, NetworkUnavailable, ScoreRecordFailed
from .evaluator import Evaluator, EvaluationReport
from .models import ClientConfig, Learner, PerProblemWork, Problem, SessionState
from .persistence import PersistentSession
from .reconciler import CompletionReconciler
from .recorder import ScoreRecorder


@dataclass
class SubmitOutcome:
    """Result of a submit action for one problem."""
    problem_id: str
    report: EvaluationReport
    recorded: bool = False
    already_completed: bool = False
    score_error: Optional[str] = None


class ExamSession:
    """Manages the state of a learner's exam session."""

    def __init__(
        self,
        learner: Learner,
        config: ClientConfig,
        catalog,
        completion_service,
        execution_service,
        score_service,
        store: Optional[PersistentSession] = None
    ):
        self.learner = learner
        self.config = config
        self.catalog = catalog
        self.completion_service = completion_service
        self.score_service = score_service

        session_dir = Path(config.session_dir)
        self.store = store or PersistentSession(session_dir, learner.roll_number)
        self.log_path = self.store.path.with_name(
            self.store.path.name.replace(".session.json", ".session.log")
        )

        self.evaluator = Evaluator(execution_service)
        self.reconciler = CompletionReconciler()
        self.recorder: Optional[ScoreRecorder] = None

        self.state: Optional[SessionState] = None
        self.problems: List[Problem] = []
        self.current: Optional[Problem] = None
        self.language: str = config.default_language

        # Errors met while loading, shown to the learner instead of crashing
        self.load_errors: List[str] = []

        # (action, problem_id) pairs with an outstanding call
        self._busy: Set[Tuple[str, str]] = set()

    def log(self, event: str, details: str = ""):
        """Append an entry to the session log."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        log_entry = f"[{timestamp}] - {event}"
        if details:
            log_entry += f" - {details}"
        log_entry += "\n"

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, 'a', encoding='utf-8') as f:
            f.write(log_entry)

    # ===== LIFECYCLE =====

    def start(self) -> Optional[Problem]:
        """
        Load or create the session, fetch the catalog and the completed-set,
        then select the current problem.

        Returns:
            The selected problem, or None when the catalog is empty
        """
        state = self.store.load()
        if state is None:
            state = SessionState.new()
            self.store.save(state)
            self.log("SESSION_START", f"Student: {self.learner.name} ({self.learner.roll_number})")
        else:
            self.log("SESSION_RESUME", f"Started at {state.start_time.isoformat()}, {len(state.work)} problem(s) in progress")
        self.state = state

        self.reconciler = CompletionReconciler()

        try:
            self.problems = self.catalog.list_problems()
        except NetworkUnavailable as e:
            self.problems = []
            self.load_errors.append(str(e))
            self.log("LOAD_ERROR", f"Catalog: {e}")

        self.recorder = ScoreRecorder(
            self.score_service,
            self.learner,
            total_marks=self.total_marks(),
            elapsed_seconds=self.elapsed_seconds
        )

        try:
            self.refresh_completed()
        except NetworkUnavailable as e:
            self.load_errors.append(str(e))
            self.log("LOAD_ERROR", f"Completion status: {e}")

        problem = self.reconciler.select_current(self.problems)
        if problem is not None:
            self.select_problem(problem.id)
        return problem

    def refresh_completed(self) -> Set[str]:
        """
        Re-fetch the remote completed-set and reconcile it.

        Raises:
            NetworkUnavailable: the completion service could not be reached
        """
        remote_ids = self.completion_service.completed_ids(self.learner.roll_number)
        completed = self.reconciler.reconcile(remote_ids)
        self.log("COMPLETED_SYNC", f"Completed: {', '.join(sorted(completed)) or 'none'}")
        return completed

    def logout(self):
        """End the attempt: the cached session is discarded."""
        self.store.clear()
        self.log("SESSION_LOGOUT", "Session cleared")
        self.state = None
        self.current = None

    # ===== PROBLEMS AND WORK =====

    def total_marks(self) -> int:
        return sum(p.marks for p in self.problems)

    @property
    def completed(self) -> Set[str]:
        return set(self.reconciler.completed)

    def pending_problems(self) -> List[Problem]:
        return [p for p in self.problems if not self.reconciler.is_completed(p.id)]

    def completed_problems(self) -> List[Problem]:
        return [p for p in self.problems if self.reconciler.is_completed(p.id)]

    def get_problem(self, problem_id: str) -> Problem:
        for problem in self.problems:
            if problem.id == problem_id:
                return problem
        raise KeyError(problem_id)

    def select_problem(self, problem_id: str) -> PerProblemWork:
        """Switch to a problem, restoring its saved work or its starter template."""
        problem = self.get_problem(problem_id)
        work = self.reconciler.open_work(problem, self.state, self.language)
        self.current = problem
        self.language = work.language
        self.store.save(self.state)
        self.log("PROBLEM_OPEN", f"Problem: {problem.id}, Language: {work.language}")
        return work

    def current_work(self) -> Optional[PerProblemWork]:
        if self.current is None:
            return None
        return self.state.work.get(self.current.id)

    def edit_code(self, code: str):
        """Store an edit to the current problem's code."""
        work = self._require_current_work()
        work.code = code
        self.store.save(self.state)
        self.log("CODE_EDIT", f"Problem: {self.current.id}, {len(code)} chars")

    def change_language(self, language: str):
        """
        Switch language for the current problem. Code still equal to the old
        language's starter template is replaced by the new one.
        """
        if language not in self.config.languages:
            raise ValueError(f"Unsupported language: {language}")

        work = self._require_current_work()
        old_starter = self.current.starter_for(work.language)
        if not work.code or work.code == old_starter:
            work.code = self.current.starter_for(language)
        work.language = language
        self.language = language
        self.store.save(self.state)
        self.log("LANGUAGE_CHANGE", f"Problem: {self.current.id}, Language: {language}")

    def can_reveal_solution(self, problem_id: str) -> bool:
        """The model answer unlocks once the learner has submitted for the problem."""
        work = self.state.work.get(problem_id) if self.state else None
        return work is not None and (work.attempted or work.passed)

    def _require_current_work(self) -> PerProblemWork:
        if self.current is None:
            raise RuntimeError("No problem selected")
        return self.reconciler.open_work(self.current, self.state, self.language)

    # ===== EVALUATION =====

    def _acquire(self, action: str, problem_id: str):
        key = (action, problem_id)
        if key in self._busy:
            raise ActionInProgress(action, problem_id)
        self._busy.add(key)

    def _release(self, action: str, problem_id: str):
        self._busy.discard((action, problem_id))

    def is_busy(self, action: str, problem_id: str) -> bool:
        return (action, problem_id) in self._busy

    def run_sample(self) -> EvaluationReport:
        """Run the current code once against the sample input."""
        work = self._require_current_work()
        problem = self.current

        self._acquire("run", problem.id)
        try:
            report = self.evaluator.run(problem, work.code, work.language, sample_input_only=True)
        finally:
            self._release("run", problem.id)

        self.log("RUN", json.dumps(self.evaluator.report_to_dict(report)))
        return report

    def submit(self, problem_id: Optional[str] = None) -> SubmitOutcome:
        """
        Evaluate a problem's saved code against its full test-case suite and
        record the score on a first full pass.

        Results are applied to the problem id captured here, whatever problem
        is selected by the time they arrive.
        """
        if problem_id is None:
            self._require_current_work()
            problem_id = self.current.id
        problem = self.get_problem(problem_id)
        work = self.reconciler.open_work(problem, self.state, self.language)

        self._acquire("submit", problem_id)
        try:
            if not self.reconciler.synced:
                try:
                    self.refresh_completed()
                except NetworkUnavailable as e:
                    self.log("LOAD_ERROR", f"Completion status: {e}")

            was_completed = self.reconciler.is_completed(problem_id)
            code, language = work.code, work.language

            report = self.evaluator.run(problem, code, language, sample_input_only=False)
            outcome = SubmitOutcome(problem_id=problem_id, report=report, already_completed=was_completed)

            work.attempted = True
            work.passed = bool(report.all_passed)
            self.store.save(self.state)

            self.log("SUBMISSION", json.dumps(self.evaluator.report_to_dict(report)))

            if report.is_scorable and not was_completed:
                try:
                    self.recorder.record(problem_id, code, language, problem.marks)
                except ScoreRecordFailed as e:
                    outcome.score_error = str(e)
                    self.log("SCORE_FAILED", str(e))
                else:
                    self.reconciler.acknowledge(problem_id)
                    outcome.recorded = True
                    self.log("SCORE_RECORDED", f"Problem: {problem_id}, Marks: {problem.marks}")
        finally:
            self._release("submit", problem_id)

        return outcome

    # ===== TIMER =====

    def elapsed_seconds(self) -> int:
        if self.state is None:
            return 0
        return max(0, int((datetime.now() - self.state.start_time).total_seconds()))

    def get_remaining_time(self) -> timedelta:
        """Get the remaining exam time as a timedelta."""
        if self.config.exam_time_minutes == -1 or self.state is None:
            return timedelta.max
        end_time = self.state.start_time + timedelta(minutes=self.config.exam_time_minutes)
        return max(end_time - datetime.now(), timedelta(0))

    def is_time_expired(self) -> bool:
        if self.config.exam_time_minutes == -1:
            return False
        return self.get_remaining_time() <= timedelta(0)

    def format_remaining_time(self) -> str:
        """Format remaining time as HH:MM:SS."""
        if self.config.exam_time_minutes == -1:
            return "infinite"

        total_seconds = int(self.get_remaining_time().total_seconds())
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
