"""
Evaluator module for running submissions against test cases.

Provides the Evaluator class which drives the remote execution service case by
case and applies the exact-match checker to each output.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .errors import ExecutionUnavailable
from .models import Problem
from .translations import TRANSLATIONS


STATUS_PASSED = "passed"
STATUS_WRONG_ANSWER = "wrong_answer"
STATUS_EXECUTION_ERROR = "execution_error"


@dataclass
class CaseResult:
    """
    Verdict for one test case.

    For hidden cases input, expected_output and actual_output stay None so the
    report can never leak them.
    """
    case_num: int
    case_id: str
    status: str
    passed: bool
    hidden: bool
    elapsed_ms: int = 0
    input: Optional[str] = None
    expected_output: Optional[str] = None
    actual_output: Optional[str] = None
    error: Optional[str] = None


@dataclass
class EvaluationReport:
    """Outcome of one evaluation call."""
    problem_id: str
    language: str
    sample: bool
    cases: List[CaseResult] = field(default_factory=list)
    # None for sample runs: no judgment is made
    all_passed: Optional[bool] = None
    stdout: str = ""
    stderr: str = ""
    execution_failed: bool = False

    @property
    def passed_count(self) -> int:
        return sum(1 for case in self.cases if case.passed)

    @property
    def total(self) -> int:
        return len(self.cases)

    @property
    def is_scorable(self) -> bool:
        """True when the report may lead to a score push."""
        return not self.sample and not self.execution_failed and bool(self.all_passed)


class Evaluator:
    """Handles test case execution and output validation."""

    def __init__(self, execution_service):
        """Initialize with a client exposing execute(language, source, stdin)."""
        self.execution_service = execution_service
        self.checker: Callable[[Any, Any], bool] = self._exact_match
        self._message_fn = None

    # ===== HELPER FUNCTIONS =====

    def set_message_fn(self, message_fn):
        self._message_fn = message_fn

    def _msg(self, key: str, **kwargs) -> str:
        if self._message_fn:
            return self._message_fn(key, **kwargs)
        template = TRANSLATIONS["en"].get(key, key)
        return template.format(**kwargs)

    # ===== CHECKER =====

    @staticmethod
    def _exact_match(actual_output: Any, expected_output: Any) -> bool:
        """
        Exact string equality after trimming surrounding whitespace.

        Internal whitespace is significant.
        """
        return str(actual_output).strip() == str(expected_output).strip()

    # ===== EXECUTION =====

    def run(
        self,
        problem: Problem,
        code: str,
        language: str,
        sample_input_only: bool
    ) -> EvaluationReport:
        """
        Evaluate code for a problem.

        Args:
            problem: Problem holding the sample input and test cases
            code: Source text to execute
            language: Language key understood by the execution service
            sample_input_only: Run once on the sample input without judging

        Returns:
            EvaluationReport; execution failures are reported inline, never raised
        """
        if sample_input_only:
            return self._run_sample(problem, code, language)
        return self._run_all_cases(problem, code, language)

    def _run_sample(self, problem: Problem, code: str, language: str) -> EvaluationReport:
        report = EvaluationReport(problem_id=problem.id, language=language, sample=True)
        try:
            result = self.execution_service.execute(language, code, problem.sample_input)
        except ExecutionUnavailable as e:
            report.execution_failed = True
            report.stderr = str(e)
            return report

        report.stdout = result.stdout
        report.stderr = result.stderr
        return report

    def _run_all_cases(self, problem: Problem, code: str, language: str) -> EvaluationReport:
        report = EvaluationReport(problem_id=problem.id, language=language, sample=False)

        # Strictly sequential: one call per case, no short-circuit on failure
        for i, test_case in enumerate(problem.test_cases, start=1):
            start_time = time.time()
            error = None
            actual = None

            try:
                result = self.execution_service.execute(language, code, test_case.input)
                actual = result.stdout
                is_correct = self.checker(actual, test_case.expected_output)
                status = STATUS_PASSED if is_correct else STATUS_WRONG_ANSWER
            except ExecutionUnavailable as e:
                is_correct = False
                status = STATUS_EXECUTION_ERROR
                error = str(e)
                report.execution_failed = True

            elapsed_ms = int((time.time() - start_time) * 1000)

            case_result = CaseResult(
                case_num=i,
                case_id=test_case.id,
                status=status,
                passed=is_correct,
                hidden=test_case.hidden,
                elapsed_ms=elapsed_ms,
                error=error
            )

            # Only visible cases keep input/expected/actual for debugging
            if not test_case.hidden:
                case_result.input = test_case.input
                case_result.expected_output = test_case.expected_output
                case_result.actual_output = actual

            report.cases.append(case_result)

        report.all_passed = bool(report.cases) and all(c.passed for c in report.cases)
        return report

    # ===== UTILITY METHODS =====

    def format_report(self, report: EvaluationReport, show_details: bool = False) -> str:
        """
        Format an evaluation report for display to the learner.

        Args:
            report: Report returned by run()
            show_details: If True, show input and output comparison for failed visible cases

        Returns:
            Formatted string for terminal display
        """
        lines = []

        if report.sample:
            if report.execution_failed:
                lines.append(self._msg("eval_execution_unavailable", error=report.stderr))
            elif report.stderr.strip():
                lines.append(report.stderr.rstrip())
            elif report.stdout.strip():
                lines.append(report.stdout.rstrip())
            else:
                lines.append(self._msg("eval_no_output"))
            return "\n".join(lines)

        lines.append(self._msg("eval_running_cases", total=report.total))

        for case in report.cases:
            if case.status == STATUS_PASSED:
                lines.append(self._msg("eval_case_passed", num=case.case_num))
            elif case.status == STATUS_EXECUTION_ERROR:
                lines.append(self._msg("eval_case_execution_error", num=case.case_num))
            else:
                lines.append(self._msg("eval_case_failed", num=case.case_num))

            if case.hidden or case.passed or not show_details:
                continue

            if case.error:
                lines.append(self._msg("eval_error_label", text=case.error.strip()[:200]))
            if case.input is not None:
                lines.append(self._msg("eval_input_label", text=repr(case.input)[:100]))
            if case.actual_output is not None:
                lines.append(self._msg("eval_actual_output", output=repr(case.actual_output)[:100]))
            if case.expected_output is not None:
                lines.append(self._msg("eval_expected_output", output=repr(case.expected_output)[:100]))

        lines.append("")
        lines.append(self._msg("eval_result_summary", passed=report.passed_count, total=report.total))
        if report.execution_failed:
            lines.append(self._msg("eval_not_scored"))
        return "\n".join(lines)

    def report_to_dict(self, report: EvaluationReport) -> Dict[str, Any]:
        """Serializable summary of a report, used for the session log."""
        return {
            "problemId": report.problem_id,
            "sample": report.sample,
            "allPassed": report.all_passed,
            "passed": report.passed_count,
            "total": report.total,
            "cases": [case.status for case in report.cases],
            "executionFailed": report.execution_failed,
        }
