"""
Data models for the exam controller.

Provides type-safe structures for problems, test cases, the learner's
persisted session and the score records exchanged with the remote store.
Wire format is the camelCase JSON used by the exam API.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict


DIFFICULTIES = ("Easy", "Medium", "Hard")


@dataclass
class TestCase:
    """Represents a single test case for a problem."""
    __test__ = False  # keep pytest from collecting this class

    id: str
    input: str
    expected_output: str
    hidden: bool = False

    @staticmethod
    def from_dict(data: dict) -> 'TestCase':
        """Create a TestCase from a dictionary."""
        # Older banks spell the flag isHidden
        hidden = data.get('hidden', data.get('isHidden', False))
        return TestCase(
            id=str(data.get('id', '')),
            input=data.get('input', ''),
            expected_output=data.get('expectedOutput', ''),
            hidden=bool(hidden)
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "input": self.input,
            "expectedOutput": self.expected_output,
            "hidden": self.hidden
        }


@dataclass
class Problem:
    """Represents a coding problem from the catalog."""
    id: str
    title: str
    description: str
    difficulty: str
    marks: int
    sample_input: str
    sample_output: str
    test_cases: List[TestCase]
    starter_code: Dict[str, str]
    solution: Optional[str] = None

    @staticmethod
    def from_dict(data: dict) -> 'Problem':
        """Create a Problem object from a dictionary."""
        return Problem(
            id=str(data['id']),
            title=data['title'],
            description=data.get('description', ''),
            difficulty=data.get('difficulty', 'Easy'),
            marks=int(data.get('marks', 0)),
            sample_input=data.get('sampleInput', ''),
            sample_output=data.get('sampleOutput', ''),
            test_cases=[TestCase.from_dict(tc) for tc in data.get('testCases', [])],
            starter_code=dict(data.get('starterCode') or {}),
            solution=data.get('solution')
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "marks": self.marks,
            "sampleInput": self.sample_input,
            "sampleOutput": self.sample_output,
            "testCases": [tc.to_dict() for tc in self.test_cases],
            "starterCode": dict(self.starter_code),
        }
        if self.solution is not None:
            data["solution"] = self.solution
        return data

    def starter_for(self, language: str) -> str:
        """Return the starter template for a language (empty if none)."""
        return self.starter_code.get(language, "")


@dataclass
class PerProblemWork:
    """The learner's work on one problem."""
    code: str
    language: str
    passed: bool = False
    # Set once a full submission has been evaluated; unlocks the model answer
    attempted: bool = False

    @staticmethod
    def from_dict(data: dict) -> 'PerProblemWork':
        return PerProblemWork(
            code=data.get('code', ''),
            language=data.get('language', ''),
            passed=bool(data.get('passed', False)),
            attempted=bool(data.get('attempted', False))
        )

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "language": self.language,
            "passed": self.passed,
            "attempted": self.attempted
        }


@dataclass
class SessionState:
    """State of one exam attempt, persisted across restarts until logout."""
    start_time: datetime
    work: Dict[str, PerProblemWork] = field(default_factory=dict)

    @staticmethod
    def new() -> 'SessionState':
        """Start a fresh attempt at the current time."""
        return SessionState(start_time=datetime.now(), work={})

    @staticmethod
    def from_dict(data: dict) -> 'SessionState':
        return SessionState(
            start_time=datetime.fromisoformat(data['startTime']),
            work={
                pid: PerProblemWork.from_dict(w)
                for pid, w in (data.get('work') or {}).items()
            }
        )

    def to_dict(self) -> dict:
        return {
            "startTime": self.start_time.isoformat(),
            "work": {pid: w.to_dict() for pid, w in self.work.items()}
        }


@dataclass
class SubmissionRecord:
    """One accepted answer sent to the score accumulator."""
    problem_id: str
    code: str
    language: str
    passed: bool
    marks: int

    @staticmethod
    def from_dict(data: dict) -> 'SubmissionRecord':
        return SubmissionRecord(
            problem_id=str(data.get('questionId', data.get('problemId', ''))),
            code=data.get('code', ''),
            language=data.get('language', ''),
            passed=bool(data.get('passed', False)),
            marks=int(data.get('marks', 0))
        )

    def to_dict(self) -> dict:
        return {
            "questionId": self.problem_id,
            "code": self.code,
            "language": self.language,
            "passed": self.passed,
            "marks": self.marks
        }


@dataclass
class ResultRecord:
    """A learner's accumulated result as held by the remote store."""
    student_name: str
    roll_number: str
    obtained_marks: int
    total_marks: int
    correct_answers: int = 0
    wrong_answers: int = 0
    time_taken: int = 0  # seconds
    submitted_at: Optional[str] = None
    answers: List[SubmissionRecord] = field(default_factory=list)

    @staticmethod
    def from_dict(data: dict) -> 'ResultRecord':
        return ResultRecord(
            student_name=data.get('studentName', ''),
            roll_number=str(data.get('rollNumber', '')),
            obtained_marks=int(data.get('obtainedMarks', 0)),
            total_marks=int(data.get('totalMarks', 0)),
            correct_answers=int(data.get('correctAnswers', 0)),
            wrong_answers=int(data.get('wrongAnswers', 0)),
            time_taken=int(data.get('timeTaken', 0)),
            submitted_at=data.get('submittedAt'),
            answers=[SubmissionRecord.from_dict(a) for a in data.get('answers') or []]
        )

    def to_dict(self) -> dict:
        return {
            "studentName": self.student_name,
            "rollNumber": self.roll_number,
            "obtainedMarks": self.obtained_marks,
            "totalMarks": self.total_marks,
            "correctAnswers": self.correct_answers,
            "wrongAnswers": self.wrong_answers,
            "timeTaken": self.time_taken,
            "submittedAt": self.submitted_at,
            "answers": [a.to_dict() for a in self.answers]
        }


@dataclass
class Learner:
    """The student owning the session."""
    name: str
    roll_number: str


@dataclass
class ClientConfig:
    """
    Configuration for the exam client.

    Attributes:
        api_base_url: Base URL of the exam API
        request_timeout_seconds: Timeout applied to every remote call
        session_dir: Directory holding session blobs and event logs
        languages: Selectable languages, the first one is the default
        exam_time_minutes: Exam duration, -1 for no limit
        bank_path: Optional local problem bank used instead of the remote catalog
    """
    api_base_url: str
    request_timeout_seconds: float
    session_dir: str
    languages: List[str]
    exam_time_minutes: int
    bank_path: Optional[str] = None

    @staticmethod
    def from_dict(data: dict) -> 'ClientConfig':
        """Create ClientConfig from dictionary."""
        return ClientConfig(
            api_base_url=str(data.get('api_base_url', 'http://127.0.0.1:8000')).rstrip('/'),
            request_timeout_seconds=float(data.get('request_timeout_seconds', 8)),
            session_dir=data.get('session_dir', '.codeexam'),
            languages=list(data.get('languages', ['python', 'java'])),
            exam_time_minutes=data.get('exam_time_minutes', -1),
            bank_path=data.get('bank_path')
        )

    def validate(self) -> tuple[bool, str]:
        """
        Validate configuration consistency.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not self.api_base_url.startswith(("http://", "https://")):
            return False, f"api_base_url must be an http(s) URL, got '{self.api_base_url}'"

        if self.request_timeout_seconds <= 0:
            return False, "request_timeout_seconds must be positive"

        if not self.languages:
            return False, "At least one language must be configured"

        if not self.session_dir:
            return False, "session_dir must not be empty"

        if self.exam_time_minutes != -1 and (self.exam_time_minutes < 1 or self.exam_time_minutes > 480):
            return False, "Exam time must be between 1 and 480 minutes (8 hours), or -1 for no limit"

        return True, ""

    @property
    def default_language(self) -> str:
        return self.languages[0]

    @staticmethod
    def default() -> 'ClientConfig':
        """Return default configuration."""
        return ClientConfig.from_dict({})
