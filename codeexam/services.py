"""
HTTP clients for the exam API.

Each remote collaborator gets a small client:
- CatalogService: ordered problem list and single problem lookup
- CompletionService: ids of problems a learner has already solved
- ExecutionService: stateless {language, source, stdin} -> {stdout, stderr}
- ScoreService: score accumulation and result listing
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Set

import requests

from .errors import ExecutionUnavailable, NetworkUnavailable
from .models import Problem, ResultRecord


@dataclass
class ExecutionResult:
    stdout: str
    stderr: str


class ApiClient:
    """Thin wrapper around requests with the exam API's base URL and timeout."""

    def __init__(self, base_url: str, timeout: float = 8.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get_json(self, path: str) -> Any:
        """GET a JSON document, raising NetworkUnavailable on any failure."""
        try:
            response = self.http.get(self.url(path), timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise NetworkUnavailable(f"GET {path} failed: {e}") from e

    def post_json(self, path: str, payload: dict) -> Any:
        """POST a JSON payload and return the decoded response body."""
        response = self.http.post(self.url(path), json=payload, timeout=self.timeout)
        response.raise_for_status()
        return response.json()


class CatalogService:
    """Remote problem catalog."""

    def __init__(self, client: ApiClient):
        self.client = client

    def list_problems(self) -> List[Problem]:
        data = self.client.get_json("/api/admin/questions")
        if not isinstance(data, list):
            raise NetworkUnavailable("Problem catalog response is not a list")
        return [Problem.from_dict(item) for item in data]

    def get_problem(self, problem_id: str) -> Problem:
        return Problem.from_dict(self.client.get_json(f"/api/admin/questions/{problem_id}"))


class CompletionService:
    """Remote record of problems a learner has already solved."""

    def __init__(self, client: ApiClient):
        self.client = client

    def completed_ids(self, roll_number: str) -> Set[str]:
        data = self.client.get_json(f"/api/student/check-submission/{roll_number}")
        if not isinstance(data, dict):
            raise NetworkUnavailable("Completion status response is not an object")
        return {str(pid) for pid in data.get("completedIds") or []}


class ExecutionService:
    """Remote code execution."""

    def __init__(self, client: ApiClient):
        self.client = client

    def execute(self, language: str, source: str, stdin: str) -> ExecutionResult:
        """
        Run source once with the given stdin.

        Raises:
            ExecutionUnavailable: network error, timeout or service error
        """
        payload = {"language": language, "source": source, "input": stdin}
        try:
            data = self.client.post_json("/api/student/execute", payload)
        except (requests.RequestException, ValueError) as e:
            raise ExecutionUnavailable(f"Execution service failed: {e}") from e

        if not isinstance(data, dict):
            raise ExecutionUnavailable("Execution service returned an invalid response")

        # The service reports its primary output as "output"; "stdout" is accepted too
        stdout = data.get("output")
        if stdout is None:
            stdout = data.get("stdout") or ""
        return ExecutionResult(stdout=stdout, stderr=data.get("stderr") or "")


class ScoreService:
    """Remote score accumulation store."""

    def __init__(self, client: ApiClient):
        self.client = client

    def save_result(self, payload: dict) -> Any:
        """
        Push one score increment.

        Raises:
            requests.RequestException or ValueError when not acknowledged
        """
        return self.client.post_json("/api/student/save-result", payload)

    def list_results(self) -> List[ResultRecord]:
        data = self.client.get_json("/api/admin/results")
        if not isinstance(data, list):
            raise NetworkUnavailable("Results response is not a list")
        return [ResultRecord.from_dict(item) for item in data]
