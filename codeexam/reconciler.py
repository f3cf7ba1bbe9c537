"""
Completion reconciliation and problem selection.

The remote completion record is the only source of truth for which problems
are solved; the local session cache holds code only.
"""

from typing import Iterable, List, Optional, Set

from .models import Problem, PerProblemWork, SessionState


class CompletionReconciler:
    """Maintains the working CompletedSet for one session."""

    def __init__(self):
        # Empty until the completion service answers; local work never counts
        self.completed: Set[str] = set()
        self._synced = False

    def reconcile(self, remote_ids: Iterable[str]) -> Set[str]:
        """
        Apply a freshly fetched remote completed-set.

        The first reconciliation replaces the working set verbatim. Later ones
        keep every id already admitted in this session, so the set never
        shrinks while the session lasts.

        Returns:
            A copy of the working CompletedSet
        """
        remote = {str(pid) for pid in remote_ids}
        if self._synced:
            self.completed |= remote
        else:
            self.completed = remote
            self._synced = True
        return set(self.completed)

    @property
    def synced(self) -> bool:
        """True once a remote completed-set has been applied."""
        return self._synced

    def acknowledge(self, problem_id: str) -> None:
        """Admit a problem after the score store acknowledged its submission."""
        self.completed.add(problem_id)

    def is_completed(self, problem_id: str) -> bool:
        return problem_id in self.completed

    def select_current(self, problems: List[Problem]) -> Optional[Problem]:
        """First pending problem in catalog order, else the first one (review mode)."""
        if not problems:
            return None
        for problem in problems:
            if problem.id not in self.completed:
                return problem
        return problems[0]

    @staticmethod
    def open_work(problem: Problem, state: SessionState, language: str) -> PerProblemWork:
        """
        Return the saved work for a problem, creating it from the starter
        template of the current language the first time it is opened.
        """
        work = state.work.get(problem.id)
        if work is None:
            work = PerProblemWork(code=problem.starter_for(language), language=language)
            state.work[problem.id] = work
        elif not work.code:
            work.code = problem.starter_for(work.language or language)
        return work
