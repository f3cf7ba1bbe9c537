#!/usr/bin/env python3
"""
Code Exam CLI

Student-facing command loop for working through the problem catalog, plus
an admin view of the ranked results. Solutions are edited as files in the
working directory and synced into the saved session before every action.
"""

import os
import sys
import argparse
import getpass
import shutil
from pathlib import Path
from typing import Optional, Set

from .bank import LocalBank
from .config_loader import load_config
from .errors import ActionInProgress, BankError, NetworkUnavailable
from .models import ClientConfig, Learner, Problem
from .persistence import session_file_key
from .ranking import RANK_BY_SCORE, RANK_BY_TIME, format_time, rank, summarize
from .services import ApiClient, CatalogService, CompletionService, ExecutionService, ScoreService
from .session import ExamSession
from .translations import TRANSLATIONS


FILE_EXTENSIONS = {
    "python": ".py",
    "java": ".java",
    "cpp": ".cpp",
    "c": ".c",
    "javascript": ".js",
}


class ExamRunner:
    """Main CLI application controller."""

    def __init__(self):
        self.config: Optional[ClientConfig] = None
        self.session: Optional[ExamSession] = None
        self.client: Optional[ApiClient] = None
        self.solutions_root: Path = Path.cwd() / "solutions"
        self.solutions_dir: Path = self.solutions_root
        # Solution files written from this session's saved work
        self.owned_files: Set[Path] = set()
        self.language = "en"
        self.messages = TRANSLATIONS["en"]

    def _msg(self, key: str, **kwargs) -> str:
        template = self.messages.get(key, key)
        return template.format(**kwargs)

    # ===== SETUP =====

    def build_catalog(self, bank_arg: Optional[str]):
        """Remote catalog by default, a local bank when one is configured."""
        bank_path = bank_arg or self.config.bank_path
        if not bank_path:
            return CatalogService(self.client)

        bank_path = Path(bank_path)
        key_input = None
        if bank_path.suffix.lower() != '.json':
            key_input = getpass.getpass(self._msg("ask_bank_pass", bank=bank_path.name)).strip()
        return LocalBank.load(bank_path, key_input)

    def authenticate_student(self, name: Optional[str], roll: Optional[str]) -> Optional[Learner]:
        try:
            name = (name or input(self._msg("ask_name"))).strip()
            if not name:
                print(self._msg("name_error"))
                return None
            roll = (roll or input(self._msg("ask_roll"))).strip()
            if not roll:
                print(self._msg("roll_error"))
                return None
        except (KeyboardInterrupt, EOFError):
            print()
            return None
        return Learner(name=name, roll_number=roll)

    def run(self, argv=None) -> int:
        """Main application entry point."""
        parser = argparse.ArgumentParser(
            description="Code Exam client",
            formatter_class=argparse.RawDescriptionHelpFormatter
        )
        parser.add_argument("--config", help="Path to client configuration file (default: config.json)")
        parser.add_argument("--bank", help="Local problem bank (.json or .enc) instead of the remote catalog")
        parser.add_argument("--name", help="Student name")
        parser.add_argument("--roll", help="Student roll number (identifies the saved session)")
        parser.add_argument(
            "--language",
            choices=["en", "fr"],
            default="en",
            help="Interface language (default: en)"
        )
        parser.add_argument(
            "--results",
            choices=[RANK_BY_TIME, RANK_BY_SCORE],
            help="Print the ranked results table (admin view) and exit"
        )
        args = parser.parse_args(argv)

        self.language = args.language
        self.messages = TRANSLATIONS[self.language]

        try:
            self.config = load_config(Path(args.config) if args.config else None)
        except ValueError as e:
            print(self._msg("config_error", error=e))
            return 1

        self.client = ApiClient(self.config.api_base_url, timeout=self.config.request_timeout_seconds)
        score_service = ScoreService(self.client)

        if args.results:
            return self.cmd_results(score_service, by=args.results)

        print(self._msg("header"))
        print(self._msg("title"))
        print(self._msg("header"))

        try:
            catalog = self.build_catalog(args.bank)
        except BankError as e:
            print(self._msg("bank_error", error=e))
            return 1
        except (KeyboardInterrupt, EOFError):
            print()
            return 1

        learner = self.authenticate_student(args.name, args.roll)
        if learner is None:
            return 1

        self.session = ExamSession(
            learner=learner,
            config=self.config,
            catalog=catalog,
            completion_service=CompletionService(self.client),
            execution_service=ExecutionService(self.client),
            score_service=score_service
        )
        self.session.evaluator.set_message_fn(self._msg)

        resumed = self.session.store.path.exists()
        self.session.start()

        print(self._msg("auth_success", name=learner.name, roll=learner.roll_number))
        if resumed:
            print(self._msg("session_resumed", start=self.session.state.start_time.strftime("%Y-%m-%d %H:%M:%S")))
        else:
            print(self._msg("session_new"))
        for error in self.session.load_errors:
            print(self._msg("load_error", error=error))
        if not self.session.problems:
            print(self._msg("catalog_empty"))

        self.solutions_dir = self.solutions_root / session_file_key(learner.roll_number)
        self.solutions_dir.mkdir(parents=True, exist_ok=True)
        print(self._msg("workdir", path=self.solutions_dir))
        if self.session.current is not None:
            self._write_solution_file(self.session.current)

        self.command_loop()
        return 0

    # ===== SOLUTION FILES =====

    def solution_path(self, problem: Problem, language: Optional[str] = None) -> Path:
        language = language or self.session.state.work[problem.id].language
        return self.solutions_dir / f"{problem.id}{FILE_EXTENSIONS.get(language, '.txt')}"

    def _write_solution_file(self, problem: Problem) -> Path:
        """
        Write the solution file from saved work the first time this session
        uses it. Later calls keep the learner's edits.
        """
        path = self.solution_path(problem)
        if path not in self.owned_files:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(self.session.state.work[problem.id].code)
            self.owned_files.add(path)
        return path

    def _sync_current_file(self):
        """Store file edits for the current problem into the session."""
        problem = self.session.current
        if problem is None:
            return
        path = self.solution_path(problem)
        if path not in self.owned_files or not path.exists():
            return
        with open(path, 'r', encoding='utf-8') as f:
            code = f.read()
        if code != self.session.state.work[problem.id].code:
            self.session.edit_code(code)

    # ===== COMMAND LOOP =====

    def command_loop(self):
        """Main interactive command loop."""
        print("\n" + self._msg("header"))
        print(self._msg("cmd_help", languages=", ".join(self.config.languages)))
        print(self._msg("header") + "\n")

        while self.session.state is not None:
            try:
                cmd_line = input("exam> ").strip()
                if not cmd_line:
                    continue

                parts = cmd_line.split()
                command = parts[0].lower()

                self._sync_current_file()

                if command in ['exit', 'quit']:
                    print(self._msg("cmd_exit_message"))
                    self.session.log("SESSION_EXIT", "User exited session - progress saved")
                    break
                elif command == 'help':
                    print(self._msg("cmd_help", languages=", ".join(self.config.languages)))
                elif command == 'list':
                    self.cmd_list()
                elif command == 'open':
                    if len(parts) < 2:
                        print(self._msg("cmd_open_usage"))
                    else:
                        self.cmd_open(parts[1])
                elif command == 'show':
                    self.cmd_show()
                elif command == 'lang':
                    if len(parts) < 2:
                        print(self._msg("cmd_lang_usage"))
                    else:
                        self.cmd_lang(parts[1].lower())
                elif command == 'run':
                    self.cmd_run()
                elif command == 'submit':
                    self.cmd_submit()
                elif command == 'solution':
                    self.cmd_solution()
                elif command == 'status':
                    self.cmd_status()
                elif command == 'refresh':
                    self.cmd_refresh()
                elif command == 'leaderboard':
                    self.cmd_leaderboard()
                elif command == 'time':
                    self.cmd_time()
                elif command == 'logout':
                    self.cmd_logout()
                else:
                    print(self._msg("cmd_unknown", command=command))

            except (KeyboardInterrupt, EOFError):
                print("\n" + self._msg("cmd_interrupt"))
            except ActionInProgress as e:
                print(self._msg("cmd_busy", action=e.action, id=e.problem_id))
            except Exception as e:
                print(self._msg("cmd_error", error=e))
                self.session.log("ERROR", str(e))

    def _resolve_problem(self, ref: str) -> Optional[Problem]:
        """Accept a problem id or its 1-based position in the catalog."""
        for problem in self.session.problems:
            if problem.id == ref:
                return problem
        if ref.isdigit() and 1 <= int(ref) <= len(self.session.problems):
            return self.session.problems[int(ref) - 1]
        return None

    def cmd_list(self):
        print()
        print(self._msg("cmd_list_pending"))
        pending = self.session.pending_problems()
        if not pending:
            print(self._msg("cmd_list_none"))
        for problem in pending:
            print(self._list_item(problem))

        completed = self.session.completed_problems()
        if completed:
            print(self._msg("cmd_list_completed", count=len(completed)))
            for problem in completed:
                print(self._list_item(problem))
        print()

    def _list_item(self, problem: Problem) -> str:
        num = self.session.problems.index(problem) + 1
        return self._msg(
            "cmd_list_item", num=num, id=problem.id, title=problem.title,
            difficulty=problem.difficulty, marks=problem.marks
        )

    def cmd_open(self, ref: str):
        problem = self._resolve_problem(ref)
        if problem is None:
            print(self._msg("cmd_problem_invalid", ref=ref))
            return

        self.session.select_problem(problem.id)
        path = self._write_solution_file(problem)
        self._sync_current_file()
        print(self._msg("cmd_open_done", id=problem.id, path=path))
        if problem.id in self.session.completed:
            print(self._msg("cmd_open_review", id=problem.id))

    def cmd_show(self):
        problem = self.session.current
        if problem is None:
            print(self._msg("cmd_no_problem"))
            return

        print()
        print(self._msg("cmd_show_heading", title=problem.title, difficulty=problem.difficulty, marks=problem.marks))
        print()
        print(problem.description)
        print()
        print(self._msg("cmd_show_sample_input"))
        print(problem.sample_input)
        print(self._msg("cmd_show_sample_output"))
        print(problem.sample_output)
        print()

    def cmd_lang(self, language: str):
        problem = self.session.current
        if problem is None:
            print(self._msg("cmd_no_problem"))
            return
        if language not in self.config.languages:
            print(self._msg("cmd_lang_invalid", language=language, languages=", ".join(self.config.languages)))
            return

        self.session.change_language(language)
        path = self._write_solution_file(problem)
        self._sync_current_file()
        print(self._msg("cmd_lang_done", language=language, path=path))

    def cmd_run(self):
        problem = self.session.current
        if problem is None:
            print(self._msg("cmd_no_problem"))
            return

        print(self._msg("cmd_run_start", id=problem.id))
        report = self.session.run_sample()
        print(self.session.evaluator.format_report(report))
        print()

    def cmd_submit(self):
        problem = self.session.current
        if problem is None:
            print(self._msg("cmd_no_problem"))
            return
        if self.session.is_time_expired():
            print(self._msg("cmd_time_expired"))
            return

        print(self._msg("cmd_submit_start", id=problem.id))
        outcome = self.session.submit(problem.id)

        show_details = os.environ.get('EXAM_DEBUG', '').lower() in ['1', 'true', 'yes']
        print(self.session.evaluator.format_report(outcome.report, show_details=show_details))
        print()

        if outcome.report.execution_failed:
            print(self._msg("cmd_submit_unscored"))
        elif outcome.score_error:
            print(self._msg("cmd_submit_score_error", error=outcome.score_error))
        elif outcome.recorded:
            print(self._msg("cmd_submit_passed", marks=problem.marks))
        elif outcome.report.all_passed:
            print(self._msg("cmd_submit_review"))
        else:
            print(self._msg("cmd_submit_failed"))
        print()

    def cmd_solution(self):
        problem = self.session.current
        if problem is None:
            print(self._msg("cmd_no_problem"))
            return
        if not self.session.can_reveal_solution(problem.id):
            print(self._msg("cmd_solution_locked"))
            return

        print(self._msg("cmd_solution_heading"))
        print(problem.solution or self._msg("cmd_solution_none"))

    def cmd_status(self):
        print()
        print(self._msg("cmd_status_header", name=self.session.learner.name))
        completed = self.session.completed
        for problem in self.session.problems:
            mark = "x" if problem.id in completed else " "
            print(self._msg("cmd_status_line", mark=mark, id=problem.id, title=problem.title))

        marks = sum(p.marks for p in self.session.completed_problems())
        print(self._msg(
            "cmd_status_total", done=len(self.session.completed_problems()),
            total=len(self.session.problems), marks=marks, max_marks=self.session.total_marks()
        ))
        print()

    def cmd_refresh(self):
        try:
            if not self.session.problems:
                self.session.problems = self.session.catalog.list_problems()
                self.session.recorder.total_marks = self.session.total_marks()
            completed = self.session.refresh_completed()
        except NetworkUnavailable as e:
            print(self._msg("load_error", error=e))
            return
        if self.session.current is None and self.session.problems:
            self.cmd_open(self.session.reconciler.select_current(self.session.problems).id)
        print(self._msg("cmd_refresh_done", completed=", ".join(sorted(completed)) or "-"))

    def cmd_leaderboard(self):
        try:
            results = self.session.score_service.list_results()
        except NetworkUnavailable as e:
            print(self._msg("load_error", error=e))
            return

        print()
        print(self._msg("board_heading"))
        for i, result in enumerate(rank(results, by=RANK_BY_SCORE), start=1):
            print(self._msg(
                "board_line", rank=i, name=result.student_name, roll=result.roll_number,
                marks=result.obtained_marks, solved=len(result.answers)
            ))
        print()

    def cmd_results(self, score_service: ScoreService, by: str = RANK_BY_TIME) -> int:
        """Admin results table, ranked and summarized on every fetch."""
        try:
            results = score_service.list_results()
        except NetworkUnavailable as e:
            print(self._msg("load_error", error=e))
            return 1

        if not results:
            print(self._msg("results_empty"))
            return 0

        stats = summarize(results)
        print(self._msg(
            "results_heading", students=stats["students"],
            average=stats["average_percentage"], top=stats["top_score"]
        ))
        for i, result in enumerate(rank(results, by=by), start=1):
            print(self._msg(
                "results_line", rank=i, name=result.student_name, roll=result.roll_number,
                marks=result.obtained_marks, total=result.total_marks,
                correct=result.correct_answers, wrong=result.wrong_answers,
                time=format_time(result.time_taken)
            ))
        return 0

    def cmd_time(self):
        elapsed_minutes = f"{self.session.elapsed_seconds() / 60:.1f}"
        print()
        print(self._msg("cmd_time_heading", remaining=self.session.format_remaining_time()))
        print(self._msg("cmd_time_elapsed", elapsed=elapsed_minutes))
        print()

    def cmd_logout(self):
        self.session.logout()
        if self.solutions_dir.exists():
            shutil.rmtree(self.solutions_dir)
        self.owned_files.clear()
        print(self._msg("cmd_logout_done"))


def main():
    """Entry point for the exam client."""
    runner = ExamRunner()
    sys.exit(runner.run())


if __name__ == "__main__":
    main()
