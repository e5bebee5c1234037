"""
Test doubles shared across test modules.
"""

import subprocess


class ScriptedConsole:
    """Console double answering confirmations from a script.

    ``answers`` maps a question fragment to the answer; unscripted
    questions are declined.
    """

    def __init__(self, answers: dict[str, bool] | None = None, choice: str = "2"):
        self.answers = answers or {}
        self.choice = choice
        self.questions: list[str] = []
        self.banners: list[str] = []
        self.notices: list[str] = []
        self.warnings: list[str] = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        for fragment, answer in self.answers.items():
            if fragment in question:
                return answer
        return False

    def choose(self, title: str, options: list[str]) -> str:
        return self.choice

    def banner(self, message: str) -> None:
        self.banners.append(message)

    def notice(self, message: str) -> None:
        self.notices.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)


class CommandRecorder:
    """Stands in for ``subprocess.run`` and records every argv."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.failing: dict[str, int] = {}

    def fail_when(self, program: str, returncode: int = 1) -> None:
        self.failing[program] = returncode

    def __call__(self, argv, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        rc = 0
        for program, code in self.failing.items():
            if program in argv:
                rc = code
        # Streamed output: nothing captured
        return subprocess.CompletedProcess(argv, rc)
