"""Terminal implementation of the Prompter port."""

import sys
from typing import Sequence, TextIO

from ..application.domain import Prompter
from ..application.exceptions import InteractiveUnavailableError

_YES_ANSWERS = {"y", "Y", "yes", "YES"}


class TerminalPrompter(Prompter):
    """
    Asks questions on the controlling terminal.

    Answers are read from ``/dev/tty`` rather than stdin so the installer
    still works when piped into a shell.
    """

    def __init__(self, tty_path: str = "/dev/tty", output: TextIO = None):
        self.tty_path = tty_path
        self.output = output or sys.stderr

    def is_interactive(self) -> bool:
        try:
            with open(self.tty_path):
                return True
        except OSError:
            return False

    def _read_line(self, prompt: str) -> str:
        try:
            with open(self.tty_path) as tty:
                self.output.write(prompt)
                self.output.flush()
                line = tty.readline()
        except OSError as e:
            raise InteractiveUnavailableError(
                f"Cannot read from {self.tty_path}. Re-run non-interactively "
                f"with --yes and --preset or --font."
            ) from e

        if not line:
            raise InteractiveUnavailableError(
                "Terminal input closed. Re-run non-interactively with --yes "
                "and --preset or --font."
            )
        return line.rstrip("\r\n")

    def ask(
        self, question: str, choices: Sequence[str], default_index: int
    ) -> str:
        lines = [question]
        for i, label in enumerate(choices):
            marker = " (default)" if i == default_index else ""
            lines.append(f"  {i + 1:2d}) {label}{marker}")
        lines.append(
            f"Enter a number (1-{len(choices)}), or press Enter for default."
        )
        self.output.write("\n".join(lines) + "\n")
        return self._read_line("Select number: ")

    def confirm(self, question: str) -> bool:
        return self._read_line(f"{question} [y/N]: ").strip() in _YES_ANSWERS
