"""Commands handled by the shell itself."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger
from rich.console import Console

from hsh.core.commands import expand_tilde
from hsh.core.session import SessionState
from hsh.errors import ExitRequested

HELP_LINES = (
    "hsh - HackerOS Shell",
    "Built-ins:",
    " exit - exit the shell",
    " history - show command history",
    " hsh-help - show this help",
    " cd [dir] - change directory",
    "Features:",
    " Auto-chmod for .sh files",
    " Auto hl run for .hl files",
    " Git branch in prompt",
    " Aliases from ~/.hshrc",
    " Smart suggestions",
    " Syntax highlighting",
    " Auto-sudo for system files",
    " Configurable prompt in ~/.hshrc [prompt] section",
)
BUILTIN_NAMES = ("cd", "exit", "history", "hsh-help")


def is_cd(line: str) -> bool:
    return line == "cd" or (line.startswith("cd") and line[2:3].isspace())


class Builtins:
    """Intercepts cd, exit, history and hsh-help."""

    def __init__(self, session: SessionState, console: Console) -> None:
        self._session = session
        self._console = console

    def handle(self, line: str) -> int | None:
        """Run `line` if it is a builtin and return its status, else None."""

        trimmed = line.strip()
        if is_cd(trimmed):
            return self.change_directory(trimmed[2:].strip())
        if trimmed == "exit":
            raise ExitRequested(0)
        if trimmed == "history":
            return self.show_history()
        if trimmed == "hsh-help":
            return self.show_help()
        return None

    def change_directory(self, argument: str) -> int:
        if not argument:
            target = os.environ.get("HOME", "/")
        elif argument == "-":
            previous = self._session.take_previous_directory()
            if previous is None:
                self._print("No previous directory")
                return 0
            target = str(previous)
        else:
            target = expand_tilde(argument)

        try:
            current = Path.cwd()
        except OSError:
            current = Path("/")
        try:
            os.chdir(target)
        except OSError as exc:
            logger.debug("cd to {} failed: {}", target, exc)
            self._print(f"cd: no such file or directory: {argument}")
            return 0
        if argument != "-":
            self._session.previous_directory = current
        return 0

    def show_history(self) -> int:
        for index, entry in enumerate(self._session.history.newest_first(), start=1):
            self._print(f"{index}: {entry}")
        return 0

    def show_help(self) -> int:
        for line in HELP_LINES:
            self._print(line)
        return 0

    def _print(self, message: str) -> None:
        self._console.print(message, markup=False, highlight=False, soft_wrap=True)
