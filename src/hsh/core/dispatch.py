"""Ordered decision pipeline from one input line to one exit status."""

from __future__ import annotations

import os
import stat
import subprocess
from collections import deque
from collections.abc import Callable
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text

from hsh.core.aliases import AliasTable
from hsh.core.builtins import Builtins
from hsh.core.commands import expand_tilde, parse_command_words
from hsh.core.session import SessionState
from hsh.errors import ExecutionError, SourceError

SOURCE_PREFIXES = ("source ", ". ")
SKIP_PREFIX = "!"
EXPORT_PREFIX = "export "
PRIVILEGED_EDITORS = frozenset({"vi", "vim", "nano"})
PROTECTED_PREFIXES = ("/etc/", "/usr/bin/")
SCRIPT_EXTENSIONS = (".sh",)
PROGRAM_INTERPRETERS = {".hl": "hl run"}
INDETERMINATE_STATUS = 1
INTERRUPTED_STATUS = 130

Confirm = Callable[[str], bool]
Runner = Callable[[list[str]], int]


def run_interactive(argv: list[str]) -> int:
    """Run `argv` attached to the session's standard streams and wait for it."""

    try:
        completed = subprocess.run(argv, check=False)  # noqa: S603
    except KeyboardInterrupt:
        return INTERRUPTED_STATUS
    return completed.returncode


def console_confirm(console: Console) -> Confirm:
    def confirm(question: str) -> bool:
        answer = Prompt.ask(Text(question), console=console, default="", show_default=False)
        return answer.strip().lower() == "y"

    return confirm


def is_root() -> bool:
    return os.geteuid() == 0


class Dispatcher:
    """Turn a raw line into a builtin, a sourced script, an export or a delegated command."""

    def __init__(
        self,
        aliases: AliasTable,
        session: SessionState,
        console: Console,
        *,
        shell: str = "sh",
        elevation_command: str = "sudo",
        confirm: Confirm | None = None,
        runner: Runner = run_interactive,
        is_privileged: Callable[[], bool] = is_root,
    ) -> None:
        self._aliases = aliases
        self._console = console
        self._builtins = Builtins(session, console)
        self._shell = shell
        self._elevation_command = elevation_command
        self._confirm = confirm or console_confirm(console)
        self._runner = runner
        self._is_privileged = is_privileged

    def dispatch(self, raw_line: str) -> int:
        """Dispatch one line and return its exit status.

        Lines pulled in by `source` are queued ahead of whatever is still
        pending, so a nested include runs to completion before the rest of
        the including file. The status is that of the last line dispatched;
        a source with nothing eligible to run counts as status 0.

        Raises:
            SourceError: a sourced file could not be read.
            ExecutionError: the delegated interpreter could not be started.
            ExitRequested: the `exit` builtin ran.
        """

        pending: deque[str] = deque([raw_line])
        status = 0
        while pending:
            line = self._aliases.expand(pending.popleft())
            included = self._read_source(line)
            if included is not None:
                pending.extendleft(reversed(included))
                if not included:
                    status = 0
                continue
            status = self._dispatch_line(line)
        return status

    def _dispatch_line(self, line: str) -> int:
        if not line:
            return 0
        builtin_status = self._builtins.handle(line)
        if builtin_status is not None:
            return builtin_status
        line = self._escalate(line)
        if self._export(line):
            return 0
        line = self._rewrite_by_extension(line)
        return self._execute(line)

    def _read_source(self, line: str) -> list[str] | None:
        prefix = next((p for p in SOURCE_PREFIXES if line.startswith(p)), None)
        if prefix is None:
            return None
        path = Path(expand_tilde(line[len(prefix) :].strip()))
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise SourceError(path, exc.strerror or str(exc)) from exc
        lines = [entry for entry in text.splitlines() if entry.strip() and not entry.strip().startswith(SKIP_PREFIX)]
        logger.debug("sourcing {} lines from {}", len(lines), path)
        return lines

    def _escalate(self, line: str) -> str:
        words = parse_command_words(line)
        if not words or len(words) < 2:
            return line
        editor, target = words[0], words[1]
        if editor not in PRIVILEGED_EDITORS or not target.startswith(PROTECTED_PREFIXES):
            return line
        if self._is_privileged():
            return line
        question = f"This file requires root privileges. Use {self._elevation_command}? [y/n] "
        if not self._ask(question):
            return line
        logger.debug("escalating edit of {}", target)
        return f"{self._elevation_command} {line}"

    def _ask(self, question: str) -> bool:
        try:
            return self._confirm(question)
        except (EOFError, KeyboardInterrupt):
            # An abandoned question is a refusal.
            self._console.print()
            return False

    def _export(self, line: str) -> bool:
        if not line.startswith(EXPORT_PREFIX):
            return False
        name, sep, value = line[len(EXPORT_PREFIX) :].strip().partition("=")
        name = name.strip()
        if not sep or not name:
            return False
        os.environ[name] = value.strip()
        logger.debug("exported {}", name)
        return True

    def _rewrite_by_extension(self, line: str) -> str:
        words = parse_command_words(line) or line.split()
        if not words:
            return line
        trailing = words[-1]
        if trailing.endswith(SCRIPT_EXTENSIONS):
            self._ensure_executable(Path(expand_tilde(trailing)))
            return line
        for extension, interpreter in PROGRAM_INTERPRETERS.items():
            if trailing.endswith(extension):
                return f"{interpreter} {line}"
        return line

    def _ensure_executable(self, path: Path) -> None:
        try:
            mode = stat.S_IMODE(path.stat().st_mode)
        except OSError:
            return
        if mode & 0o111 or not os.access(path, os.R_OK):
            return
        try:
            path.chmod(mode | 0o111)
        except OSError as exc:
            self._console.print(f"Failed to set executable permissions: {exc}", markup=False, highlight=False)
            return
        logger.debug("made {} executable", path)

    def _execute(self, line: str) -> int:
        argv = [self._shell, "-c", line]
        try:
            status = self._runner(argv)
        except OSError as exc:
            raise ExecutionError(line, exc.strerror or str(exc)) from exc
        logger.debug("{!r} exited with {}", line, status)
        return status if status >= 0 else INDETERMINATE_STATUS
