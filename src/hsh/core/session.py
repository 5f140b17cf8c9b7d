"""Mutable state carried across loop iterations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger
from prompt_toolkit.history import History


class ShellHistory(History):
    """Append-only line history shared with the line editor.

    The editor reads entries through the prompt_toolkit `History` API but
    never writes them; the shell loop records each submitted line itself
    with `record`, so blank lines are never stored and every other line is
    stored exactly once, verbatim.
    """

    def __init__(self, entries: Iterable[str] = ()) -> None:
        super().__init__()
        self._entries: list[str] = list(entries)

    @property
    def entries(self) -> tuple[str, ...]:
        """Recorded lines, oldest first."""
        return tuple(self._entries)

    def load_history_strings(self) -> Iterable[str]:
        yield from reversed(self._entries)

    def store_string(self, string: str) -> None:
        self._entries.append(string)

    def append_string(self, string: str) -> None:
        # Accepted editor buffers are recorded by the shell loop.
        return None

    def record(self, line: str) -> bool:
        if not line.strip():
            return False
        super().append_string(line)
        return True

    def newest_first(self) -> list[str]:
        return list(reversed(self._entries))

    def latest_with_prefix(self, prefix: str) -> str | None:
        for entry in reversed(self._entries):
            if entry.startswith(prefix) and entry != prefix:
                return entry
        return None

    def load_file(self, path: Path) -> bool:
        """Append entries from `path`; False when the file does not exist."""

        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return False
        for line in text.splitlines():
            if line.strip():
                self.store_string(line)
        logger.debug("loaded {} history entries from {}", len(self._entries), path)
        return True

    def save_file(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        body = "".join(f"{entry}\n" for entry in self._entries)
        path.write_text(body, encoding="utf-8")


@dataclass
class SessionState:
    """Previous directory, last exit status and history of one session."""

    previous_directory: Path | None = None
    last_exit_status: int = 0
    history: ShellHistory = field(default_factory=ShellHistory)

    def take_previous_directory(self) -> Path | None:
        previous, self.previous_directory = self.previous_directory, None
        return previous
