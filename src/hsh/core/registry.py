"""Snapshot of executable names visible on the search path."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from loguru import logger

from hsh.core.commands import expand_tilde


@dataclass(frozen=True)
class CommandRegistry:
    """Immutable set of command basenames, built once at startup."""

    names: frozenset[str] = frozenset()

    @classmethod
    def from_search_path(cls, search_path: str | None = None) -> CommandRegistry:
        """Collect entry names from every directory on PATH, skipping unreadable ones."""

        if search_path is None:
            search_path = os.environ.get("PATH", "")
        names: set[str] = set()
        for directory in search_path.split(os.pathsep):
            if not directory:
                continue
            try:
                names.update(os.listdir(directory))
            except OSError:
                continue
        logger.debug("command registry built with {} names", len(names))
        return cls(frozenset(names))

    @classmethod
    def of(cls, names: Iterable[str]) -> CommandRegistry:
        return cls(frozenset(names))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def knows(self, word: str, *, path_exists: Callable[[str], bool] = os.path.exists) -> bool:
        """Whether `word` names a registered command or an existing path invocation."""

        if word in self.names:
            return True
        return "/" in word and path_exists(expand_tilde(word))

    def first_with_prefix(self, prefix: str) -> str | None:
        if not prefix:
            return None
        candidates = sorted(name for name in self.names if name.startswith(prefix))
        return candidates[0] if candidates else None
