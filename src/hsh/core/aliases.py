"""User-configured leading-word substitutions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from loguru import logger

from hsh.core.commands import parse_command_words


class AliasTable(Mapping[str, str]):
    """Read-only alias name to replacement text mapping."""

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self._aliases: Mapping[str, str] = MappingProxyType(dict(aliases or {}))

    def __getitem__(self, name: str) -> str:
        return self._aliases[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def expand(self, line: str) -> str:
        """Substitute the leading word once; the replacement is never re-expanded.

        The remaining words are passed through as typed, joined by single
        spaces, so operators, variables, globs and quotes still reach the
        interpreter. Returns the trimmed line unchanged when the leading word
        is not an alias or when the line cannot be split (unbalanced quotes).
        """

        trimmed = line.strip()
        words = trimmed.split()
        if not words or words[0] not in self._aliases or parse_command_words(trimmed) is None:
            return trimmed
        expanded = " ".join([self._aliases[words[0]], *words[1:]])
        logger.debug("alias {!r} expanded to {!r}", words[0], expanded)
        return expanded
