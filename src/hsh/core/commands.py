"""Command parsing helpers."""

from __future__ import annotations

import os
import shlex

PATH_WORD_CHARS = frozenset("/.-_")
PATH_PREFIXES = ("/", "./", "../", "~")


def parse_command_words(text: str) -> list[str] | None:
    """Split command text into words using shell rules, None when quoting is unbalanced."""

    try:
        return shlex.split(text)
    except ValueError:
        return None


def expand_tilde(text: str) -> str:
    return os.path.expanduser(text)


def is_path_like(word: str) -> bool:
    if word.startswith(PATH_PREFIXES):
        return True
    return all(ch.isalnum() or ch in PATH_WORD_CHARS for ch in word)
