"""Inline suggestions from history, known commands and the filesystem."""

from __future__ import annotations

import os

from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document

from hsh.core.commands import expand_tilde
from hsh.core.registry import CommandRegistry
from hsh.core.session import ShellHistory


class ShellSuggest(AutoSuggest):
    def __init__(self, history: ShellHistory, registry: CommandRegistry) -> None:
        self._history = history
        self._registry = registry

    def get_suggestion(self, buffer: Buffer, document: Document) -> Suggestion | None:
        if not document.is_cursor_at_the_end:
            return None
        suffix = suggest_suffix(document.text, self._history, self._registry)
        return Suggestion(suffix) if suffix else None


def suggest_suffix(text: str, history: ShellHistory, registry: CommandRegistry) -> str | None:
    """Text that would complete `text`, or None."""

    if not text:
        return None
    entry = history.latest_with_prefix(text)
    if entry is not None:
        return entry[len(text) :]

    trimmed = text.strip()
    if not trimmed or text[-1].isspace():
        return None
    head, _, fragment = trimmed.rpartition(" ")
    if not head:
        command = registry.first_with_prefix(fragment)
        return command[len(fragment) :] if command else None
    return _path_suffix(fragment)


def _path_suffix(fragment: str) -> str | None:
    expanded = expand_tilde(fragment)
    if os.path.isdir(expanded) and fragment.endswith("/"):
        parent, prefix = expanded, ""
    else:
        parent, prefix = os.path.split(expanded)
    try:
        names = sorted(os.listdir(parent or "."))
    except OSError:
        return None
    for name in names:
        if name.startswith(prefix) and name != prefix:
            return name[len(prefix) :]
    return None
