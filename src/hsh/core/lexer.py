"""Single-pass classification of an input line into display spans.

`tokenize` does the structural pass: quotes, variables, operators,
whitespace and words. `classify` refines every word by its position and
by lookups against the command registry and the filesystem. Neither pass
raises on malformed input; unterminated quotes run to end of line.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator

from hsh.core.commands import expand_tilde, is_path_like
from hsh.core.registry import CommandRegistry
from hsh.core.types import Span, SpanKind

DANGEROUS_PATTERNS = (
    "rm -rf /",
    "rm -rf /*",
    "dd if=/dev/zero of=/dev/sda",
    "mkfs /dev/sda",
)
OPERATOR_CHARS = frozenset("&|;<>")
WORD_BREAK_CHARS = OPERATOR_CHARS | frozenset("\"'$")

_DOUBLE_OPERATORS = {
    "&&": SpanKind.AND_AND,
    "||": SpanKind.OR_OR,
}
_SINGLE_OPERATORS = {
    "&": SpanKind.BACKGROUND,
    "|": SpanKind.PIPE,
    ";": SpanKind.SEQUENCE,
    "<": SpanKind.REDIRECT_IN,
    ">": SpanKind.REDIRECT_OUT,
}


def is_dangerous(line: str) -> bool:
    return any(pattern in line for pattern in DANGEROUS_PATTERNS)


def tokenize(line: str) -> Iterator[Span]:
    """Yield structural spans covering `line` left to right."""

    i = 0
    size = len(line)
    while i < size:
        ch = line[i]
        start = i
        if ch.isspace():
            i += 1
            yield Span(start, i, SpanKind.WHITESPACE)
        elif ch in "\"'":
            close = line.find(ch, i + 1)
            i = size if close < 0 else close + 1
            yield Span(start, i, SpanKind.DOUBLE_QUOTED if ch == '"' else SpanKind.SINGLE_QUOTED)
        elif ch == "$":
            i += 1
            while i < size and (line[i].isalnum() or line[i] == "_"):
                i += 1
            yield Span(start, i, SpanKind.VARIABLE)
        elif ch in OPERATOR_CHARS:
            pair = line[i : i + 2]
            if pair in _DOUBLE_OPERATORS:
                i += 2
                yield Span(start, i, _DOUBLE_OPERATORS[pair])
            else:
                i += 1
                yield Span(start, i, _SINGLE_OPERATORS[ch])
        else:
            while i < size and not line[i].isspace() and line[i] not in WORD_BREAK_CHARS:
                i += 1
            yield Span(start, i, SpanKind.WORD)


def classify(
    line: str,
    registry: CommandRegistry,
    *,
    path_exists: Callable[[str], bool] = os.path.exists,
) -> list[Span]:
    """Classify `line` for display, refining words by position and lookups."""

    if is_dangerous(line):
        return [Span(0, len(line), SpanKind.DANGER)]

    spans: list[Span] = []
    at_command = True
    for span in tokenize(line):
        if span.kind is SpanKind.WHITESPACE:
            spans.append(span)
            continue
        if span.kind.is_operator:
            spans.append(span)
            at_command = True
            continue
        if span.kind is SpanKind.WORD:
            span = Span(span.start, span.end, _refine_word(span.text(line), at_command, registry, path_exists))
        spans.append(span)
        at_command = False
    return spans


def _refine_word(
    word: str,
    at_command: bool,
    registry: CommandRegistry,
    path_exists: Callable[[str], bool],
) -> SpanKind:
    if at_command:
        return SpanKind.KNOWN_COMMAND if registry.knows(word, path_exists=path_exists) else SpanKind.UNKNOWN_COMMAND
    if word.startswith("-"):
        return SpanKind.OPTION_FLAG
    if is_path_like(word) and path_exists(expand_tilde(word)):
        return SpanKind.EXISTING_PATH
    return SpanKind.PLAIN_WORD
