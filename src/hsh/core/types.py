"""Shared core dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SpanKind(str, Enum):
    """Lexical and refined categories of a classified span."""

    WHITESPACE = "whitespace"
    DOUBLE_QUOTED = "double_quoted"
    SINGLE_QUOTED = "single_quoted"
    VARIABLE = "variable"
    AND_AND = "and_and"
    OR_OR = "or_or"
    PIPE = "pipe"
    REDIRECT_IN = "redirect_in"
    REDIRECT_OUT = "redirect_out"
    SEQUENCE = "sequence"
    BACKGROUND = "background"
    WORD = "word"
    # refinements of WORD
    KNOWN_COMMAND = "known_command"
    UNKNOWN_COMMAND = "unknown_command"
    OPTION_FLAG = "option_flag"
    EXISTING_PATH = "existing_path"
    PLAIN_WORD = "plain_word"
    # whole-line warning
    DANGER = "danger"

    @property
    def is_operator(self) -> bool:
        return self in OPERATOR_KINDS

    @property
    def is_word(self) -> bool:
        return self in WORD_KINDS


OPERATOR_KINDS = frozenset({
    SpanKind.AND_AND,
    SpanKind.OR_OR,
    SpanKind.PIPE,
    SpanKind.REDIRECT_IN,
    SpanKind.REDIRECT_OUT,
    SpanKind.SEQUENCE,
    SpanKind.BACKGROUND,
})

WORD_KINDS = frozenset({
    SpanKind.WORD,
    SpanKind.KNOWN_COMMAND,
    SpanKind.UNKNOWN_COMMAND,
    SpanKind.OPTION_FLAG,
    SpanKind.EXISTING_PATH,
    SpanKind.PLAIN_WORD,
})


@dataclass(frozen=True)
class Span:
    """A classified slice `[start, end)` of one input line."""

    start: int
    end: int
    kind: SpanKind

    def text(self, line: str) -> str:
        return line[self.start : self.end]
