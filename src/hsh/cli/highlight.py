"""prompt_toolkit rendering of classified spans."""

from __future__ import annotations

from collections.abc import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.styles import Style

from hsh.core.lexer import classify
from hsh.core.registry import CommandRegistry
from hsh.core.types import Span, SpanKind

SPAN_STYLES: dict[SpanKind, str] = {
    SpanKind.KNOWN_COMMAND: "ansigreen",
    SpanKind.UNKNOWN_COMMAND: "ansired",
    SpanKind.DOUBLE_QUOTED: "ansimagenta",
    SpanKind.SINGLE_QUOTED: "ansimagenta",
    SpanKind.VARIABLE: "ansibrightblue",
    SpanKind.AND_AND: "ansibrightmagenta",
    SpanKind.OR_OR: "ansibrightmagenta",
    SpanKind.SEQUENCE: "ansiyellow",
    SpanKind.PIPE: "bold ansiwhite",
    SpanKind.REDIRECT_IN: "bold ansiwhite",
    SpanKind.REDIRECT_OUT: "bold ansiwhite",
    SpanKind.OPTION_FLAG: "ansiyellow",
    SpanKind.EXISTING_PATH: "ansicyan",
    SpanKind.DANGER: "blink bg:ansired",
}
SUGGESTION_STYLE = "ansibrightblack"


def style_class(kind: SpanKind) -> str:
    return kind.value.replace("_", "-")


def build_style() -> Style:
    rules = {style_class(kind): value for kind, value in SPAN_STYLES.items()}
    rules["auto-suggestion"] = SUGGESTION_STYLE
    return Style.from_dict(rules)


def to_fragments(line: str, spans: list[Span]) -> StyleAndTextTuples:
    return [(f"class:{style_class(span.kind)}", span.text(line)) for span in spans]


class ShellLexer(Lexer):
    """Colors the edit buffer with the span classifier, one line at a time."""

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry = registry

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        def get_line(lineno: int) -> StyleAndTextTuples:
            try:
                line = lines[lineno]
            except IndexError:
                return []
            return to_fragments(line, classify(line, self._registry))

        return get_line
