"""CLI renderer for hsh."""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console

from hsh.cli.highlight import ShellLexer, build_style
from hsh.cli.suggest import ShellSuggest
from hsh.core.registry import CommandRegistry
from hsh.core.session import ShellHistory


class Renderer:
    """Terminal output through Rich, line input through prompt_toolkit."""

    def __init__(self, registry: CommandRegistry, history: ShellHistory, console: Console | None = None) -> None:
        self.console: Console = console or Console()
        self._registry = registry
        self._history = history
        self._prompt_session: PromptSession[str] | None = None

    def info(self, message: str) -> None:
        """Render a plain message."""
        self.console.print(message, markup=False, highlight=False, soft_wrap=True)

    def error(self, message: str) -> None:
        """Render an error message."""
        self.console.print("[bold red]hsh:[/bold red] ", end="")
        self.info(message)

    def get_user_input(self, prompt: str) -> str:
        """Prompt user for one line; raises KeyboardInterrupt or EOFError to end the session."""
        with patch_stdout(raw=True):
            return self._session().prompt(ANSI(prompt))

    def _session(self) -> PromptSession[str]:
        if self._prompt_session is None:
            self._prompt_session = PromptSession(
                history=self._history,
                lexer=ShellLexer(self._registry),
                auto_suggest=ShellSuggest(self._history, self._registry),
                style=build_style(),
            )
        return self._prompt_session
