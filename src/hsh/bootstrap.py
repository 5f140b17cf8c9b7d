"""Runtime bootstrap helpers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from rich.console import Console

from hsh.config import HshSettings, PromptTheme, load_rc
from hsh.core.aliases import AliasTable
from hsh.core.dispatch import Confirm, Dispatcher, Runner, is_root, run_interactive
from hsh.core.registry import CommandRegistry
from hsh.core.session import SessionState


@dataclass(frozen=True)
class ShellRuntime:
    """Everything one shell session needs, built once at startup."""

    settings: HshSettings
    theme: PromptTheme
    registry: CommandRegistry
    aliases: AliasTable
    session: SessionState
    dispatcher: Dispatcher


def build_runtime(
    settings: HshSettings,
    console: Console,
    *,
    registry: CommandRegistry | None = None,
    confirm: Confirm | None = None,
    runner: Runner = run_interactive,
    is_privileged: Callable[[], bool] = is_root,
) -> ShellRuntime:
    """Load the rc file, snapshot the search path and wire the dispatcher."""

    rc = load_rc(settings.resolve_rc_path())
    aliases = AliasTable(rc.aliases)
    session = SessionState()
    dispatcher = Dispatcher(
        aliases,
        session,
        console,
        shell=settings.shell,
        elevation_command=settings.elevation_command,
        confirm=confirm,
        runner=runner,
        is_privileged=is_privileged,
    )
    return ShellRuntime(
        settings=settings,
        theme=rc.theme(),
        registry=registry if registry is not None else CommandRegistry.from_search_path(),
        aliases=aliases,
        session=session,
        dispatcher=dispatcher,
    )
