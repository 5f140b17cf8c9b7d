"""Read, classify and dispatch loop for hsh."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from loguru import logger

from hsh.bootstrap import ShellRuntime
from hsh.cli.prompt import build_prompt, git_branch
from hsh.cli.render import Renderer
from hsh.core.dispatch import is_root, run_interactive
from hsh.errors import DispatchError, ExitRequested

NO_HISTORY_NOTICE = "No previous history."


def run_shell(runtime: ShellRuntime, renderer: Renderer) -> int:
    """Run the interactive session until exit, EOF or Ctrl-C; returns the process status."""

    _load_history(runtime, renderer)
    status = 0
    try:
        while True:
            try:
                line = renderer.get_user_input(current_prompt(runtime))
            except KeyboardInterrupt:
                renderer.info("CTRL-C")
                break
            except EOFError:
                renderer.info("CTRL-D")
                break
            try:
                submit_line(runtime, renderer, line)
            except ExitRequested as exc:
                status = exc.status
                break
    finally:
        _save_history(runtime, renderer)
    return status


def run_command(runtime: ShellRuntime, renderer: Renderer, line: str) -> int:
    """Dispatch a single line outside the interactive loop."""

    try:
        return _dispatch(runtime, renderer, line)
    except ExitRequested as exc:
        return exc.status


def submit_line(runtime: ShellRuntime, renderer: Renderer, line: str) -> None:
    """Record one submitted line and dispatch it; ExitRequested propagates."""

    runtime.session.history.record(line)
    if not line.strip():
        return
    runtime.session.last_exit_status = _dispatch(runtime, renderer, line)


def run_motd(runtime: ShellRuntime) -> None:
    path = runtime.settings.motd_path
    if not path.exists():
        return
    try:
        run_interactive([runtime.settings.shell, "-c", str(path)])
    except OSError as exc:
        logger.debug("motd {} not run: {}", path, exc)


def current_prompt(runtime: ShellRuntime) -> str:
    try:
        cwd = Path.cwd()
    except OSError:
        cwd = Path("/")
    return build_prompt(
        runtime.theme,
        cwd=cwd,
        now=datetime.now(),
        branch=git_branch(),
        last_status=runtime.session.last_exit_status,
        privileged=is_root(),
    )


def _dispatch(runtime: ShellRuntime, renderer: Renderer, line: str) -> int:
    try:
        return runtime.dispatcher.dispatch(line)
    except DispatchError as exc:
        logger.opt(exception=exc).debug("dispatch of {!r} failed", line)
        renderer.error(str(exc))
        return 1


def _load_history(runtime: ShellRuntime, renderer: Renderer) -> None:
    path = runtime.settings.resolve_history_path()
    try:
        found = runtime.session.history.load_file(path)
    except OSError as exc:
        logger.debug("history {} not loaded: {}", path, exc)
        found = False
    if not found:
        renderer.info(NO_HISTORY_NOTICE)


def _save_history(runtime: ShellRuntime, renderer: Renderer) -> None:
    path = runtime.settings.resolve_history_path()
    try:
        runtime.session.history.save_file(path)
    except OSError as exc:
        renderer.error(f"failed to save history to {path}: {exc}")
