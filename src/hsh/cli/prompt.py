"""Two-line prompt with time, directory, git branch and status markers."""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path

from hsh.config import PromptTheme

RESET = "\x1b[0m"
ERROR_COLOR = "\x1b[31m"


def git_branch() -> str | None:
    """Branch checked out in the current directory, None outside a work tree."""

    try:
        completed = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],  # noqa: S607
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout.strip() or None


def build_prompt(
    theme: PromptTheme,
    *,
    cwd: Path,
    now: datetime,
    branch: str | None,
    last_status: int,
    privileged: bool,
) -> str:
    git_info = f"{theme.git_color}({theme.git_symbol} {branch}){RESET}" if branch else ""
    first = (
        f"╭─ {theme.time_color}[{now:%H:%M}]{RESET} "
        f"{theme.dir_color}{theme.dir_symbol} {cwd}{RESET}{git_info}"
    )
    error = f"{ERROR_COLOR}{theme.error_symbol}{RESET} " if last_status != 0 else ""
    root = f"{theme.root_symbol} " if privileged else ""
    second = f"{theme.prompt_color}╰─ {error}{root}hsh❯{RESET} "
    return f"{first}\n{second}"
