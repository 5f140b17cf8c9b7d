"""Configuration management for hsh."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hsh.errors import ConfigurationError

DEFAULT_MOTD_PATH = Path("/usr/share/HackerOS/Archived/MOTD/hackeros-motd")


class HshSettings(BaseSettings):
    """Process settings, overridable through HSH_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="HSH_", case_sensitive=False, extra="ignore")

    rc_path: Path = Field(default=Path("~/.hshrc"), description="YAML file with aliases and prompt sections")
    history_path: Path = Field(default=Path("~/.hsh-history"), description="Line history file")
    shell: str = Field(default="sh", description="Interpreter that runs delegated commands")
    elevation_command: str = Field(default="sudo", description="Command prefixed for privileged edits")
    motd_path: Path = Field(default=DEFAULT_MOTD_PATH, description="Script run once before the first prompt")
    log_level: str = Field(default="WARNING", description="Log level")

    @field_validator("shell", "elevation_command")
    @classmethod
    def _require_command(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    def resolve_rc_path(self) -> Path:
        return self.rc_path.expanduser()

    def resolve_history_path(self) -> Path:
        return self.history_path.expanduser()


class PromptTheme(BaseModel):
    """Colors and symbols used to build the prompt."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    time_color: str = "\x1b[1;36m"
    dir_symbol: str = "\U0001f4c1"
    dir_color: str = "\x1b[1;34m"
    git_symbol: str = ""
    git_color: str = "\x1b[1;33m"
    prompt_color: str = "\x1b[1;32m"
    error_symbol: str = "✘"
    root_symbol: str = "⚡"


@dataclass(frozen=True)
class RcConfig:
    """Sections read from the rc file."""

    aliases: dict[str, str] = field(default_factory=dict)
    prompt: dict[str, str] = field(default_factory=dict)

    def theme(self) -> PromptTheme:
        return PromptTheme.model_validate(self.prompt)


def load_settings() -> HshSettings:
    """Load process settings from the environment."""

    try:
        return HshSettings()
    except ValidationError as exc:
        raise ConfigurationError(f"invalid settings: {exc}") from exc


def load_rc(path: Path) -> RcConfig:
    """Read the rc file; any problem yields empty sections."""

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.debug("rc file {} not loaded: {}", path, exc)
        return RcConfig()
    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        logger.debug("rc file {} is not valid YAML: {}", path, exc)
        return RcConfig()
    if not isinstance(document, Mapping):
        return RcConfig()
    return RcConfig(
        aliases=_string_section(document.get("aliases")),
        prompt=_string_section(document.get("prompt")),
    )


def _string_section(section: Any) -> dict[str, str]:
    if not isinstance(section, Mapping):
        return {}
    values: dict[str, str] = {}
    for key, value in section.items():
        if value is None or isinstance(value, (Mapping, list)):
            continue
        values[str(key)] = str(value)
    return values
