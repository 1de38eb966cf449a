"""Configuration management for cmdwatch."""

import logging
import sys

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.console import Console

from cmdwatch.utils.exit_codes import VALIDATION_ERROR

console = Console(stderr=True)

DEFAULT_INTERVAL = 5

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class WatchSettings(BaseSettings):
    """cmdwatch settings from environment variables."""

    interval: int = Field(default=DEFAULT_INTERVAL, ge=1)
    shell: str | None = None

    # Diagnostics
    log_file: str | None = None
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(
        env_prefix="CMDWATCH_",
        env_file=".envrc",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log level names in any case."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


class WatchConfig(BaseModel):
    """What to run and how often. Never mutated once built."""

    shell_command: str
    interval: int = Field(default=DEFAULT_INTERVAL, ge=1)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_args(cls, command: str, args=(), interval: int = DEFAULT_INTERVAL) -> "WatchConfig":
        """Join the command and its arguments into one shell line.

        Arguments are joined with single spaces and are not escaped; any
        quoting must already be part of the strings.
        """
        return cls(shell_command=" ".join([command, *args]), interval=interval)


def shell_invocation(shell_command: str, shell: str | None = None) -> list[str]:
    """Return the argv that runs shell_command through the platform shell."""
    if sys.platform == "win32":
        program, command_arg = "powershell", "-Command"
    else:
        program, command_arg = "sh", "-c"
    return [shell or program, command_arg, shell_command]


def load_settings() -> WatchSettings:
    """Load and validate settings, exiting with a message if they are invalid."""
    try:
        return WatchSettings()
    except Exception as e:
        console.print(f"Configuration error: {e}", markup=False, style="red")
        _print_config_help()
        sys.exit(VALIDATION_ERROR)


def configure_logging(log_file: str | None, level: str = "WARNING") -> None:
    """Send log records to log_file; stay silent when no file is given.

    The watch display owns the terminal, so nothing is ever logged to it.
    """
    root = logging.getLogger("cmdwatch")
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if not log_file:
        root.addHandler(logging.NullHandler())
        return

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(level.upper())


def _print_config_help() -> None:
    """Print configuration help text."""
    console.print("\n[yellow]Supported environment variables:[/yellow]")
    console.print("  - CMDWATCH_INTERVAL (seconds, at least 1, default 5)")
    console.print("  - CMDWATCH_SHELL (optional, overrides sh / powershell)")
    console.print("  - CMDWATCH_LOG_FILE (optional, enables diagnostic logging)")
    console.print(f"  - CMDWATCH_LOG_LEVEL (one of {', '.join(LOG_LEVELS)})")
