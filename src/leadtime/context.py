"""Settings chosen by the CLI callback and read by commands and config discovery."""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path

# Path given with --config; None means search the usual locations
_config_path: ContextVar[Path | None] = ContextVar("leadtime_config_path", default=None)


def get_config_path() -> Path | None:
    """Config path passed with --config, if any."""
    return _config_path.get()


def set_config_path(path: Path | None) -> None:
    """Record the config path for the current invocation."""
    _config_path.set(path)
