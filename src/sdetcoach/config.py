"""Session configuration management."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CATALOG = "requirements.json"
DEFAULT_LEDGER = "progress.md"
DEFAULT_LESSONS = "sdet-learning-content"
DEFAULT_WORKSPACE = "my-portfolio"
DEFAULT_LOG_LEVEL = "WARNING"

_ENV_KEYS = {
    "home": "SDETCOACH_HOME",
    "catalog_path": "SDETCOACH_CATALOG",
    "ledger_path": "SDETCOACH_LEDGER",
    "lessons_dir": "SDETCOACH_LESSONS",
    "workspace_root": "SDETCOACH_WORKSPACE",
}


@dataclass
class SessionConfig:
    """Where the catalog, ledger, lessons and workspace live."""

    home: Path = Path(".")
    catalog_path: Path | None = None
    ledger_path: Path | None = None
    lessons_dir: Path | None = None
    workspace_root: Path | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        """Derive unset paths from the home directory."""
        self.home = Path(self.home)
        if self.catalog_path is None:
            self.catalog_path = self.home / DEFAULT_CATALOG
        if self.ledger_path is None:
            self.ledger_path = self.home / DEFAULT_LEDGER
        if self.lessons_dir is None:
            self.lessons_dir = self.home / DEFAULT_LESSONS
        if self.workspace_root is None:
            self.workspace_root = self.home / DEFAULT_WORKSPACE
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Path | str | None) -> SessionConfig:
        """Load configuration from ``SDETCOACH_*`` variables; non-None overrides win."""
        env = os.environ if environ is None else environ
        values: dict[str, Path | str] = {}
        for field_name, variable in _ENV_KEYS.items():
            raw = env.get(variable, "").strip()
            if raw:
                values[field_name] = Path(raw)
        level = env.get("SDETCOACH_LOG_LEVEL", "").strip()
        if level:
            values["log_level"] = level

        for key, value in overrides.items():
            if value is None:
                continue
            values[key] = Path(value) if key in _ENV_KEYS else value
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        """Convert configuration to a display dictionary."""
        return {
            "home": str(self.home),
            "catalog": str(self.catalog_path),
            "ledger": str(self.ledger_path),
            "lessons": str(self.lessons_dir),
            "workspace": str(self.workspace_root),
            "log_level": self.log_level,
        }
