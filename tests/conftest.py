from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sdetcoach.config import SessionConfig  # noqa: E402

SAMPLE_TOPICS: list[dict[str, Any]] = [
    {"id": "java-1.1-ac1", "category": "java", "description": "Variables and types"},
    {"id": "git-1.1-ac1", "category": "git", "description": "Branching basics"},
    {
        "id": "java-1.2-ac1",
        "category": "java",
        "description": "Collections",
        "steps": ["Create a List of strings", "Sort it"],
    },
    {"id": "playwright-2.1-ac1", "category": "playwright", "description": "First browser test"},
]


@pytest.fixture
def write_catalog(tmp_path: Path) -> Callable[..., Path]:
    """Write a JSON catalog into the test home and return its path."""

    def _write(topics: list[dict[str, Any]] | None = None, name: str = "requirements.json") -> Path:
        path = tmp_path / name
        payload = {"features": SAMPLE_TOPICS if topics is None else topics}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def session_config(tmp_path: Path, write_catalog: Callable[..., Path]) -> SessionConfig:
    """Config for a fresh home holding the sample catalog and nothing else."""
    write_catalog()
    return SessionConfig(home=tmp_path)
