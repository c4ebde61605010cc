"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import structlog


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True, scope="session")
def _uncached_loggers() -> None:
    """Keep module loggers rebindable so capture_logs sees their events."""
    structlog.configure(cache_logger_on_first_use=False)


@pytest.fixture(autouse=True)
def _isolate_bind_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear BIND_* variables so host settings never leak into tests."""
    for name in (
        "BIND_SOURCE_ROOT",
        "BIND_CODE_LISTS_DIR",
        "BIND_PROJECT_ROOT",
        "BIND_CANONICAL_HOST",
        "BIND_RULES_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
