"""Shared fixtures for gitignore-tools tests."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import pytest

from gitignore_tools import core
from gitignore_tools.config import Settings
from gitignore_tools.core import ToolContext


@pytest.fixture(autouse=True)
def reset_tool_registry():
    """Save and restore _TOOL_REGISTRY around each test."""
    saved = core._TOOL_REGISTRY.copy()
    yield
    core._TOOL_REGISTRY.clear()
    core._TOOL_REGISTRY.update(saved)


@pytest.fixture(autouse=True)
def reset_logger_level():
    """CLI runs call configure_logging(); put the logger back afterwards."""
    level = core.logger.level
    yield
    core.logger.setLevel(level)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A throwaway home directory so tests never read ~/.config/gitignore."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    path = tmp_path / "ws"
    path.mkdir()
    return path


@pytest.fixture
def make_settings(home: Path):
    """Factory for Settings rooted at the temp home.

    Usage::

        settings = make_settings(auto_backup=True)
    """

    def _make(**overrides: Any) -> Settings:
        overrides.setdefault("use_color", False)
        return Settings(home=home, **overrides)

    return _make


@pytest.fixture
def make_tool_context(workspace: Path, make_settings):
    """Factory to build a ToolContext for unit-testing tools directly.

    Usage::

        ctx = make_tool_context(auto_backup=True)
        tool.execute(ctx, args)
    """

    def _make(dry_run: bool = False, **settings_overrides: Any) -> ToolContext:
        return ToolContext(
            workspace_root=workspace,
            settings=make_settings(**settings_overrides),
            dry_run=dry_run,
        )

    return _make


@pytest.fixture
def write_local_template(make_settings):
    """Factory that drops ``<name>.gitignore`` into the custom templates dir."""

    def _write(name: str, body: str) -> Path:
        templates_dir = make_settings().templates_dir
        templates_dir.mkdir(parents=True, exist_ok=True)
        path = templates_dir / f"{name}.gitignore"
        path.write_text(body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def capture_logs():
    """Capture gitignore_tools logger output into a StringIO buffer.

    The logger has propagate=False and its own StreamHandler that points
    at the original sys.stderr fd, so capsys/capfd/caplog cannot see it.
    This fixture adds a temporary StringIO handler.

    Usage::

        buf = capture_logs
        # ... run code that logs ...
        assert "expected" in buf.getvalue()
    """
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("gitignore_tools")
    logger.addHandler(handler)
    yield buf
    logger.removeHandler(handler)
