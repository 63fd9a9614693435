"""Tests for gitignore_tools.config (config file parsing, Settings, ConfigTool)."""

from __future__ import annotations

import json
import sys
from pathlib import Path

from gitignore_tools.config import (
    CACHE_DURATION,
    ConfigTool,
    Settings,
    load_settings,
    parse_config_text,
    save_settings,
)


def _write_config(home: Path, text: str) -> Path:
    settings = Settings(home=home)
    settings.config_dir.mkdir(parents=True, exist_ok=True)
    settings.config_file.write_text(text, encoding="utf-8")
    return settings.config_file


class TestParseConfigText:

    def test_values(self):
        values = parse_config_text(
            "# comment\n"
            "\n"
            "auto_backup = yes\n"
            "cache_duration=3600\n"
            "default_templates = python, node ,\n"
            "remote_url=https://mirror.test/\n"
        )
        assert values == {
            "auto_backup": True,
            "cache_duration": 3600,
            "default_templates": ("python", "node"),
            "remote_url": "https://mirror.test/",
        }

    def test_unknown_key_ignored(self):
        assert parse_config_text("colour=true\n") == {}

    def test_bad_values_warn(self, capture_logs):
        values = parse_config_text("auto_backup=maybe\ncache_duration=-5\nno equals sign\n")
        assert values == {}
        out = capture_logs.getvalue()
        assert "line 1" in out
        assert "line 2" in out
        assert "line 3" in out


class TestLoadSettings:

    def test_defaults(self, home: Path):
        settings = load_settings(home)
        assert settings.auto_backup is False
        assert settings.cache_enabled is True
        assert settings.cache_duration == CACHE_DURATION
        assert settings.default_templates == ()
        assert settings.config_dir == home / ".config" / "gitignore"
        assert settings.global_ignore_path == home / ".gitignore_global"

    def test_file_then_overrides(self, home: Path):
        _write_config(home, "verbose=true\nquiet=false\ncache_enabled=off\n")
        settings = load_settings(home, quiet=True, verbose=None)
        assert settings.verbose is True
        assert settings.quiet is True
        assert settings.cache_enabled is False

    def test_save_round_trip(self, home: Path):
        original = Settings(home=home, auto_backup=True, default_templates=("python", "vscode"))
        path = save_settings(original)
        assert path == original.config_file
        loaded = load_settings(home, use_color=original.use_color)
        assert loaded == original


class TestConfigTool:

    def test_json(self, make_tool_context, capsys):
        ctx = make_tool_context(cache_duration=10)
        ConfigTool().execute(ctx, {"as_json": True, "write_file": False})
        data = json.loads(capsys.readouterr().out)
        assert data["cache_duration"] == 10
        assert data["templates_dir"] == str(ctx.settings.templates_dir)

    def test_plain(self, make_tool_context, capture_logs):
        ctx = make_tool_context(default_templates=("a", "b"))
        ConfigTool().execute(ctx, {"as_json": False, "write_file": False})
        assert "default_templates: a,b" in capture_logs.getvalue()

    def test_init_writes_once(self, make_tool_context, capture_logs):
        ctx = make_tool_context(auto_backup=True)
        ConfigTool().execute(ctx, {"as_json": False, "write_file": True})
        assert "auto_backup=true" in ctx.settings.config_file.read_text()

        ConfigTool().execute(ctx, {"as_json": False, "write_file": True})
        assert "already exists" in capture_logs.getvalue()


class TestColorDefault:
    """Color follows the log stream (stderr), not stdout."""

    def test_stderr_tty(self, home: Path, monkeypatch):
        monkeypatch.setattr(sys.stdout, "isatty", lambda: False)
        monkeypatch.setattr(sys.stderr, "isatty", lambda: True)
        assert load_settings(home).use_color is True

    def test_stderr_redirected(self, home: Path, monkeypatch):
        monkeypatch.setattr(sys.stdout, "isatty", lambda: True)
        monkeypatch.setattr(sys.stderr, "isatty", lambda: False)
        assert load_settings(home).use_color is False
