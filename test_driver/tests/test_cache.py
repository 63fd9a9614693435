"""Tests for gitignore_tools.cache.TemplateCache and CacheTool."""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from gitignore_tools.cache import CacheTool, TemplateCache
from gitignore_tools.core import CacheError


class TestTemplateCache:

    def test_put_get(self, tmp_path: Path):
        cache = TemplateCache(tmp_path / "cache")
        cache.put("Python", "__pycache__/\n")
        assert cache.get("Python") == "__pycache__/\n"

    def test_miss(self, tmp_path: Path):
        assert TemplateCache(tmp_path / "cache").get("Python") is None

    def test_expired_entry_deleted(self, tmp_path: Path):
        cache = TemplateCache(tmp_path / "cache", duration=60)
        cache.put("Python", "x\n")
        path = cache.path_for("Python")
        old = time.time() - 120
        os.utime(path, (old, old))

        assert cache.get("Python") is None
        assert not path.exists()

    def test_disabled(self, tmp_path: Path):
        cache = TemplateCache(tmp_path / "cache", enabled=False)
        cache.put("Python", "x\n")
        assert not (tmp_path / "cache").exists()
        assert cache.get("Python") is None

    def test_nested_name_is_flattened(self, tmp_path: Path):
        cache = TemplateCache(tmp_path / "cache")
        assert cache.path_for("Global/macOS").parent == tmp_path / "cache"
        cache.put("Global/macOS", ".DS_Store\n")
        assert cache.get("Global/macOS") == ".DS_Store\n"

    def test_unusable_dir_raises_cache_error(self, tmp_path: Path):
        blocker = tmp_path / "cache"
        blocker.write_text("not a directory")
        with pytest.raises(CacheError):
            TemplateCache(blocker).put("Python", "x\n")

    def test_clear(self, tmp_path: Path):
        cache = TemplateCache(tmp_path / "cache")
        cache.put("a", "1\n")
        cache.put("b", "2\n")
        (tmp_path / "cache" / "README").write_text("keep")
        assert cache.clear() == 2
        assert cache.entries() == []
        assert (tmp_path / "cache" / "README").exists()

    def test_clear_missing_dir(self, tmp_path: Path):
        assert TemplateCache(tmp_path / "nothing").clear() == 0


class TestCacheTool:

    def test_clear(self, make_tool_context, capture_logs):
        ctx = make_tool_context()
        cache = TemplateCache(ctx.settings.cache_dir)
        cache.put("a", "1\n")
        CacheTool().execute(ctx, {"dry_run": False})
        assert cache.entries() == []
        assert "removed 1" in capture_logs.getvalue()

    def test_dry_run_keeps_entries(self, make_tool_context, capture_logs):
        ctx = make_tool_context()
        cache = TemplateCache(ctx.settings.cache_dir)
        cache.put("a", "1\n")
        CacheTool().execute(ctx, {"dry_run": True})
        assert len(cache.entries()) == 1
        assert "Would remove 1" in capture_logs.getvalue()


class TestCacheReadErrors:

    def test_unreadable_dir_raises_cache_error(self, tmp_path: Path):
        blocker = tmp_path / "cache"
        blocker.write_text("not a directory")
        with pytest.raises(CacheError):
            TemplateCache(blocker).get("Python")
