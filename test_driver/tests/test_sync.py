"""Tests for gitignore_tools.sync.sync_gitignore() (remote patched)."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from gitignore_tools.cache import TemplateCache
from gitignore_tools.core import InvalidArgument, NetworkError
from gitignore_tools.sync import SYNC_HEADER_APPEND, SYNC_HEADER_NEW, SyncTool, sync_gitignore

UPSTREAM = {"Elixir": "/_build\n/deps\n", "Python": "upstream-python/\n"}


def _fake_fetch(name: str) -> str:
    if name not in UPSTREAM:
        raise NetworkError(f"Template '{name}' not found on GitHub (HTTP 404)")
    return UPSTREAM[name]


@pytest.fixture
def mock_remote():
    with patch("gitignore_tools.sync.RemoteSource") as cls:
        cls.return_value.fetch.side_effect = _fake_fetch
        yield cls.return_value


class TestSync:

    def test_new_file(self, make_tool_context, mock_remote):
        ctx = make_tool_context()
        result = sync_gitignore(ctx, ["Elixir"])

        content = ctx.gitignore_path.read_text()
        assert content.startswith(SYNC_HEADER_NEW)
        assert "/_build\n/deps\n" in content
        assert result.written_count == 1

    def test_fetch_cached(self, make_tool_context, mock_remote):
        ctx = make_tool_context()
        sync_gitignore(ctx, ["Elixir"])
        cache = TemplateCache(ctx.settings.cache_dir)
        assert cache.get("Elixir") == UPSTREAM["Elixir"]

        sync_gitignore(ctx, ["Elixir"])
        assert mock_remote.fetch.call_count == 1

    def test_existing_file_smart(self, make_tool_context, mock_remote):
        ctx = make_tool_context()
        ctx.gitignore_path.write_text("/deps\n")
        sync_gitignore(ctx, ["Elixir"])

        content = ctx.gitignore_path.read_text()
        assert SYNC_HEADER_APPEND in content
        assert content.splitlines().count("/deps") == 1
        assert "/_build" in content.splitlines()

    def test_local_and_builtin_tiers_first(self, make_tool_context, mock_remote):
        ctx = make_tool_context()
        sync_gitignore(ctx, ["python"])
        mock_remote.fetch.assert_not_called()
        assert "__pycache__/" in ctx.gitignore_path.read_text().splitlines()

    def test_remote_only(self, make_tool_context, mock_remote):
        ctx = make_tool_context()
        sync_gitignore(ctx, ["Python"], remote_only=True)
        assert "upstream-python/" in ctx.gitignore_path.read_text().splitlines()

    def test_partial_failure_succeeds(self, make_tool_context, mock_remote):
        ctx = make_tool_context()
        result = sync_gitignore(ctx, ["Elixir", "Nope"])
        assert result.written_count == 1
        assert result.skipped == ["Nope"]

    def test_total_failure_raises(self, make_tool_context, mock_remote):
        ctx = make_tool_context()
        with pytest.raises(NetworkError):
            sync_gitignore(ctx, ["Nope"])

    def test_requires_names(self, make_tool_context):
        with pytest.raises(InvalidArgument):
            sync_gitignore(make_tool_context(), ["#only-a-comment"])

    def test_dry_run(self, make_tool_context, mock_remote):
        ctx = make_tool_context(dry_run=True)
        SyncTool().execute(ctx, {"names": ["Elixir"], "remote_only": False, "dry_run": False})
        assert not ctx.gitignore_path.exists()
        mock_remote.fetch.assert_not_called()
