"""Tests for gitignore_tools.listing (list / show)."""

from __future__ import annotations

import json

import pytest

from gitignore_tools.core import TemplateNotFound
from gitignore_tools.listing import ListTool, ShowTool, collect_templates


class TestCollectTemplates:

    def test_both_kinds(self, make_tool_context, write_local_template):
        write_local_template("work", "x\n")
        found = collect_templates(make_tool_context())
        assert found["custom"] == ["work"]
        assert "python" in found["builtin"]

    def test_filter(self, make_tool_context):
        found = collect_templates(make_tool_context(), name_filter="PY", show_local=False)
        assert found == {"builtin": ["python"]}


class TestListTool:

    def test_json(self, make_tool_context, capsys):
        ListTool().execute(
            make_tool_context(),
            {"name_filter": None, "show_local": True, "show_builtin": False, "as_json": True},
        )
        assert json.loads(capsys.readouterr().out) == {"custom": []}

    def test_text(self, make_tool_context, capsys):
        ListTool().execute(make_tool_context(), ListTool().default_args())
        out = capsys.readouterr().out
        assert "Built-in Templates:" in out
        assert "  • rust" in out


class TestShowTool:

    def test_builtin(self, make_tool_context, capsys):
        ShowTool().execute(make_tool_context(), {"template": "Go"})
        out = capsys.readouterr().out
        assert out.startswith("=== Go (builtin) ===\n")

    def test_local(self, make_tool_context, write_local_template, capsys):
        write_local_template("go", "mine")
        ShowTool().execute(make_tool_context(), {"template": "go"})
        assert capsys.readouterr().out == "=== go (local) ===\nmine\n"

    def test_not_found(self, make_tool_context):
        with pytest.raises(TemplateNotFound):
            ShowTool().execute(make_tool_context(), {"template": "doesnotexist123"})
