"""ListTool / ShowTool: browse the template catalog."""

from __future__ import annotations

import json
from typing import Any

import click

from .catalog import TemplateSource, builtin_names, list_local
from .core import IgnoreTool, TemplateNotFound, ToolContext


def collect_templates(
    ctx: ToolContext,
    name_filter: str | None = None,
    show_local: bool = True,
    show_builtin: bool = True,
) -> dict[str, list[str]]:
    """Template names by origin, optionally filtered by substring."""
    found: dict[str, list[str]] = {}
    if show_local:
        found["custom"] = list_local(ctx.settings.templates_dir)
    if show_builtin:
        found["builtin"] = builtin_names()
    if name_filter:
        needle = name_filter.casefold()
        found = {k: [n for n in v if needle in n.casefold()] for k, v in found.items()}
    return found


class ListTool(IgnoreTool):
    name = "list"
    help = "List custom and built-in templates"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.argument("name_filter", required=False)(cmd)
        cmd = click.option("--local", "show_local", is_flag=True, help="Only custom templates")(cmd)
        cmd = click.option("--builtin", "show_builtin", is_flag=True, help="Only built-in templates")(cmd)
        cmd = click.option("--json", "as_json", is_flag=True, help="Output as JSON")(cmd)
        return cmd

    def default_args(self) -> dict[str, Any]:
        return {"name_filter": None, "show_local": False, "show_builtin": False, "as_json": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        show_local = bool(args.get("show_local"))
        show_builtin = bool(args.get("show_builtin"))
        if not show_local and not show_builtin:
            show_local = show_builtin = True

        found = collect_templates(ctx, args.get("name_filter"), show_local, show_builtin)

        if args.get("as_json"):
            print(json.dumps(found, indent=2))
            return

        titles = {"custom": "Custom Templates", "builtin": "Built-in Templates"}
        total = 0
        for kind, names in found.items():
            print(f"{titles[kind]}:")
            for name in names:
                print(f"  • {name}")
            print()
            total += len(names)
        print(f"Total: {total} template(s)")


class ShowTool(IgnoreTool):
    name = "show"
    help = "Print a template's content"

    def setup(self, cmd: click.Command) -> click.Command:
        return click.argument("template")(cmd)

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        name = args["template"]
        template = TemplateSource(ctx.settings.templates_dir).resolve(name)
        if template is None:
            raise TemplateNotFound(f"Template not found: {name}")
        print(f"=== {name} ({template.origin}) ===")
        print(template.body, end="" if template.body.endswith("\n") else "\n")


class CatTool(ShowTool):
    name = "cat"
    help = "Alias for show"
