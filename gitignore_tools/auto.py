"""AutoTool / InteractiveTool: pick templates for the user, then run init."""

from __future__ import annotations

from typing import Any

import click

from .catalog import builtin_names, list_local
from .core import IgnoreTool, ToolContext, invoke_tool, logger
from .detect import detect_project_types
from .init import write_placeholder


class AutoTool(IgnoreTool):
    name = "auto"
    help = "Detect the project type from marker files and create .gitignore"

    def setup(self, cmd: click.Command) -> click.Command:
        return click.option("--dry-run", is_flag=True, help="Only report what was detected")(cmd)

    def default_args(self) -> dict[str, Any]:
        return {"dry_run": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        logger.info("Auto-detecting project type...")
        detected = detect_project_types(ctx.workspace_root)
        dry_run = args.get("dry_run") or ctx.dry_run

        if not detected:
            logger.warning("No project files detected")
            if dry_run:
                logger.info("[dry run] Would create an empty .gitignore")
            elif not ctx.gitignore_path.exists():
                write_placeholder(ctx.gitignore_path)
            return

        logger.info(f"Detected: {', '.join(detected)}")
        if dry_run:
            logger.info("[dry run] Would create .gitignore with detected templates")
            return
        invoke_tool("init", ctx, {"names": detected})


def parse_selection(text: str, choices: list[str]) -> list[str]:
    """Turn ``"1 3 5"`` into choice names; ``0`` ends the list, junk is skipped."""
    selected: list[str] = []
    for token in text.split():
        try:
            idx = int(token)
        except ValueError:
            logger.warning(f"Ignoring '{token}': not a number")
            continue
        if idx == 0:
            break
        if 1 <= idx <= len(choices):
            if choices[idx - 1] not in selected:
                selected.append(choices[idx - 1])
        else:
            logger.warning(f"Ignoring {idx}: out of range")
    return selected


class InteractiveTool(IgnoreTool):
    name = "interactive"
    help = "Choose templates from a numbered menu"

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        choices = builtin_names()
        choices += [n for n in list_local(ctx.settings.templates_dir) if n not in choices]

        click.echo("Available templates:\n")
        for i, name in enumerate(choices, 1):
            click.echo(f"  {i:2d}) {name}")

        answer = click.prompt(
            "\nEnter template numbers separated by spaces (0 to finish)",
            default="",
            show_default=False,
        )
        selected = parse_selection(answer, choices)
        if not selected:
            logger.warning("No templates selected")
            return

        click.echo(f"\nSelected: {', '.join(selected)}")
        if not click.confirm("Create/update .gitignore?", default=False):
            logger.info("Cancelled")
            return
        invoke_tool("init", ctx, {"names": selected, "dry_run": ctx.dry_run})
