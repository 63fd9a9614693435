"""GlobalTool: manage the cross-repository ~/.gitignore_global file."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import click

from .catalog import TemplateSource
from .config import Settings
from .core import (
    IgnoreTool,
    InvalidArgument,
    MissingFileError,
    ToolContext,
    build_tool_context,
    dedupe_names,
    logger,
    run_tool,
)
from .detect import os_template
from .merge import MergeResult, MergeStrategy, merge_templates

GLOBAL_HEADER = (
    "# Global .gitignore\n"
    "# This file affects all git repositories on this system\n"
    "# Configure with: git config --global core.excludesfile ~/.gitignore_global\n\n"
)
GLOBAL_ADD_HEADER = "\n# Added by gitignore-tools\n"


class GlobalAction(enum.Enum):
    INIT = "init"
    ADD = "add"


def global_init(settings: Settings, system: str | None = None) -> Path | None:
    """Create the global ignore file seeded with the host OS template.

    Returns the path, or None when the file already exists.
    """
    path = settings.global_ignore_path
    if path.exists():
        logger.warning(f"Global .gitignore already exists: {path}")
        return None

    names = [n for n in (os_template(system),) if n]
    if names:
        source = TemplateSource(settings.templates_dir)
        merge_templates(names, path, MergeStrategy.REPLACE, source, header=GLOBAL_HEADER)
    else:
        path.write_text(GLOBAL_HEADER, encoding="utf-8")

    logger.info(f"Global .gitignore created: {path}")
    logger.info(f"To enable it, run: git config --global core.excludesfile {path}")
    return path


def global_add(
    settings: Settings,
    names: Sequence[str],
    strategy: MergeStrategy = MergeStrategy.SMART,
) -> MergeResult:
    """Merge templates into the existing global ignore file."""
    path = settings.global_ignore_path
    if not path.exists():
        raise MissingFileError("Global .gitignore does not exist. Run 'gitignore global init' first")

    selected = dedupe_names(names)
    if not selected:
        raise InvalidArgument("global add requires template names")

    result = merge_templates(
        selected, path, strategy, TemplateSource(settings.templates_dir),
        header=GLOBAL_ADD_HEADER,
        incremental=settings.smart_incremental,
    )
    if result.written_count:
        logger.info(f"Templates added to global .gitignore: {path}")
    return result


class GlobalTool(IgnoreTool):
    name = "global"
    help = "Manage the global (all repositories) ignore file"

    def create_click_command(self) -> click.Command:
        tool = self

        @click.group(name=self.name, help=self.help)
        def group() -> None:
            pass

        @group.command(name="init", help="Create ~/.gitignore_global")
        @click.pass_context
        def init_cmd(ctx: click.Context) -> None:
            run_tool(tool, build_tool_context(ctx.obj), {"action": GlobalAction.INIT})

        @group.command(name="add", help="Merge templates into ~/.gitignore_global")
        @click.argument("names", nargs=-1, required=True)
        @click.option("--append", "append_only", is_flag=True, help="Do not skip patterns already present")
        @click.pass_context
        def add_cmd(ctx: click.Context, names: tuple[str, ...], append_only: bool) -> None:
            run_tool(
                tool,
                build_tool_context(ctx.obj),
                {"action": GlobalAction.ADD, "names": list(names), "append_only": append_only},
            )

        return group

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        action = args.get("action")
        if action is GlobalAction.INIT:
            if ctx.dry_run:
                logger.info(f"[dry run] Would create {ctx.settings.global_ignore_path}")
                return
            global_init(ctx.settings)
        elif action is GlobalAction.ADD:
            strategy = MergeStrategy.APPEND if args.get("append_only") else MergeStrategy.SMART
            if ctx.dry_run:
                logger.info(f"[dry run] Would add to {ctx.settings.global_ignore_path}: {', '.join(args['names'])}")
                return
            global_add(ctx.settings, args.get("names", []), strategy)
        else:
            raise InvalidArgument("global requires a subcommand (init/add)")
