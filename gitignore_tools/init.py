"""InitTool / UpdateTool: create or extend .gitignore from templates."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import click

from .backup import create_backup
from .catalog import TemplateSource, local_template_path
from .config import Settings
from .core import (
    IgnoreTool,
    InvalidArgument,
    MissingFileError,
    ToolContext,
    dedupe_names,
    logger,
)
from .merge import MergeResult, MergeStrategy, merge_templates

AUTO_TEMPLATE = "auto"
PLACEHOLDER = "# .gitignore\n# Add your ignore patterns here\n\n"


def write_placeholder(path: Path) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(PLACEHOLDER)
    logger.info(f"{path.name} created (empty)")


def maybe_backup(settings: Settings, path: Path) -> None:
    """Back up *path* first when auto-backup is on and the file exists."""
    if settings.auto_backup and path.is_file():
        logger.debug("Auto-backup enabled, creating backup...")
        create_backup(settings, path)


def _report(result: MergeResult, path: Path, verb: str) -> None:
    if result.written_count:
        logger.info(f"{path.name} {verb}: {', '.join(result.resolved)}")
    if result.skipped:
        logger.warning(f"Skipped {len(result.skipped)} template(s): {', '.join(result.skipped)}")


def init_gitignore(
    ctx: ToolContext,
    names: Sequence[str],
    dry_run: bool = False,
) -> MergeResult | None:
    """Create ``.gitignore`` (REPLACE) or merge into an existing one (SMART).

    With no names, the local ``auto`` template is used, then the
    configured default templates, then an empty placeholder.
    """
    settings = ctx.settings
    output = ctx.gitignore_path

    if dry_run:
        logger.info(f"[dry run] Would {'update' if output.exists() else 'create'} {output.name}")
        if names:
            logger.info(f"  Templates: {', '.join(names)}")
        return None

    maybe_backup(settings, output)
    exists = output.exists()

    if names:
        selected = dedupe_names(names)
        if not selected:
            logger.warning("No valid templates after filtering")
    elif local_template_path(settings.templates_dir, AUTO_TEMPLATE).is_file():
        selected = [AUTO_TEMPLATE]
    else:
        selected = dedupe_names(settings.default_templates)

    if not selected:
        if exists:
            logger.info(f"No templates given; {output.name} left unchanged")
        else:
            write_placeholder(output)
        return None

    strategy = MergeStrategy.SMART if exists else MergeStrategy.REPLACE
    source = TemplateSource(settings.templates_dir)
    result = merge_templates(
        selected, output, strategy, source,
        incremental=settings.smart_incremental,
    )
    _report(result, output, "updated" if exists else "created")
    return result


def update_gitignore(
    ctx: ToolContext,
    names: Sequence[str],
    strategy: MergeStrategy = MergeStrategy.SMART,
    dry_run: bool = False,
) -> MergeResult | None:
    """Merge templates into an existing ``.gitignore`` with APPEND or SMART."""
    if strategy is MergeStrategy.REPLACE:
        raise InvalidArgument("update supports the 'append' and 'smart' strategies only")

    settings = ctx.settings
    output = ctx.gitignore_path
    if not output.exists():
        raise MissingFileError(f"{output.name} does not exist. Use 'init' to create one")

    if dry_run:
        logger.info(f"[dry run] Would append to {output.name}")
        logger.info(f"  Strategy: {strategy.value}")
        if names:
            logger.info(f"  Templates: {', '.join(names)}")
        return None

    maybe_backup(settings, output)

    selected = dedupe_names(names)
    if not selected:
        raise InvalidArgument("No valid templates after filtering")

    source = TemplateSource(settings.templates_dir)
    result = merge_templates(
        selected, output, strategy, source,
        incremental=settings.smart_incremental,
    )
    _report(result, output, "updated")
    return result


class InitTool(IgnoreTool):
    name = "init"
    help = "Create .gitignore from templates (merges if it already exists)"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.argument("names", nargs=-1)(cmd)
        cmd = click.option("--dry-run", is_flag=True, help="Show what would be written")(cmd)
        return cmd

    def default_args(self) -> dict[str, Any]:
        return {"names": [], "dry_run": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        dry_run = args.get("dry_run") or ctx.dry_run
        init_gitignore(ctx, list(args.get("names", [])), dry_run=dry_run)


class UpdateTool(IgnoreTool):
    name = "update"
    help = "Merge templates into .gitignore, skipping patterns already present"
    strategy = MergeStrategy.SMART

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.argument("names", nargs=-1, required=True)(cmd)
        cmd = click.option(
            "--strategy",
            type=click.Choice(["append", "smart"], case_sensitive=False),
            default=None,
            help=f"Merge strategy (default: {self.strategy.value})",
        )(cmd)
        cmd = click.option("--dry-run", is_flag=True, help="Show what would be written")(cmd)
        return cmd

    def default_args(self) -> dict[str, Any]:
        return {"names": [], "strategy": self.strategy.value, "dry_run": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        strategy = MergeStrategy.parse(args.get("strategy") or self.strategy.value)
        dry_run = args.get("dry_run") or ctx.dry_run
        update_gitignore(ctx, list(args.get("names", [])), strategy, dry_run=dry_run)


class AppendTool(UpdateTool):
    name = "append"
    help = "Append templates to .gitignore without deduplication"
    strategy = MergeStrategy.APPEND
