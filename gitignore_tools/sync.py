"""SyncTool: pull templates from github/gitignore (with on-disk cache)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click

from .cache import TemplateCache
from .catalog import TemplateSource
from .core import IgnoreTool, InvalidArgument, NetworkError, ToolContext, dedupe_names, logger
from .init import maybe_backup
from .merge import MergeResult, MergeStrategy, merge_templates
from .remote import RemoteSource

SYNC_HEADER_NEW = (
    "# Generated by gitignore-tools\n"
    "# Synced from https://github.com/github/gitignore\n\n"
)
SYNC_HEADER_APPEND = "\n# Synced from GitHub by gitignore-tools\n"


def sync_gitignore(
    ctx: ToolContext,
    names: Sequence[str],
    dry_run: bool = False,
    remote_only: bool = False,
) -> MergeResult | None:
    """Merge templates resolved through the full chain, remote tier included."""
    settings = ctx.settings
    output = ctx.gitignore_path

    selected = dedupe_names(names)
    if not selected:
        raise InvalidArgument("sync requires at least one template name")

    if dry_run:
        logger.info("[dry run] Would sync templates from GitHub")
        logger.info(f"  Templates: {', '.join(selected)}")
        return None

    maybe_backup(settings, output)
    exists = output.exists()

    cache = TemplateCache(settings.cache_dir, settings.cache_enabled, settings.cache_duration)
    source = TemplateSource(
        settings.templates_dir,
        cache=cache,
        remote=RemoteSource(settings.remote_url),
        remote_only=remote_only,
    )

    logger.info("Syncing templates from GitHub...")
    result = merge_templates(
        selected,
        output,
        MergeStrategy.SMART if exists else MergeStrategy.REPLACE,
        source,
        header=SYNC_HEADER_APPEND if exists else SYNC_HEADER_NEW,
        incremental=settings.smart_incremental,
    )

    if result.written_count == 0:
        raise NetworkError("No templates could be downloaded")

    verb = "updated" if exists else "synced"
    logger.info(f"{output.name} {verb}: {result.written_count}/{len(selected)} templates")
    return result


class SyncTool(IgnoreTool):
    name = "sync"
    help = "Download templates from github/gitignore and merge them into .gitignore"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.argument("names", nargs=-1, required=True)(cmd)
        cmd = click.option(
            "--remote-only", is_flag=True,
            help="Skip local and built-in templates; always use GitHub (or the cache)",
        )(cmd)
        cmd = click.option("--dry-run", is_flag=True, help="Show what would be synced")(cmd)
        return cmd

    def default_args(self) -> dict[str, Any]:
        return {"names": [], "remote_only": False, "dry_run": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        sync_gitignore(
            ctx,
            list(args.get("names", [])),
            dry_run=args.get("dry_run") or ctx.dry_run,
            remote_only=bool(args.get("remote_only")),
        )
