"""On-disk cache of downloaded template bodies, one file per template."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

import click

from .core import CacheError, IgnoreTool, ToolContext, build_tool_context, logger, run_tool

CACHE_SUFFIX = ".cache"


def _cache_filename(name: str) -> str:
    # Remote names can carry a folder ("Global/macOS"); keep one flat directory.
    return name.replace("/", "__").replace("\\", "__") + CACHE_SUFFIX


class TemplateCache:
    """Template bodies keyed by name, valid for *duration* seconds after mtime."""

    def __init__(self, cache_dir: Path, enabled: bool = True, duration: int = 86400) -> None:
        self.cache_dir = cache_dir
        self.enabled = enabled
        self.duration = duration

    def path_for(self, name: str) -> Path:
        return self.cache_dir / _cache_filename(name)

    def get(self, name: str) -> str | None:
        """Return the cached body, or None when disabled, missing or expired.

        Expired entries are deleted.
        """
        if not self.enabled:
            return None
        path = self.path_for(name)
        try:
            mtime = path.stat().st_mtime
            if time.time() - mtime > self.duration:
                logger.debug(f"Cache expired: {name}")
                path.unlink(missing_ok=True)
                return None
            body = path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheError(f"Cache directory unusable: {self.cache_dir} ({exc})") from exc
        logger.debug(f"Using cached template: {name}")
        return body

    def put(self, name: str, body: str) -> None:
        if not self.enabled:
            return
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            self.path_for(name).write_text(body, encoding="utf-8")
        except OSError as exc:
            raise CacheError(f"Cache directory unusable: {self.cache_dir} ({exc})") from exc

    def entries(self) -> list[Path]:
        if not self.cache_dir.is_dir():
            return []
        return sorted(
            p for p in self.cache_dir.iterdir()
            if p.is_file() and p.name.endswith(CACHE_SUFFIX)
        )

    def clear(self) -> int:
        """Delete every cache entry; return how many were removed."""
        entries = self.entries()
        for entry in entries:
            entry.unlink()
        return len(entries)


class CacheTool(IgnoreTool):
    name = "cache"
    help = "Manage the downloaded-template cache"

    def create_click_command(self) -> click.Command:
        tool = self

        @click.group(name=self.name, help=self.help)
        def group() -> None:
            pass

        @group.command(name="clear", help="Remove every cached template")
        @click.option("--dry-run", is_flag=True, help="Show what would be removed")
        @click.pass_context
        def clear_cmd(ctx: click.Context, dry_run: bool) -> None:
            run_tool(tool, build_tool_context(ctx.obj), {"dry_run": dry_run})

        return group

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        settings = ctx.settings
        cache = TemplateCache(settings.cache_dir, settings.cache_enabled, settings.cache_duration)
        if args.get("dry_run") or ctx.dry_run:
            logger.info(f"[dry run] Would remove {len(cache.entries())} cached template(s)")
            return
        count = cache.clear()
        if count:
            logger.info(f"Cache cleared: removed {count} cached template(s)")
        else:
            logger.info("Cache already empty")
