"""Timestamped backups of the working .gitignore."""

from __future__ import annotations

import shutil
import time
from pathlib import Path
from typing import Any

import click

from .config import Settings
from .core import IgnoreTool, InvalidArgument, MissingFileError, ToolContext, logger

BACKUP_PREFIX = "gitignore_"
BACKUP_SUFFIX = ".bak"


def _backup_name(stamp: str, n: int) -> str:
    if n == 0:
        return f"{BACKUP_PREFIX}{stamp}{BACKUP_SUFFIX}"
    return f"{BACKUP_PREFIX}{stamp}_{n}{BACKUP_SUFFIX}"


def create_backup(settings: Settings, source: Path) -> Path:
    """Copy *source* into the backup directory; return the backup path."""
    if not source.is_file():
        raise MissingFileError(f"{source.name} does not exist")

    backup_dir = settings.backup_dir
    backup_dir.mkdir(parents=True, exist_ok=True)

    stamp = time.strftime("%Y%m%d_%H%M%S")
    n = 0
    target = backup_dir / _backup_name(stamp, n)
    while target.exists():
        n += 1
        target = backup_dir / _backup_name(stamp, n)

    shutil.copyfile(source, target)
    logger.info(f"Backup created: {target}")
    return target


def list_backups(settings: Settings) -> list[str]:
    """Backup file names, oldest first."""
    backup_dir = settings.backup_dir
    if not backup_dir.is_dir():
        return []
    return sorted(
        p.name for p in backup_dir.iterdir()
        if p.is_file() and p.name.endswith(BACKUP_SUFFIX)
    )


def restore_backup(settings: Settings, name: str, target: Path) -> Path:
    """Copy backup *name* over *target*; return the backup path used."""
    if not name or Path(name).name != name:
        raise InvalidArgument(f"Invalid backup name: {name!r}")
    backup = settings.backup_dir / name
    if not backup.is_file():
        raise MissingFileError(f"Backup not found: {name}")
    shutil.copyfile(backup, target)
    logger.info(f"Backup restored: {name}")
    return backup


class BackupTool(IgnoreTool):
    name = "backup"
    help = "Save a timestamped copy of .gitignore"

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        if ctx.dry_run:
            logger.info(f"[dry run] Would back up {ctx.gitignore_path} to {ctx.settings.backup_dir}")
            return
        create_backup(ctx.settings, ctx.gitignore_path)


class RestoreTool(IgnoreTool):
    name = "restore"
    help = "Restore .gitignore from a backup (lists backups when no name is given)"

    def setup(self, cmd: click.Command) -> click.Command:
        return click.argument("backup_name", required=False)(cmd)

    def default_args(self) -> dict[str, Any]:
        return {"backup_name": None}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        name = args.get("backup_name")
        if not name:
            backups = list_backups(ctx.settings)
            if not backups:
                raise MissingFileError("No backups found")
            print("Available backups:")
            for i, entry in enumerate(backups, 1):
                print(f"  {i}) {entry}")
            print("\nUse: gitignore restore <backup_name>")
            return
        if ctx.dry_run:
            logger.info(f"[dry run] Would restore {name} over {ctx.gitignore_path}")
            return
        restore_backup(ctx.settings, name, ctx.gitignore_path)


class BackupsTool(IgnoreTool):
    name = "backups"
    help = "List saved backups"

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        backups = list_backups(ctx.settings)
        if not backups:
            logger.info("No backups found")
            return
        print("Backup History:\n")
        for entry in backups:
            print(f"  • {entry}")
        print(f"\nTotal: {len(backups)} backup(s)")


class HistoryTool(BackupsTool):
    name = "history"
    help = "Alias for backups"
