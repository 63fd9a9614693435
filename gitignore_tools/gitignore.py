"""Append literal patterns to a .gitignore file, skipping ones already there."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import click

from .core import IgnoreTool, InvalidArgument, ToolContext, logger
from .patterns import tokenize

MARKER = "# Added by gitignore-tools"


def missing_patterns(text: str, patterns: Iterable[str]) -> list[str]:
    """Trimmed *patterns* not present in *text*, in request order, without repeats."""
    existing = {line.text for line in tokenize(text) if line.is_pattern}
    missing: list[str] = []
    for pattern in patterns:
        entry = pattern.strip()
        if not entry or entry in existing or entry in missing:
            continue
        missing.append(entry)
    return missing


def add_patterns(
    path: Path,
    patterns: Iterable[str],
    marker: str = MARKER,
) -> list[str]:
    """Ensure *patterns* exist in the ignore file; return the ones added.

    Creates the file if absent.  Preserves original line endings (CRLF/LF).
    Idempotent: does nothing when every pattern is already present.
    """
    raw = b""
    if path.exists():
        raw = path.read_bytes()

    # Detect line ending style from existing content.
    eol = "\r\n" if b"\r\n" in raw else "\n"

    text = raw.decode("utf-8", errors="replace")
    missing = missing_patterns(text, patterns)
    if not missing:
        return []

    parts: list[str] = []

    # Ensure trailing newline on existing content.
    if text and not text.endswith("\n"):
        parts.append(eol)

    # Blank separator, plus the marker when several patterns land together.
    if text:
        parts.append(eol)
    if len(missing) > 1:
        parts.append(marker + eol)

    for entry in missing:
        parts.append(entry + eol)

    path.write_bytes(raw + "".join(parts).encode("utf-8"))
    return missing


class AddTool(IgnoreTool):
    name = "add"
    help = "Add literal patterns to .gitignore (also: gitignore <pattern>...)"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.argument("patterns", nargs=-1, required=True)(cmd)
        cmd = click.option("--dry-run", is_flag=True, help="Show what would be added")(cmd)
        return cmd

    def default_args(self) -> dict[str, Any]:
        return {"patterns": [], "dry_run": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        patterns = [p for p in args.get("patterns", []) if p.strip()]
        if not patterns:
            raise InvalidArgument("No patterns provided")

        path = ctx.gitignore_path
        if args.get("dry_run") or ctx.dry_run:
            text = path.read_text(encoding="utf-8", errors="replace") if path.is_file() else ""
            todo = missing_patterns(text, patterns)
            logger.info(f"[dry run] Would add {len(todo)} pattern(s)")
            for entry in todo:
                logger.info(f"  + {entry}")
            return

        added = add_patterns(path, patterns)
        for entry in patterns:
            if entry.strip() not in added:
                logger.debug(f"Skipping duplicate: {entry}")
        if not added:
            logger.warning(f"All patterns already exist in {path.name}")
            return
        logger.info(f"Added {len(added)} pattern(s) to {path.name}")
        for entry in added:
            logger.info(f"  + {entry}")
