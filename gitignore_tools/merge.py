"""Merge engine: write one or more templates into an ignore file.

Three strategies:

- ``REPLACE`` truncates the output and writes every template line.
- ``APPEND`` appends every template line, duplicates included.
- ``SMART`` appends, dropping pattern lines already present in the
  output before the call started.  Comments and blank lines always pass.

The existing-pattern index is a snapshot taken before the output is
opened.  With ``incremental=True`` lines written during the call join the
index too, so two templates sharing a pattern only contribute it once.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Sequence
from pathlib import Path

from . import __version__
from .catalog import TemplateSource
from .core import InvalidArgument, logger
from .patterns import build_index


class MergeStrategy(enum.Enum):
    REPLACE = "replace"
    APPEND = "append"
    SMART = "smart"

    @classmethod
    def parse(cls, value: str) -> MergeStrategy:
        try:
            return cls(value.casefold())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise InvalidArgument(f"Unknown merge strategy '{value}' (choose from {choices})") from None


@dataclasses.dataclass
class MergeResult:
    written_count: int = 0
    skipped: list[str] = dataclasses.field(default_factory=list)
    resolved: list[str] = dataclasses.field(default_factory=list)
    duplicates_dropped: int = 0


REPLACE_HEADER = f"# Generated by gitignore-tools v{__version__}\n\n"
APPEND_HEADER = "\n# Appended by gitignore-tools\n"
SMART_HEADER = "\n# Merged by gitignore-tools\n"


def default_header(strategy: MergeStrategy) -> str:
    if strategy is MergeStrategy.REPLACE:
        return REPLACE_HEADER
    if strategy is MergeStrategy.APPEND:
        return APPEND_HEADER
    return SMART_HEADER


def section_marker(name: str) -> str:
    return f"# ===== {name} =====\n"


def _needs_leading_newline(path: Path) -> bool:
    """True when *path* has content that does not end in a newline."""
    try:
        with open(path, "rb") as f:
            f.seek(0, 2)
            if f.tell() == 0:
                return False
            f.seek(-1, 2)
            return f.read(1) != b"\n"
    except FileNotFoundError:
        return False


def _line_ending(path: Path) -> str:
    """``\\r\\n`` when *path* already uses CRLF, else ``\\n``."""
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        return "\n"
    return "\r\n" if b"\r\n" in data else "\n"


def _terminate(raw: str, eol: str) -> str:
    """End *raw* with *eol*, replacing its own terminator when it differs."""
    if raw.endswith("\n"):
        if eol == "\n":
            return raw
        raw = raw[:-1].removesuffix("\r")
    return raw + eol


def merge_templates(
    names: Sequence[str],
    output: Path,
    strategy: MergeStrategy,
    source: TemplateSource,
    header: str | None = None,
    incremental: bool = False,
) -> MergeResult:
    """Write the templates in *names* (already deduplicated) into *output*.

    Unresolvable names are skipped with a warning.  Failure to open
    *output* propagates as ``OSError``.  Appends follow the output's
    existing line ending (CRLF or LF).
    """
    index: set[str] = set()
    if strategy is MergeStrategy.SMART:
        index = build_index(output)

    appending = strategy is not MergeStrategy.REPLACE
    lead = appending and _needs_leading_newline(output)
    eol = _line_ending(output) if appending else "\n"
    result = MergeResult()

    with open(output, "a" if appending else "w", encoding="utf-8", newline="") as out:
        if lead:
            out.write(eol)
        text = default_header(strategy) if header is None else header
        out.write(text.replace("\n", eol))

        for name in names:
            template = source.resolve(name)
            if template is None:
                result.skipped.append(name)
                logger.warning(f"Template not found, skipping: {name}")
                continue

            out.write(_terminate(section_marker(name), eol))
            for line in template.lines:
                if strategy is MergeStrategy.SMART and line.is_pattern:
                    if line.text in index:
                        result.duplicates_dropped += 1
                        continue
                    if incremental:
                        index.add(line.text)
                out.write(_terminate(line.raw, eol))
            out.write(eol)

            result.written_count += 1
            result.resolved.append(name)
            logger.info(f"+ {name} ({template.origin})")

    if result.duplicates_dropped:
        logger.debug(f"Dropped {result.duplicates_dropped} duplicate pattern(s)")
    return result
