"""Line tokenizer and the existing-pattern index used for smart dedup."""

from __future__ import annotations

import dataclasses
import re
from pathlib import Path

_LINE_SPLIT = re.compile(r"(?<=\n)")


@dataclasses.dataclass(frozen=True)
class Line:
    """One line of ignore-file text.

    ``raw`` keeps the original terminator (``\\n``, ``\\r\\n`` or none for
    a final unterminated line); ``text`` is the trimmed content.
    """

    raw: str
    text: str
    is_comment: bool

    @property
    def is_blank(self) -> bool:
        return not self.text

    @property
    def is_pattern(self) -> bool:
        return bool(self.text) and not self.is_comment


def is_comment(line: str) -> bool:
    """True when *line* starts with ``#`` after leading whitespace."""
    return line.lstrip().startswith("#")


def tokenize(text: str) -> list[Line]:
    """Split *text* into :class:`Line` values, terminators preserved.

    Only ``\\n`` ends a line (git's rule); ``\\r`` before it stays in
    ``raw`` and is trimmed from ``text``.
    """
    return [
        Line(raw=raw, text=raw.strip(), is_comment=is_comment(raw))
        for raw in _LINE_SPLIT.split(text)
        if raw
    ]


def build_index(path: Path) -> set[str]:
    """Return the trimmed pattern lines already present in *path*.

    A missing file yields an empty set.
    """
    if not path.is_file():
        return set()
    text = path.read_text(encoding="utf-8", errors="replace")
    return {line.text for line in tokenize(text) if line.is_pattern}
