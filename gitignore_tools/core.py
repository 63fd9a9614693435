"""Core framework: logging, error taxonomy, IgnoreTool base, registry, utilities."""

from __future__ import annotations

import dataclasses
import enum
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from colorama import Fore, Style

if TYPE_CHECKING:
    from .config import Settings


# ── Logging ──────────────────────────────────────────────────────────


def _level_color(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return Fore.RED
    if levelno >= logging.WARNING:
        return Fore.YELLOW
    if levelno <= logging.DEBUG:
        return Fore.MAGENTA
    return Fore.CYAN


class ToolFormatter(logging.Formatter):
    def __init__(self, use_color: bool = True) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        label = f"[{record.levelname.lower()}]"
        if not self.use_color:
            return f"{label} {message}"
        color = _level_color(record.levelno)
        return f"{color}{label}{Style.RESET_ALL} {message}"


logger = logging.getLogger("gitignore_tools")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(ToolFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


def configure_logging(settings: Settings) -> None:
    """Apply verbosity, quiet mode and color from *settings* to the logger."""
    if settings.quiet:
        logger.setLevel(logging.ERROR)
    elif settings.verbose:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)
    for h in logger.handlers:
        if isinstance(h.formatter, ToolFormatter):
            h.formatter.use_color = settings.use_color


# ── Errors ───────────────────────────────────────────────────────────


class ErrorCode(enum.IntEnum):
    SUCCESS = 0
    FILE_NOT_FOUND = 1
    NETWORK_ERROR = 2
    PERMISSION_DENIED = 3
    INVALID_TEMPLATE = 4
    OUT_OF_MEMORY = 5
    INVALID_ARGUMENT = 6
    CACHE_ERROR = 7


class GitignoreError(Exception):
    """Base for user-facing failures. Carries an :class:`ErrorCode`."""

    code = ErrorCode.INVALID_ARGUMENT

    def __init__(self, message: str, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class MissingFileError(GitignoreError):
    code = ErrorCode.FILE_NOT_FOUND


class NetworkError(GitignoreError):
    code = ErrorCode.NETWORK_ERROR


class TemplateNotFound(GitignoreError):
    code = ErrorCode.INVALID_TEMPLATE


class InvalidArgument(GitignoreError):
    code = ErrorCode.INVALID_ARGUMENT


class CacheError(GitignoreError):
    code = ErrorCode.CACHE_ERROR


def error_code_for(exc: BaseException) -> ErrorCode:
    """Map an exception onto the tool's error taxonomy."""
    if isinstance(exc, GitignoreError):
        return exc.code
    if isinstance(exc, MemoryError):
        return ErrorCode.OUT_OF_MEMORY
    if isinstance(exc, FileNotFoundError):
        return ErrorCode.FILE_NOT_FOUND
    if isinstance(exc, OSError):
        return ErrorCode.PERMISSION_DENIED
    return ErrorCode.INVALID_ARGUMENT


def report_error(exc: BaseException, verbose: bool = False) -> None:
    """Log a short message for *exc*; verbose mode appends the numeric code."""
    if isinstance(exc, OSError) and exc.filename is not None:
        message = f"{exc.strerror or exc}: {exc.filename}"
    else:
        message = str(exc) or exc.__class__.__name__
    if verbose:
        message = f"{message} (code: {int(error_code_for(exc))})"
    logger.error(message)


# ── ToolContext ───────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class ToolContext:
    """Immutable context passed to every tool execution."""

    workspace_root: Path
    settings: Settings
    dry_run: bool = False

    @property
    def gitignore_path(self) -> Path:
        return self.workspace_root / ".gitignore"


def build_tool_context(ctx_obj: dict[str, Any]) -> ToolContext:
    """Build a ToolContext from the click context obj dict."""
    return ToolContext(
        workspace_root=Path(ctx_obj["workspace_root"]),
        settings=ctx_obj["settings"],
        dry_run=bool(ctx_obj.get("dry_run", False)),
    )


# ── IgnoreTool Base ──────────────────────────────────────────────────


class IgnoreTool:
    """Base class for all gitignore commands.

    Subclasses set ``name`` and ``help``, then implement ``setup()`` to
    add click options and ``execute()`` to run the command.  Tools that
    need a nested click group override ``create_click_command()``.
    """

    name: str = ""
    help: str = ""

    def setup(self, cmd: click.Command) -> click.Command:
        """Add click options/arguments to the command. Return the command."""
        return cmd

    def default_args(self) -> dict[str, Any]:
        """Return default args dict before CLI merge."""
        return {}

    def create_click_command(self) -> click.Command | None:
        """Return a fully built click command, or None to use the default builder."""
        return None

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        """Execute the tool with context and tool-specific args."""
        raise NotImplementedError


# ── Tool Registry ────────────────────────────────────────────────────

_TOOL_REGISTRY: dict[str, IgnoreTool] = {}


def register_tool(tool: IgnoreTool) -> None:
    """Add a tool to the global registry."""
    _TOOL_REGISTRY[tool.name] = tool


def get_tool(name: str) -> IgnoreTool | None:
    """Look up a registered tool by name."""
    return _TOOL_REGISTRY.get(name)


def invoke_tool(
    name: str,
    ctx: ToolContext,
    extra_args: dict[str, Any] | None = None,
) -> None:
    """Invoke a registered tool programmatically (e.g. ``auto`` calling ``init``)."""
    tool = get_tool(name)
    if tool is None:
        raise KeyError(f"Tool '{name}' is not registered.")

    args: dict[str, Any] = {**tool.default_args()}
    if extra_args:
        args.update(extra_args)

    tool.execute(ctx, args)


def run_tool(tool: IgnoreTool, ctx: ToolContext, args: dict[str, Any]) -> None:
    """Execute *tool*; report failures and exit 1 instead of raising."""
    try:
        tool.execute(ctx, args)
    except (GitignoreError, OSError, MemoryError) as exc:
        report_error(exc, verbose=ctx.settings.verbose)
        raise SystemExit(1) from exc


# ── Name Helpers ─────────────────────────────────────────────────────


def dedupe_names(names: Iterable[str]) -> list[str]:
    """Drop ``#``-prefixed entries and case-insensitive repeats, keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        if name.startswith("#"):
            logger.debug(f"Skipping comment: {name}")
            continue
        key = name.casefold()
        if key in seen:
            logger.debug(f"Skipping duplicate: {name}")
            continue
        seen.add(key)
        result.append(name)
    return result
