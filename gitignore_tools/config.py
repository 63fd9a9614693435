"""Settings: the key=value config file and the paths derived from it."""

from __future__ import annotations

import dataclasses
import json
import re
import sys
from pathlib import Path
from typing import Any

import click

from .core import IgnoreTool, ToolContext, logger

CONFIG_DIR = Path(".config") / "gitignore"
CONFIG_FILE = "config.conf"
GLOBAL_GITIGNORE = ".gitignore_global"
CACHE_DURATION = 86400
GITHUB_RAW_URL = "https://raw.githubusercontent.com/github/gitignore/main/"

_LINE_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$")
_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


@dataclasses.dataclass(frozen=True)
class Settings:
    """Effective configuration, built once per process and passed explicitly."""

    home: Path
    auto_backup: bool = False
    cache_enabled: bool = True
    cache_duration: int = CACHE_DURATION
    verbose: bool = False
    quiet: bool = False
    use_color: bool = True
    default_templates: tuple[str, ...] = ()
    remote_url: str = GITHUB_RAW_URL
    smart_incremental: bool = False

    @property
    def config_dir(self) -> Path:
        return self.home / CONFIG_DIR

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILE

    @property
    def templates_dir(self) -> Path:
        return self.config_dir / "templates"

    @property
    def cache_dir(self) -> Path:
        return self.config_dir / "cache"

    @property
    def backup_dir(self) -> Path:
        return self.config_dir / "backups"

    @property
    def global_ignore_path(self) -> Path:
        return self.home / GLOBAL_GITIGNORE

    def to_dict(self) -> dict[str, Any]:
        """Flatten to plain values (for display and saving)."""
        return {
            "auto_backup": self.auto_backup,
            "cache_enabled": self.cache_enabled,
            "cache_duration": self.cache_duration,
            "verbose": self.verbose,
            "quiet": self.quiet,
            "use_color": self.use_color,
            "default_templates": list(self.default_templates),
            "remote_url": self.remote_url,
            "smart_incremental": self.smart_incremental,
            "config_file": str(self.config_file),
            "templates_dir": str(self.templates_dir),
            "cache_dir": str(self.cache_dir),
            "backup_dir": str(self.backup_dir),
        }


def _parse_bool(value: str) -> bool:
    lowered = value.casefold()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"expected a boolean, got '{value}'")


def _parse_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise ValueError(f"expected a non-negative integer, got '{value}'")
    return number


def _parse_list(value: str) -> tuple[str, ...]:
    return tuple(v.strip() for v in value.split(",") if v.strip())


_PARSERS = {
    "auto_backup": _parse_bool,
    "cache_enabled": _parse_bool,
    "cache_duration": _parse_int,
    "verbose": _parse_bool,
    "quiet": _parse_bool,
    "use_color": _parse_bool,
    "default_templates": _parse_list,
    "remote_url": str,
    "smart_incremental": _parse_bool,
}


def parse_config_text(text: str) -> dict[str, Any]:
    """Parse key=value lines. Comments, blanks and unknown keys are ignored."""
    values: dict[str, Any] = {}
    for lineno, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _LINE_RE.match(stripped)
        if not match:
            logger.warning(f"config line {lineno}: expected key=value, ignoring")
            continue
        key, raw = match.group(1), match.group(2)
        parser = _PARSERS.get(key)
        if parser is None:
            logger.debug(f"config line {lineno}: unknown key '{key}'")
            continue
        try:
            values[key] = parser(raw)
        except ValueError as exc:
            logger.warning(f"config line {lineno}: {key}: {exc}")
    return values


def load_settings(home: Path | None = None, **overrides: Any) -> Settings:
    """Build Settings from defaults, the config file, then *overrides*.

    Overrides whose value is ``None`` are ignored so CLI flags that were
    not given do not mask the file.
    """
    home = Path(home) if home is not None else Path.home()
    settings = Settings(home=home, use_color=sys.stderr.isatty())

    config_file = settings.config_file
    if config_file.is_file():
        text = config_file.read_text(encoding="utf-8", errors="replace")
        settings = dataclasses.replace(settings, **parse_config_text(text))

    explicit = {k: v for k, v in overrides.items() if v is not None}
    if explicit:
        settings = dataclasses.replace(settings, **explicit)
    return settings


def save_settings(settings: Settings) -> Path:
    """Write *settings* back to the config file; return its path."""
    path = settings.config_file
    path.parent.mkdir(parents=True, exist_ok=True)
    values = settings.to_dict()
    lines = ["# gitignore-tools configuration", ""]
    for key in _PARSERS:
        value = values[key]
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, list):
            text = ",".join(value)
        else:
            text = str(value)
        lines.append(f"{key}={text}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class ConfigTool(IgnoreTool):
    name = "config"
    help = "Display effective settings (paths, cache policy, verbosity)"

    def setup(self, cmd: click.Command) -> click.Command:
        cmd = click.option("--json", "as_json", is_flag=True, help="Output as JSON")(cmd)
        cmd = click.option("--init", "write_file", is_flag=True, help="Write the settings to the config file if absent")(cmd)
        return cmd

    def default_args(self) -> dict[str, Any]:
        return {"as_json": False, "write_file": False}

    def execute(self, ctx: ToolContext, args: dict[str, Any]) -> None:
        settings = ctx.settings
        if args.get("write_file"):
            if settings.config_file.exists():
                logger.warning(f"Config file already exists: {settings.config_file}")
            elif ctx.dry_run:
                logger.info(f"[dry run] Would write {settings.config_file}")
            else:
                logger.info(f"Config written: {save_settings(settings)}")

        values = settings.to_dict()
        if args.get("as_json"):
            print(json.dumps(values, indent=2))
        else:
            for key, value in values.items():
                if isinstance(value, list):
                    value = ",".join(value)
                logger.info(f"{key}: {value}")
