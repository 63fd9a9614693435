"""Template catalog: local overrides, built-in YAML catalog, cache/remote tier."""

from __future__ import annotations

import dataclasses
import functools
from pathlib import Path

import yaml

from .cache import TemplateCache
from .core import CacheError, NetworkError, logger
from .patterns import Line, tokenize
from .remote import RemoteSource

BUILTIN_CATALOG = Path(__file__).with_name("templates.yaml")
TEMPLATE_SUFFIX = ".gitignore"

ORIGIN_LOCAL = "local"
ORIGIN_BUILTIN = "builtin"
ORIGIN_CACHE = "cache"
ORIGIN_REMOTE = "remote"


@dataclasses.dataclass(frozen=True)
class Template:
    name: str
    body: str
    origin: str

    @property
    def lines(self) -> list[Line]:
        return tokenize(self.body)


# ── Built-in catalog ─────────────────────────────────────────────────


@functools.cache
def _builtin_templates() -> dict[str, str]:
    data = yaml.safe_load(BUILTIN_CATALOG.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not isinstance(data.get("templates"), dict):
        raise TypeError(f"{BUILTIN_CATALOG.name} must contain a 'templates' mapping.")
    return {str(k): str(v) for k, v in data["templates"].items()}


def builtin_names() -> list[str]:
    """Built-in template names in catalog order."""
    return list(_builtin_templates())


def get_builtin(name: str) -> str | None:
    """Case-insensitive lookup of a built-in template body."""
    wanted = name.casefold()
    for key, body in _builtin_templates().items():
        if key.casefold() == wanted:
            return body
    return None


# ── Local templates ──────────────────────────────────────────────────


def local_template_path(templates_dir: Path, name: str) -> Path:
    """``<templates_dir>/<name>.gitignore`` (suffix not doubled)."""
    filename = name if name.endswith(TEMPLATE_SUFFIX) else name + TEMPLATE_SUFFIX
    return templates_dir / filename


def list_local(templates_dir: Path) -> list[str]:
    """Names of the custom templates in *templates_dir*, sorted."""
    if not templates_dir.is_dir():
        return []
    return sorted(
        p.name[: -len(TEMPLATE_SUFFIX)]
        for p in templates_dir.iterdir()
        if p.is_file() and p.name.endswith(TEMPLATE_SUFFIX)
    )


# ── Resolution ───────────────────────────────────────────────────────


class TemplateSource:
    """Resolve template names: local override, then built-in, then cache/remote.

    The cache/remote tier is only consulted when *remote* is given
    (``sync``).  With *remote_only* the first two tiers are skipped.
    """

    def __init__(
        self,
        templates_dir: Path,
        cache: TemplateCache | None = None,
        remote: RemoteSource | None = None,
        remote_only: bool = False,
    ) -> None:
        self.templates_dir = templates_dir
        self.cache = cache
        self.remote = remote
        self.remote_only = remote_only

    def resolve(self, name: str) -> Template | None:
        if not self.remote_only:
            path = local_template_path(self.templates_dir, name)
            if path.is_file():
                return Template(name, path.read_text(encoding="utf-8", errors="replace"), ORIGIN_LOCAL)

            body = get_builtin(name)
            if body is not None:
                return Template(name, body, ORIGIN_BUILTIN)

        if self.remote is None:
            return None

        if self.cache is not None:
            try:
                cached = self.cache.get(name)
            except CacheError as exc:
                logger.warning(str(exc))
                cached = None
            if cached is not None:
                return Template(name, cached, ORIGIN_CACHE)

        try:
            body = self.remote.fetch(name)
        except NetworkError as exc:
            logger.warning(str(exc))
            return None

        if self.cache is not None:
            try:
                self.cache.put(name, body)
            except CacheError as exc:
                logger.warning(str(exc))
        return Template(name, body, ORIGIN_REMOTE)
