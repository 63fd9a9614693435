"""Project-type detection from marker files in the workspace."""

from __future__ import annotations

import platform
from pathlib import Path

# (marker, template) in priority order.  Markers containing '*' are globs.
INDICATORS: list[tuple[str, str]] = [
    ("package.json", "node"),
    ("tsconfig.json", "typescript"),
    ("requirements.txt", "python"),
    ("setup.py", "python"),
    ("pyproject.toml", "python"),
    ("Pipfile", "python"),
    ("Cargo.toml", "rust"),
    ("go.mod", "go"),
    ("pom.xml", "java"),
    ("build.gradle", "java"),
    ("Gemfile", "ruby"),
    ("composer.json", "php"),
    ("Package.swift", "swift"),
    ("*.csproj", "visualstudio"),
    (".vscode", "vscode"),
    (".idea", "intellij"),
    ("CMakeLists.txt", "c"),
    ("Makefile", "c"),
]

_OS_TEMPLATES = {
    "Darwin": "macos",
    "Linux": "linux",
    "Windows": "windows",
}


def os_template(system: str | None = None) -> str | None:
    """Template name for the host OS (or *system*), if there is one."""
    return _OS_TEMPLATES.get(system if system is not None else platform.system())


def _marker_present(root: Path, marker: str) -> bool:
    if "*" in marker:
        return any(root.glob(marker))
    return (root / marker).exists()


def detect_project_types(root: Path, system: str | None = None) -> list[str]:
    """Templates suggested by markers under *root*, plus the OS template."""
    found: list[str] = []
    for marker, template in INDICATORS:
        if template not in found and _marker_present(root, marker):
            found.append(template)

    os_name = os_template(system)
    if os_name and os_name not in found:
        found.append(os_name)
    return found
