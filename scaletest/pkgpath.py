"""Locate the on-disk directory that belongs to an object's module."""

from __future__ import annotations

from pathlib import Path
from typing import Any

_PROJECT_MARKER = "pyproject.toml"


def _project_root(start: Path) -> Path:
    for candidate in (start, *start.parents):
        if (candidate / _PROJECT_MARKER).exists():
            return candidate
    return start


def get_package_path(obj: Any) -> Path:
    """Return the project directory that mirrors the module defining obj's type.

    The project root is the nearest directory above the working directory that
    holds a pyproject.toml, or the working directory itself. Objects whose type
    has no importable module (built-ins, __main__) map to the working directory.
    """
    cwd = Path.cwd()
    module = type(obj).__module__ or ""
    if module in ("", "builtins", "__main__"):
        return cwd
    return _project_root(cwd).joinpath(*module.split("."))