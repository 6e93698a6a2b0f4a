"""Allow-list enforcement for requested paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from vectorsearch.errors import AccessDenied


def canonical_dir(directory: str | Path) -> Path:
    """Expand `~` and resolve symlinks for an allowed directory."""
    return Path(os.path.realpath(os.path.expanduser(str(directory))))


def _is_within(path: str, base: Path) -> bool:
    # Trailing separator so /home/user does not admit /home/user2.
    return (path + os.sep).startswith(str(base).rstrip(os.sep) + os.sep)


class PathValidator:
    """Resolve requested paths and reject anything outside the allowed directories."""

    def __init__(self, allowed_dirs: Iterable[str | Path]) -> None:
        dirs = list(allowed_dirs)
        self.allowed_dirs: List[Path] = [canonical_dir(d) for d in dirs]
        # As typed, before symlink resolution.
        self._requested_dirs = [Path(os.path.abspath(os.path.expanduser(str(d)))) for d in dirs]

    def is_allowed(self, path: str) -> bool:
        """Check a canonical path against the resolved allowed directories."""
        return any(_is_within(path, base) for base in self.allowed_dirs)

    def _is_requested_allowed(self, path: str) -> bool:
        bases = self._requested_dirs + self.allowed_dirs
        return any(_is_within(path, base) for base in bases)

    def validate(self, requested: str | Path) -> Path:
        """Return the canonical path for `requested` or raise `AccessDenied`."""
        raw = str(requested).strip()
        if not raw:
            raise ValueError("No path provided")
        if "\0" in raw:
            raise ValueError("Invalid path: contains null byte")

        absolute = os.path.abspath(os.path.expanduser(raw))
        if not self._is_requested_allowed(absolute):
            allowed = ", ".join(str(d) for d in self.allowed_dirs)
            raise AccessDenied(
                f"Access denied - path outside allowed directories: {absolute} not in {allowed}"
            )

        if os.path.exists(absolute):
            real_path = os.path.realpath(absolute)
            if not self.is_allowed(real_path):
                raise AccessDenied("Access denied - symlink target outside allowed directories")
            return Path(real_path)

        parent = os.path.dirname(absolute)
        if not os.path.isdir(parent):
            raise FileNotFoundError(f"Parent directory does not exist: {parent}")
        if not self.is_allowed(os.path.realpath(parent)):
            raise AccessDenied("Access denied - parent directory outside allowed directories")
        return Path(absolute)
