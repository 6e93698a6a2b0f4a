"""Utility helpers for enumerating files to index."""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, Sequence

DEFAULT_EXTENSIONS = (".txt", ".pdf")


def normalize_extensions(extensions: Iterable[str]) -> set[str]:
    """Lowercase extensions and make sure each carries a leading dot."""
    normalized = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        normalized.add(ext if ext.startswith(".") else f".{ext}")
    return normalized


def _match_segments(parts: Sequence[str], pattern_parts: Sequence[str]) -> bool:
    if not pattern_parts:
        return not parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_segments(parts[1:], rest)


def is_excluded(relative: PurePosixPath, pattern: str) -> bool:
    """Return True if `relative` matches an exclude pattern.

    A pattern without `*` names a directory to skip wherever it appears.
    Glob patterns match the relative path one segment at a time, so `*`
    never crosses a `/`; only `**` spans any number of directories,
    including none.
    """
    pattern = pattern.strip()
    if not pattern:
        return False

    if "*" not in pattern:
        needle = "/" + pattern.strip("/") + "/"
        haystack = "/" + relative.parent.as_posix() + "/"
        return needle in haystack

    pattern_parts = [part for part in pattern.split("/") if part]
    return _match_segments(relative.parts, pattern_parts)


def iter_document_paths(
    root: Path,
    *,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_patterns: Sequence[str] = (),
) -> Iterator[Path]:
    """Yield files under `root` with a wanted extension, skipping excluded ones.

    Hidden files and anything inside a hidden directory are skipped.
    """
    wanted = normalize_extensions(extensions)
    for path in sorted(root.rglob("*")):
        if not path.is_file() or path.suffix.lower() not in wanted:
            continue
        relative = PurePosixPath(path.relative_to(root).as_posix())
        if any(part.startswith(".") for part in relative.parts):
            continue
        if any(is_excluded(relative, pattern) for pattern in exclude_patterns):
            continue
        yield path
