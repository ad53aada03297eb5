"""Filesystem probing shared by the import resolvers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path


def is_relative_specifier(spec: str) -> bool:
    return spec.startswith(("./", "../")) or spec in (".", "..")


def normalize_path(path: str) -> str:
    """Collapse ``.`` and ``..`` segments of a slash-separated path.

    >>> normalize_path('src/utils/../models/user')
    'src/models/user'
    >>> normalize_path('src/./utils')
    'src/utils'
    """
    parts: list[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if segment == "." or segment == "":
            continue
        elif segment == "..":
            if parts:
                parts.pop()
        else:
            parts.append(segment)
    return "/".join(parts)


def first_file(candidates: Iterable[Path]) -> Path | None:
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def resolve_segments(
    base: Path,
    segments: Sequence[str],
    *,
    extensions: Sequence[str],
    index_files: Sequence[str],
) -> Path | None:
    """Walk module path segments from ``base`` down to a source file.

    Intermediate segments descend into directories when they exist and
    otherwise stop at a matching file, whose trailing segments name items
    inside it.  The final segment is tried as a file, then as a directory
    holding an index file.  A final segment that matches neither names an
    item of the enclosing package, whose module file (index file, or the
    file beside the directory) is returned.
    """
    current = base
    for i, segment in enumerate(segments):
        last = i == len(segments) - 1
        directory = current / segment
        if not last and directory.is_dir():
            current = directory
            continue
        found = first_file(current / f"{segment}{ext}" for ext in extensions)
        if found is not None:
            return found
        if directory.is_dir():
            return first_file(directory / name for name in index_files)
        if last and i > 0:
            return package_file(current, extensions=extensions, index_files=index_files)
        return None
    return None


def package_file(directory: Path, *, extensions: Sequence[str], index_files: Sequence[str]) -> Path | None:
    """Module file of a package directory: its index file or ``<dir><ext>`` beside it."""
    found = first_file(directory / name for name in index_files)
    if found is None:
        found = first_file(directory.parent / f"{directory.name}{ext}" for ext in extensions)
    return found
