"""Path-segment helpers for version partitions and target containment.

A version partition is a directory whose name contains ``@`` (``@v1``,
``@2024-01``). Everything here works on path segments rather than raw
strings so separators never leak into the comparisons.
"""

from pathlib import Path

VERSION_MARKER = "@"


def is_version_segment(segment: str) -> bool:
    return VERSION_MARKER in segment


def split_at_version(path: Path) -> Path | None:
    """Return the part of ``path`` before its first version segment.

    Returns None when the path has no version segment. A path that starts
    with a version segment yields ``Path()``.
    """
    parts = path.parts
    for index, segment in enumerate(parts):
        if is_version_segment(segment):
            return Path(*parts[:index])
    return None


def is_root_folder(folder: Path, root_path: Path) -> bool:
    """True if ``folder`` is the repository root itself."""
    return folder == Path() or folder == root_path


def is_nested_in(path: Path, parent: Path) -> bool:
    """True if ``path`` lies strictly inside ``parent``."""
    return path != parent and parent in path.parents


def versions_folder(path: Path, root_path: Path | None = None) -> Path | None:
    """Like split_at_version, but only segments below ``root_path`` count.

    A checkout living under a directory such as ``ws@2`` is not a version
    partition. Paths outside ``root_path`` are split as a whole.
    """
    if root_path is not None and (path == root_path or is_nested_in(path, root_path)):
        relative = split_at_version(path.relative_to(root_path))
        return None if relative is None else root_path / relative
    return split_at_version(path)
