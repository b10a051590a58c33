"""Filesystem measurement for flutter-cleaner."""

import os
from pathlib import Path

from flutter_cleaner.models import PathStat


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def get_directory_size(path: Path, max_depth: int = 64) -> tuple[int, int, int]:
    """
    Calculate the total size of a directory.

    Walks with os.scandir and an explicit stack. Symlinks are not followed
    and entries that cannot be read are skipped.

    Args:
        path: Directory to measure
        max_depth: Maximum depth to descend

    Returns:
        Tuple of (total_bytes, file_count, dir_count)
    """
    total_size = 0
    file_count = 0
    dir_count = 0
    stack: list[tuple[str, int]] = [(str(path), 0)]

    while stack:
        current, depth = stack.pop()
        if depth > max_depth:
            continue
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            dir_count += 1
                            stack.append((entry.path, depth + 1))
                        elif entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                            file_count += 1
                    except OSError:
                        continue
        except OSError:
            continue

    return total_size, file_count, dir_count


def path_size(path: Path) -> int:
    """Size in bytes of a file or directory, 0 if it does not exist."""
    try:
        if path.is_symlink() or path.is_file():
            return path.lstat().st_size
        if path.is_dir():
            size, _, _ = get_directory_size(path)
            return size
    except OSError:
        return 0
    return 0


def get_path_stats(paths: list[Path]) -> list[PathStat]:
    """
    Measure every existing path.

    Args:
        paths: Paths to measure; missing ones are left out

    Returns:
        One PathStat per existing path, in input order
    """
    stats = []
    for path in paths:
        if not os.path.lexists(path):
            continue
        stats.append(
            PathStat(
                path=path,
                size_bytes=path_size(path),
                is_dir=path.is_dir() and not path.is_symlink(),
            )
        )
    return stats
