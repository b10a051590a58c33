"""Deletion with safety checks for flutter-cleaner."""

import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from flutter_cleaner.models import CleanupResult, DeletionError, StoreState
from flutter_cleaner.scanner import expand_path, path_size

logger = logging.getLogger(__name__)

# Paths that should NEVER be deleted
BLOCKED_PATHS = [
    "/",
    "~",
    "~/Documents",
    "~/Desktop",
    "~/Downloads",
    "~/Library",
    "~/.gradle",
    "~/.pub-cache",
    "/System",
    "/Library",
    "/Applications",
    "/usr",
    "/bin",
    "/sbin",
    "/etc",
    "/var",
    "/private",
    "/Users",
    "/home",
]

# Failure messages that mean the path is already gone or not ours to remove
WARNING_MARKERS = ("does not exist", "no such file", "permission")


class FailureKind(str, Enum):
    """How a failed deletion counts against the run."""

    WARNING = "warning"
    ERROR = "error"


def is_path_safe(path: Path) -> bool:
    """
    Check if a path is safe to delete.

    Args:
        path: Path to check

    Returns:
        True if safe to delete, False otherwise
    """
    if not path.is_absolute():
        return False

    normalized = os.path.normpath(str(path))
    for blocked in BLOCKED_PATHS:
        if normalized == os.path.normpath(str(expand_path(blocked))):
            return False

    return normalized != os.path.normpath(str(Path.home()))


def classify_failure(error: BaseException) -> FailureKind:
    """
    Decide whether a deletion failure is a warning or an error.

    Paths that vanished between scan and delete, and paths we lack
    permission for, are warnings. Anything else is an error.
    """
    if isinstance(error, (FileNotFoundError, PermissionError)):
        return FailureKind.WARNING
    message = str(error).lower()
    if any(marker in message for marker in WARNING_MARKERS):
        return FailureKind.WARNING
    return FailureKind.ERROR


def remove_path(path: Path) -> None:
    """
    Remove a file, symlink or directory tree.

    Raises:
        OSError: if the path cannot be removed (including when it is missing)
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def delete_path(path: Path, dry_run: bool = False) -> int:
    """
    Delete a path (file or directory).

    Size is measured immediately before deletion.

    Args:
        path: Path to delete
        dry_run: If True, measure but don't delete

    Returns:
        Bytes freed (or that would be freed)

    Raises:
        OSError: if the deletion fails
    """
    size = path_size(path)
    if not dry_run:
        remove_path(path)
    return size


def delete_candidates(
    name: str,
    paths: list[Path],
    dry_run: bool = False,
    estimated_sizes: Optional[dict[Path, int]] = None,
    progress_callback: Callable[[Path, int], None] | None = None,
) -> CleanupResult:
    """
    Delete every candidate, recording each outcome independently.

    A failure never stops the batch. Warnings (already gone, permission
    denied) leave ``success`` untouched; any other failure clears it.
    In a dry run nothing is touched and every candidate is reported as
    deleted with its estimated size.

    Args:
        name: Store or platform name for the result
        paths: Candidates, processed in order
        dry_run: If True, don't actually delete
        estimated_sizes: Pre-scan sizes, used for dry-run accounting
        progress_callback: Optional callback(path, bytes_freed)

    Returns:
        CleanupResult for the batch
    """
    estimated_sizes = estimated_sizes or {}
    result = CleanupResult(name=name, state=StoreState.EXECUTING, dry_run=dry_run)

    for path in paths:
        if not is_path_safe(path):
            logger.error("Refusing to delete blocked path %s", path)
            result.errors.append(DeletionError(path=path, message="Blocked path"))
            result.success = False
            continue

        if dry_run:
            size = estimated_sizes.get(path)
            if size is None:
                size = path_size(path)
            result.deleted_paths.append(path)
            result.freed_bytes += size
            continue

        try:
            size = delete_path(path)
        except OSError as e:
            if classify_failure(e) == FailureKind.WARNING:
                logger.warning("Skipped %s: %s", path, e)
                result.warnings.append(path)
            else:
                logger.error("Failed to delete %s: %s", path, e)
                result.errors.append(DeletionError(path=path, message=str(e)))
                result.success = False
            continue

        result.deleted_paths.append(path)
        result.freed_bytes += size
        logger.debug("Deleted %s (%d bytes)", path, size)

        if progress_callback:
            progress_callback(path, size)

    result.state = StoreState.DONE
    return result
