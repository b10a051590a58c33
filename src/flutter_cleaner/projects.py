"""Flutter project detection and per-project build artifact paths."""

import logging
import os
import re
from pathlib import Path
from typing import Callable, Generator, Optional

from flutter_cleaner.cleaner import delete_candidates
from flutter_cleaner.config import CleanOptions
from flutter_cleaner.manifest import MANIFEST_FILENAME
from flutter_cleaner.models import CleanLevel, CleanupResult, PathStat, Platform, ProjectInfo
from flutter_cleaner.scanner import get_path_stats

logger = logging.getLogger(__name__)

# Directories never searched for projects
SKIP_DIRECTORIES = frozenset({"node_modules", "build", "Pods"})

_NAME_LINE = re.compile(r"^name:\s*(.+)$", re.MULTILINE)

# (relative path, clean level it first appears in, option that enables it)
PROJECT_CACHE_TABLE: dict[Platform, list[tuple[str, CleanLevel, str]]] = {
    Platform.FLUTTER: [
        ("build", CleanLevel.FAST, "build"),
        (".dart_tool", CleanLevel.STANDARD, "dart_tool"),
        (".flutter-plugins", CleanLevel.STANDARD, "plugin_files"),
        (".flutter-plugins-dependencies", CleanLevel.STANDARD, "plugin_files"),
        (".packages", CleanLevel.STANDARD, "plugin_files"),
    ],
    Platform.ANDROID: [
        ("android/build", CleanLevel.FAST, "build"),
        ("android/app/build", CleanLevel.FAST, "build"),
        ("android/.gradle", CleanLevel.STANDARD, "gradle"),
        ("android/.idea", CleanLevel.STANDARD, "idea"),
    ],
    Platform.IOS: [
        ("ios/build", CleanLevel.FAST, "build"),
        ("ios/Pods", CleanLevel.STANDARD, "pods"),
        ("ios/.symlinks", CleanLevel.STANDARD, "symlinks"),
        ("ios/Flutter/Flutter.framework", CleanLevel.STANDARD, "frameworks"),
        ("ios/Flutter/App.framework", CleanLevel.STANDARD, "frameworks"),
    ],
}


def is_project_root(path: Path) -> bool:
    """A Flutter project root holds a pubspec.yaml."""
    return (Path(path) / MANIFEST_FILENAME).is_file()


def _any_exists(directory: Path, *names: str) -> bool:
    return any((directory / name).exists() for name in names)


def has_platform(path: Path, platform: Platform) -> bool:
    """
    Check whether a project carries a platform subproject.

    Android needs both a build script and a settings script (Groovy or
    Kotlin DSL); iOS needs the Runner's Info.plist.
    """
    path = Path(path)
    if platform == Platform.FLUTTER:
        return is_project_root(path)
    if platform == Platform.ANDROID:
        android = path / "android"
        return _any_exists(android, "build.gradle", "build.gradle.kts") and _any_exists(
            android, "settings.gradle", "settings.gradle.kts"
        )
    if platform == Platform.IOS:
        return (path / "ios" / "Runner" / "Info.plist").is_file()
    return False


def get_project_name(path: Path) -> str:
    """Name from the manifest, or the directory name if it has none."""
    path = Path(path)
    try:
        match = _NAME_LINE.search((path / MANIFEST_FILENAME).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError):
        match = None
    if match:
        return match.group(1).strip()
    return path.resolve().name


def detect_project(path: Path) -> Optional[ProjectInfo]:
    """Describe the project at ``path``, or None if it is not one."""
    path = Path(path)
    if not is_project_root(path):
        return None
    return ProjectInfo(
        path=path.resolve(),
        name=get_project_name(path),
        has_android=has_platform(path, Platform.ANDROID),
        has_ios=has_platform(path, Platform.IOS),
    )


def find_projects(root: Path, max_depth: int = 3) -> Generator[ProjectInfo, None, None]:
    """
    Find Flutter projects under ``root``.

    Does not look inside a project once found, and skips hidden and
    dependency directories.

    Args:
        root: Directory to start searching from
        max_depth: Maximum depth below root to search

    Yields:
        ProjectInfo for each project found
    """
    project = detect_project(root)
    if project is not None:
        yield project
        return

    if max_depth <= 0:
        return

    try:
        with os.scandir(root) as entries:
            subdirs = sorted(
                Path(entry.path)
                for entry in entries
                if entry.is_dir(follow_symlinks=False)
                and not entry.name.startswith(".")
                and entry.name not in SKIP_DIRECTORIES
            )
    except OSError:
        return

    for subdir in subdirs:
        yield from find_projects(subdir, max_depth - 1)


def project_cache_paths(project_root: Path, platform: Platform, level: CleanLevel) -> list[Path]:
    """
    Known build artifact paths of one platform at a clean level.

    FAST is a subset of STANDARD. Paths are returned whether or not they exist.
    """
    project_root = Path(project_root)
    return [
        project_root / relative
        for relative, min_level, _ in PROJECT_CACHE_TABLE[platform]
        if level == CleanLevel.STANDARD or min_level == CleanLevel.FAST
    ]


def project_clean_paths(
    project_root: Path,
    platform: Platform,
    level: CleanLevel,
    options: Optional[CleanOptions] = None,
) -> list[Path]:
    """Artifact paths of one platform, filtered by the configured toggles."""
    options = options or CleanOptions()
    platform_options = getattr(options, platform.value)
    project_root = Path(project_root)
    return [
        project_root / relative
        for relative, min_level, option in PROJECT_CACHE_TABLE[platform]
        if (level == CleanLevel.STANDARD or min_level == CleanLevel.FAST)
        and getattr(platform_options, option)
    ]


def project_platforms(project_root: Path) -> list[Platform]:
    """Platforms present in a project, Flutter first."""
    return [p for p in Platform if has_platform(project_root, p)]


def preview_project(
    project_root: Path,
    level: CleanLevel = CleanLevel.STANDARD,
    options: Optional[CleanOptions] = None,
) -> dict[Platform, list[PathStat]]:
    """Existing artifact paths and their sizes, per platform. No deletion."""
    project_root = Path(project_root).resolve()
    preview: dict[Platform, list[PathStat]] = {}
    for platform in project_platforms(project_root):
        stats = get_path_stats(project_clean_paths(project_root, platform, level, options))
        if stats:
            preview[platform] = stats
    return preview


def clean_project(
    project_root: Path,
    level: CleanLevel = CleanLevel.STANDARD,
    options: Optional[CleanOptions] = None,
    dry_run: bool = False,
    progress_callback: Callable[[Platform, CleanupResult], None] | None = None,
) -> dict[Platform, CleanupResult]:
    """
    Remove a project's build artifacts, one batch per platform.

    Args:
        project_root: Project to clean
        level: FAST or STANDARD
        options: Per-platform toggles
        dry_run: If True, don't actually delete
        progress_callback: Optional callback(platform, result) after each platform

    Returns:
        CleanupResult per platform that had something to clean
    """
    project_root = Path(project_root).resolve()
    results: dict[Platform, CleanupResult] = {}

    for platform in project_platforms(project_root):
        stats = get_path_stats(project_clean_paths(project_root, platform, level, options))
        if not stats:
            logger.debug("No %s artifacts in %s", platform.label, project_root)
            continue

        result = delete_candidates(
            platform.value,
            [s.path for s in stats],
            dry_run=dry_run,
            estimated_sizes={s.path: s.size_bytes for s in stats},
        )
        results[platform] = result

        if progress_callback:
            progress_callback(platform, result)

    return results
