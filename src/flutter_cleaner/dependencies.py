"""Which package versions are in use across registered projects."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from flutter_cleaner.manifest import (
    LOCKFILE_FILENAME,
    MANIFEST_FILENAME,
    read_lockfile,
    read_manifest,
)
from flutter_cleaner.models import GlobalUsedIndex, PackageIdentity, ProjectDependencySet

logger = logging.getLogger(__name__)


def build_for_project(project_path: Path) -> Optional[ProjectDependencySet]:
    """
    Collect the packages one project uses.

    Every package in the lockfile is used; it is direct when the manifest
    names it under dependencies or dev_dependencies. A project without a
    lockfile is still valid and simply uses nothing yet.

    Args:
        project_path: Project root containing pubspec.yaml

    Returns:
        ProjectDependencySet, or None if there is no readable manifest
    """
    project_path = Path(project_path)
    manifest = read_manifest(project_path / MANIFEST_FILENAME)
    if manifest is None:
        return None

    all_packages: set[PackageIdentity] = set()
    direct_packages: set[PackageIdentity] = set()

    lock = read_lockfile(project_path / LOCKFILE_FILENAME)
    if lock is not None:
        for name, info in lock.packages.items():
            identity = PackageIdentity(name=name, version=info.version)
            all_packages.add(identity)
            if manifest.declares(name):
                direct_packages.add(identity)

    return ProjectDependencySet(
        project_path=project_path,
        project_name=manifest.project_name or project_path.name,
        all_packages=all_packages,
        direct_packages=direct_packages,
    )


def build_global_index(project_paths: Iterable[Path]) -> GlobalUsedIndex:
    """
    Union the used packages of every project.

    Projects without a readable manifest are skipped with a warning. The
    index is complete only once every project has been read, so callers
    must finish this before scanning any cache store.

    Args:
        project_paths: Registered project roots

    Returns:
        GlobalUsedIndex over all readable projects
    """
    projects: list[ProjectDependencySet] = []
    packages: set[PackageIdentity] = set()

    for project_path in project_paths:
        deps = build_for_project(Path(project_path))
        if deps is None:
            logger.warning("Skipping %s: no readable %s", project_path, MANIFEST_FILENAME)
            continue
        projects.append(deps)
        packages |= deps.all_packages

    logger.debug(
        "Collected %d package versions from %d projects", len(packages), len(projects)
    )
    return GlobalUsedIndex.from_packages(packages, projects)


def deep_clean_index(
    project_paths: list[Path],
    fallback_project: Optional[Path] = None,
) -> GlobalUsedIndex:
    """
    Build the index used for a deep clean.

    Args:
        project_paths: Enabled projects from configuration
        fallback_project: Project to use alone when none are configured

    Returns:
        GlobalUsedIndex (empty if nothing could be read)
    """
    if project_paths:
        return build_global_index(project_paths)

    if fallback_project is not None:
        logger.warning(
            "No enabled projects configured; only %s dependencies will be kept",
            fallback_project,
        )
        return build_global_index([fallback_project])

    return GlobalUsedIndex()
