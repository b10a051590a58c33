"""Find cache entries that no registered project uses.

Each store has its own layout, so each gets its own strategy:

* Gradle: ``modules-2/<module>/`` is kept when the module directory name
  fuzzily matches a used package name. Everything under ``jars/`` is
  always a candidate because jar cache entries cannot be traced back to a
  package.
* Pub: ``hosted/<name>/<version>/`` is kept when ``name:version`` or the
  bare ``name`` is used. ``git/<repo>/<commit>/`` is kept when
  ``git_<repo>#<commit>`` fuzzily matches a used package name.
* CocoaPods: the whole cache is one opaque entry.

A store whose root does not exist has nothing to clean.
"""

import logging
import re
from pathlib import Path
from typing import Callable, Iterator, Optional

from flutter_cleaner.models import CacheEntry, GlobalUsedIndex, PackageIdentity, StoreKind
from flutter_cleaner.stores import store_root

logger = logging.getLogger(__name__)

GRADLE_MODULES_DIR = "modules-2"
GRADLE_JARS_DIR = "jars"
PUB_HOSTED_DIR = "hosted"
PUB_GIT_DIR = "git"

_WHITESPACE = re.compile(r"\s+")


def _sorted_children(path: Path, dirs_only: bool = True) -> Iterator[Path]:
    """Children of path in name order; nothing if it cannot be listed."""
    try:
        children = sorted(path.iterdir(), key=lambda p: p.name)
    except (FileNotFoundError, NotADirectoryError):
        return
    except PermissionError as e:
        logger.warning("Cannot list %s: %s", path, e)
        return
    for child in children:
        if dirs_only and (child.is_symlink() or not child.is_dir()):
            continue
        yield child


def git_dependency_key(repo: str, commit: str) -> str:
    """Key a git-sourced pub dependency is matched by."""
    return _WHITESPACE.sub("_", f"git {repo}#{commit}")


def find_unused_gradle_entries(root: Path, index: GlobalUsedIndex) -> list[CacheEntry]:
    """Unused entries of a Gradle cache rooted at ``root``."""
    entries: list[CacheEntry] = []

    for module in _sorted_children(root / GRADLE_MODULES_DIR):
        if index.is_package_used(module.name):
            continue
        entries.append(CacheEntry(store=StoreKind.GRADLE, path=module, raw_key=module.name))

    for jar in _sorted_children(root / GRADLE_JARS_DIR, dirs_only=False):
        entries.append(CacheEntry(store=StoreKind.GRADLE, path=jar, raw_key=jar.name))

    return entries


def find_unused_pub_entries(root: Path, index: GlobalUsedIndex) -> list[CacheEntry]:
    """Unused entries of a pub cache rooted at ``root``."""
    entries: list[CacheEntry] = []
    used_keys = index.used_keys

    for package_dir in _sorted_children(root / PUB_HOSTED_DIR):
        name = package_dir.name
        for version_dir in _sorted_children(package_dir):
            identity = PackageIdentity(name=name, version=version_dir.name)
            if identity.key in used_keys or name in index.used_names:
                continue
            entries.append(CacheEntry(store=StoreKind.PUB, path=version_dir, identity=identity))

    for repo_dir in _sorted_children(root / PUB_GIT_DIR):
        for commit_dir in _sorted_children(repo_dir):
            key = git_dependency_key(repo_dir.name, commit_dir.name)
            if index.is_package_used(key):
                continue
            entries.append(CacheEntry(store=StoreKind.PUB, path=commit_dir, raw_key=key))

    return entries


def find_unused_cocoapods_entries(root: Path, index: GlobalUsedIndex) -> list[CacheEntry]:
    """The CocoaPods cache is removed as a whole or not at all."""
    return [CacheEntry(store=StoreKind.COCOAPODS, path=root, raw_key=root.name)]


STORE_STRATEGIES: dict[StoreKind, Callable[[Path, GlobalUsedIndex], list[CacheEntry]]] = {
    StoreKind.GRADLE: find_unused_gradle_entries,
    StoreKind.PUB: find_unused_pub_entries,
    StoreKind.COCOAPODS: find_unused_cocoapods_entries,
}


def find_unused_entries(
    store: StoreKind,
    index: GlobalUsedIndex,
    root: Optional[Path] = None,
) -> list[CacheEntry]:
    """
    List the entries of a store that no registered project uses.

    Reads the filesystem on every call; nothing is cached between calls.

    Args:
        store: Which cache store to scan
        index: Packages in use across all registered projects
        root: Store root; resolved for the current host when omitted

    Returns:
        Deletion candidates, in path order

    Raises:
        UnsupportedPlatformError: if the store does not exist on this host
    """
    if root is None:
        root = store_root(store)

    if not root.is_dir():
        logger.debug("%s cache not found at %s", store.label, root)
        return []

    entries = STORE_STRATEGIES[store](root, index)
    logger.debug("%s: %d unused entries under %s", store.label, len(entries), root)
    return entries
