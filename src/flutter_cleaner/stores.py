"""Where each global cache store lives on this machine."""

import os
import sys
from pathlib import Path

from flutter_cleaner.exceptions import UnsupportedPlatformError
from flutter_cleaner.models import StoreKind


def _home() -> Path:
    return Path.home()


def is_windows() -> bool:
    return sys.platform.startswith("win")


def is_macos() -> bool:
    return sys.platform == "darwin"


def gradle_cache_path() -> Path:
    """Gradle's global cache (same layout on every OS)."""
    return _home() / ".gradle" / "caches"


def pub_cache_path() -> Path:
    """Pub's global package cache. Honours PUB_CACHE when set."""
    override = os.environ.get("PUB_CACHE")
    if override:
        return Path(override)
    if is_windows():
        return Path(os.environ.get("APPDATA", "")) / "Pub" / "Cache"
    return _home() / ".pub-cache"


def cocoapods_cache_path() -> Path:
    """
    CocoaPods' download cache.

    Raises:
        UnsupportedPlatformError: when not running on macOS
    """
    if not is_macos():
        raise UnsupportedPlatformError(StoreKind.COCOAPODS.label, "macOS")
    return _home() / "Library" / "Caches" / "CocoaPods"


STORE_PATH_RESOLVERS = {
    StoreKind.GRADLE: gradle_cache_path,
    StoreKind.PUB: pub_cache_path,
    StoreKind.COCOAPODS: cocoapods_cache_path,
}


def store_root(kind: StoreKind) -> Path:
    """Resolve the root directory of a store on the current host."""
    return STORE_PATH_RESOLVERS[kind]()
