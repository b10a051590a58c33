"""Lenient line-oriented parsers for pubspec.yaml and pubspec.lock.

Neither parser validates. A line that does not have the expected shape is
skipped, so a half-edited manifest still yields whatever can be read from it.
"""

import logging
from pathlib import Path
from typing import Optional

from flutter_cleaner.models import LockedPackage, LockRecord, ManifestRecord

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "pubspec.yaml"
LOCKFILE_FILENAME = "pubspec.lock"

COMMENT_MARKER = "#"
DEPENDENCIES_HEADER = "dependencies:"
DEV_DEPENDENCIES_HEADER = "dev_dependencies:"
LOCK_PACKAGES_KEY = "packages"
LOCK_PACKAGE_INDENT = 2
LOCK_PROPERTY_KEYS = frozenset({"version", "source", "dependency", "description"})

_OTHER = "other"
_DEPS = "dependencies"
_DEV_DEPS = "dev_dependencies"


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _split_pair(text: str) -> tuple[str, str]:
    key, _, value = text.partition(":")
    return key.strip(), value.strip()


def parse_manifest(text: str) -> ManifestRecord:
    """
    Parse pubspec.yaml content.

    Dependencies written as a nested block (``flutter: {sdk: flutter}``,
    git or path dependencies) are recorded by name with an empty constraint.
    Only lines at the section's entry indentation are dependencies, so the
    block's own children (``sdk: flutter``, ``url: ...``) are deliberately
    not recorded, even though they contain a colon. A reader that took every
    colon line in the section would report ``sdk`` and ``url`` as packages.

    Args:
        text: Manifest file content

    Returns:
        ManifestRecord with whatever could be read
    """
    name = ""
    version: Optional[str] = None
    deps: dict[str, str] = {}
    dev_deps: dict[str, str] = {}

    section = _OTHER
    entry_indent: Optional[int] = None

    for line in text.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(COMMENT_MARKER):
            continue

        indent = _indent(line)

        if trimmed.startswith(DEV_DEPENDENCIES_HEADER):
            section, entry_indent = _DEV_DEPS, None
            continue
        if trimmed.startswith(DEPENDENCIES_HEADER):
            section, entry_indent = _DEPS, None
            continue

        if indent == 0:
            # Any other top-level key closes a dependency section
            section = _OTHER
            key, value = _split_pair(trimmed)
            if key == "name" and ":" in trimmed:
                name = value
            elif key == "version" and ":" in trimmed:
                version = value
            continue

        if section == _OTHER or ":" not in trimmed:
            continue

        if entry_indent is None:
            entry_indent = indent
        if indent != entry_indent:
            # Inside a nested dependency block
            continue

        key, value = _split_pair(trimmed)
        if not key:
            continue
        if section == _DEPS:
            deps[key] = value
        else:
            dev_deps[key] = value

    return ManifestRecord(
        project_name=name,
        declared_version=version,
        direct_deps=deps,
        direct_dev_deps=dev_deps,
    )


def parse_lockfile(text: str) -> LockRecord:
    """
    Parse pubspec.lock content.

    A package opens on a line indented exactly one level under the top-level
    ``packages:`` key; deeper lines are its properties. Property values are
    taken verbatim, quotes included.

    Args:
        text: Lockfile content

    Returns:
        LockRecord keyed by package name
    """
    packages: dict[str, LockedPackage] = {}
    top_level = ""
    current: Optional[str] = None

    for line in text.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(COMMENT_MARKER) or ":" not in trimmed:
            continue

        indent = _indent(line)
        key, value = _split_pair(trimmed)

        if indent == 0:
            top_level = key
            current = None
            continue

        if top_level != LOCK_PACKAGES_KEY:
            continue

        if indent == LOCK_PACKAGE_INDENT:
            current = key or None
            if current:
                packages[current] = LockedPackage()
            continue

        if current is None or indent < LOCK_PACKAGE_INDENT or key not in LOCK_PROPERTY_KEYS:
            continue

        package = packages[current]
        if key == "description":
            # A nested description block leaves the value empty
            if value:
                package.description = value
        else:
            setattr(package, key, value)

    return LockRecord(packages=packages)


def read_manifest(path: Path) -> Optional[ManifestRecord]:
    """
    Read and parse a manifest file.

    Args:
        path: Path to pubspec.yaml

    Returns:
        ManifestRecord, or None if the file is missing or unreadable
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No manifest at %s", path)
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return None
    return parse_manifest(text)


def read_lockfile(path: Path) -> Optional[LockRecord]:
    """
    Read and parse a lockfile.

    Args:
        path: Path to pubspec.lock

    Returns:
        LockRecord, or None if the file is missing or unreadable
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info("No lockfile at %s; project has unresolved dependencies", path)
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read %s: %s", path, e)
        return None
    return parse_lockfile(text)
