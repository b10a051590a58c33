"""Shared fixtures for flutter-cleaner tests."""

from pathlib import Path

import pytest

APP_MANIFEST = """\
name: app
dependencies:
  http: ^0.13.0
dev_dependencies:
  lint: ^2.0.0
"""

APP_LOCKFILE = """\
packages:
  args:
    dependency: transitive
    description:
      name: args
      url: "https://pub.dev"
    source: hosted
    version: "2.3.0"
  http:
    dependency: "direct main"
    description:
      name: http
      url: "https://pub.dev"
    source: hosted
    version: "0.13.0"
sdks:
  dart: ">=3.0.0 <4.0.0"
"""


def lockfile_text(packages: dict[str, tuple[str, str]]) -> str:
    """Build pubspec.lock content from {name: (version, dependency)}."""
    lines = ["packages:"]
    for name, (version, dependency) in packages.items():
        lines += [
            f"  {name}:",
            f'    dependency: "{dependency}"',
            "    source: hosted",
            f'    version: "{version}"',
        ]
    return "\n".join(lines) + "\n"


def write_project(
    root: Path,
    manifest: str,
    lockfile: str | None = None,
    android: bool = False,
    ios: bool = False,
) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "pubspec.yaml").write_text(manifest)
    if lockfile is not None:
        (root / "pubspec.lock").write_text(lockfile)
    if android:
        (root / "android").mkdir(exist_ok=True)
        (root / "android" / "build.gradle").write_text("")
        (root / "android" / "settings.gradle").write_text("")
    if ios:
        runner = root / "ios" / "Runner"
        runner.mkdir(parents=True, exist_ok=True)
        (runner / "Info.plist").write_text("<plist/>")
    return root


def write_file(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture
def app_project(tmp_path):
    """The sample app with one direct and one transitive package locked."""
    return write_project(tmp_path / "app", APP_MANIFEST, APP_LOCKFILE)


@pytest.fixture
def pub_cache(tmp_path):
    """A pub cache with one used and one unused hosted package."""
    root = tmp_path / "pub-cache"
    write_file(root / "hosted" / "http" / "0.13.0" / "lib" / "http.dart", 100)
    write_file(root / "hosted" / "unused_pkg" / "1.0.0" / "lib" / "unused.dart", 50)
    return root


@pytest.fixture
def gradle_cache(tmp_path):
    root = tmp_path / "gradle-caches"
    write_file(root / "modules-2" / "files-2.1" / "com.example" / "a.jar", 10)
    write_file(root / "modules-2" / "metadata-2.97" / "descriptor.bin", 20)
    write_file(root / "jars" / "stale.jar", 30)
    return root
