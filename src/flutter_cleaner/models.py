"""Data models for flutter-cleaner."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StoreKind(str, Enum):
    """Global cache stores shared by every project on the machine."""

    GRADLE = "gradle"
    PUB = "pub"
    COCOAPODS = "cocoapods"

    @property
    def label(self) -> str:
        return {
            StoreKind.GRADLE: "Gradle",
            StoreKind.PUB: "Pub",
            StoreKind.COCOAPODS: "CocoaPods",
        }[self]


class Platform(str, Enum):
    """Subprojects of a Flutter project that carry their own build output."""

    FLUTTER = "flutter"
    ANDROID = "android"
    IOS = "ios"

    @property
    def label(self) -> str:
        return {
            Platform.FLUTTER: "Flutter",
            Platform.ANDROID: "Android",
            Platform.IOS: "iOS",
        }[self]


class CleanLevel(str, Enum):
    """How aggressively a single project is cleaned."""

    FAST = "fast"  # Build output only
    STANDARD = "standard"  # Build output plus tool caches


class DependencyRelationship(str, Enum):
    """How a locked package relates to the project that locked it."""

    DIRECT_MAIN = "direct-main"
    DIRECT_DEV = "direct-dev"
    TRANSITIVE = "transitive"

    @classmethod
    def from_lock_value(cls, value: str) -> "DependencyRelationship":
        """Map a raw ``dependency:`` value from pubspec.lock to a relationship."""
        normalized = value.strip().strip("\"'").lower()
        if normalized in ("direct main", "direct overridden"):
            return cls.DIRECT_MAIN
        if normalized == "direct dev":
            return cls.DIRECT_DEV
        return cls.TRANSITIVE


class PackageIdentity(BaseModel):
    """A package pinned at a specific version."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str

    @property
    def key(self) -> str:
        """Key used for set membership against cache entries (``name:version``)."""
        return f"{self.name}:{self.version}"

    @classmethod
    def parse(cls, key: str) -> "PackageIdentity":
        """Parse a ``name:version`` key. Only the first colon separates."""
        name, _, version = key.partition(":")
        return cls(name=name, version=version)

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


class ManifestRecord(BaseModel):
    """Declared dependencies of one project (pubspec.yaml)."""

    model_config = ConfigDict(frozen=True)

    project_name: str = ""
    declared_version: Optional[str] = None
    direct_deps: dict[str, str] = Field(default_factory=dict)
    direct_dev_deps: dict[str, str] = Field(default_factory=dict)

    def declares(self, name: str) -> bool:
        """True if ``name`` is a direct or dev dependency."""
        return name in self.direct_deps or name in self.direct_dev_deps


class LockedPackage(BaseModel):
    """One resolved entry of pubspec.lock. Values are kept verbatim."""

    version: str = ""
    source: str = ""
    dependency: str = ""
    description: Optional[str] = None

    @property
    def relationship(self) -> DependencyRelationship:
        return DependencyRelationship.from_lock_value(self.dependency)


class LockRecord(BaseModel):
    """Resolved dependency graph of one project (pubspec.lock)."""

    packages: dict[str, LockedPackage] = Field(default_factory=dict)


class ProjectDependencySet(BaseModel):
    """Packages one project uses, and which of those it names directly."""

    project_path: Path
    project_name: str
    all_packages: set[PackageIdentity] = Field(default_factory=set)
    direct_packages: set[PackageIdentity] = Field(default_factory=set)


class GlobalUsedIndex(BaseModel):
    """Union of every registered project's packages: the retention boundary."""

    all_packages: set[PackageIdentity] = Field(default_factory=set)
    used_names: set[str] = Field(default_factory=set)
    projects: list[ProjectDependencySet] = Field(default_factory=list)

    @classmethod
    def from_packages(
        cls,
        packages: set[PackageIdentity],
        projects: Optional[list[ProjectDependencySet]] = None,
    ) -> "GlobalUsedIndex":
        return cls(
            all_packages=set(packages),
            used_names={p.name for p in packages},
            projects=projects or [],
        )

    @property
    def used_keys(self) -> set[str]:
        return {p.key for p in self.all_packages}

    def is_package_used(self, name: str) -> bool:
        """
        Fuzzy check whether a cache entry name belongs to a used package.

        Matches exactly, or when either name contains the other. This keeps
        unrelated packages that share a substring; a retained entry costs
        disk space while a wrongly deleted one breaks another project's build.
        """
        if name in self.used_names:
            return True
        return any(name in used or used in name for used in self.used_names)


class CacheEntry(BaseModel):
    """One artifact found inside a global cache store."""

    store: StoreKind
    path: Path
    identity: Optional[PackageIdentity] = None
    raw_key: Optional[str] = None
    size_bytes: Optional[int] = None

    @property
    def display_key(self) -> str:
        if self.identity is not None:
            return self.identity.key
        return self.raw_key or self.path.name


class StoreState(str, Enum):
    """Lifecycle of one store's cleanup."""

    IDLE = "idle"
    SCANNING = "scanning"
    PLANNED = "planned"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    EXECUTING = "executing"
    DONE = "done"


class StorePlan(BaseModel):
    """Deletion candidates for one store."""

    store: StoreKind
    root: Optional[Path] = None
    entries: list[CacheEntry] = Field(default_factory=list)
    estimated_bytes: int = 0
    error: Optional[str] = Field(None, description="Why the store could not be scanned")

    @property
    def candidate_count(self) -> int:
        return len(self.entries)

    @property
    def candidate_paths(self) -> list[Path]:
        return [e.path for e in self.entries]


class CleanupPlan(BaseModel):
    """Proposed deletions across all enabled stores."""

    timestamp: datetime = Field(default_factory=datetime.now)
    stores: dict[StoreKind, StorePlan] = Field(default_factory=dict)

    @property
    def total_bytes(self) -> int:
        return sum(p.estimated_bytes for p in self.stores.values())

    @property
    def total_candidates(self) -> int:
        return sum(p.candidate_count for p in self.stores.values())


class DeletionError(BaseModel):
    """A path that could not be removed."""

    path: Path
    message: str


class CleanupResult(BaseModel):
    """Result of deleting one batch of paths (a store, or a project platform)."""

    name: str = Field(..., description="Store or platform that was cleaned")
    state: StoreState = StoreState.IDLE
    deleted_paths: list[Path] = Field(default_factory=list)
    freed_bytes: int = 0
    errors: list[DeletionError] = Field(default_factory=list)
    warnings: list[Path] = Field(default_factory=list)
    success: bool = True
    dry_run: bool = False
    unavailable: Optional[str] = Field(None, description="Capability error for this store")

    @property
    def has_issues(self) -> bool:
        return bool(self.errors or self.warnings)


class CleanupOutcome(str, Enum):
    """The three materially different endings of a run."""

    CLEAN = "clean"  # Everything planned was removed
    PARTIAL = "partial"  # Freed space, but some paths could not be removed
    ABORTED = "aborted"  # Cancelled before anything was deleted


class GlobalCleanupResult(BaseModel):
    """Aggregated result of a global cache cleanup."""

    stores: dict[StoreKind, CleanupResult] = Field(default_factory=dict)
    dry_run: bool = False
    cancelled: bool = False

    @property
    def freed_bytes(self) -> int:
        return sum(r.freed_bytes for r in self.stores.values())

    @property
    def deleted_paths(self) -> list[Path]:
        return [p for r in self.stores.values() for p in r.deleted_paths]

    @property
    def errors(self) -> list[DeletionError]:
        return [e for r in self.stores.values() for e in r.errors]

    @property
    def warnings(self) -> list[Path]:
        return [w for r in self.stores.values() for w in r.warnings]

    @property
    def success(self) -> bool:
        return all(r.success for r in self.stores.values())

    @property
    def outcome(self) -> CleanupOutcome:
        if self.cancelled:
            return CleanupOutcome.ABORTED
        if self.errors or self.warnings:
            return CleanupOutcome.PARTIAL
        return CleanupOutcome.CLEAN


class PathStat(BaseModel):
    """Size of one existing path."""

    path: Path
    size_bytes: int
    is_dir: bool


class ProjectInfo(BaseModel):
    """A detected Flutter project."""

    path: Path
    name: str
    has_android: bool = False
    has_ios: bool = False

    @property
    def manifest_path(self) -> Path:
        return self.path / "pubspec.yaml"

    @property
    def lockfile_path(self) -> Path:
        return self.path / "pubspec.lock"
