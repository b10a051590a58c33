"""Tests for data models."""

from pathlib import Path

from flutter_cleaner.models import (
    CacheEntry,
    CleanupOutcome,
    CleanupPlan,
    CleanupResult,
    DeletionError,
    DependencyRelationship,
    GlobalCleanupResult,
    GlobalUsedIndex,
    PackageIdentity,
    StoreKind,
    StorePlan,
)


class TestPackageIdentity:
    def test_key(self):
        assert PackageIdentity(name="http", version="0.13.0").key == "http:0.13.0"

    def test_parse_splits_on_first_colon(self):
        identity = PackageIdentity.parse("git_repo:abc:def")
        assert identity.name == "git_repo"
        assert identity.version == "abc:def"

    def test_hashable_and_equal(self):
        a = PackageIdentity(name="http", version="1.0.0")
        b = PackageIdentity(name="http", version="1.0.0")
        assert {a, b} == {a}

    def test_str(self):
        assert str(PackageIdentity(name="http", version="1.0.0")) == "http@1.0.0"


class TestDependencyRelationship:
    def test_direct_main(self):
        assert DependencyRelationship.from_lock_value('"direct main"') == DependencyRelationship.DIRECT_MAIN

    def test_overridden_counts_as_direct(self):
        assert DependencyRelationship.from_lock_value("direct overridden") == DependencyRelationship.DIRECT_MAIN

    def test_direct_dev(self):
        assert DependencyRelationship.from_lock_value("direct dev") == DependencyRelationship.DIRECT_DEV

    def test_anything_else_is_transitive(self):
        assert DependencyRelationship.from_lock_value("") == DependencyRelationship.TRANSITIVE


class TestGlobalUsedIndex:
    def index(self, *names):
        return GlobalUsedIndex.from_packages({PackageIdentity(name=n, version="1.0.0") for n in names})

    def test_exact_match(self):
        assert self.index("http").is_package_used("http")

    def test_name_inside_used_name(self):
        assert self.index("http_parser").is_package_used("http")

    def test_used_name_inside_name(self):
        assert self.index("http").is_package_used("com.squareup.okhttp3")

    def test_unrelated_name(self):
        assert not self.index("http").is_package_used("dio")

    def test_empty_index_uses_nothing(self):
        assert not GlobalUsedIndex().is_package_used("http")

    def test_used_keys(self):
        assert self.index("http").used_keys == {"http:1.0.0"}


class TestCacheEntry:
    def test_display_key_prefers_identity(self):
        entry = CacheEntry(
            store=StoreKind.PUB,
            path=Path("/c/hosted/http/1.0.0"),
            identity=PackageIdentity(name="http", version="1.0.0"),
        )
        assert entry.display_key == "http:1.0.0"

    def test_display_key_falls_back_to_path(self):
        entry = CacheEntry(store=StoreKind.GRADLE, path=Path("/c/jars/a.jar"))
        assert entry.display_key == "a.jar"


class TestCleanupPlan:
    def test_totals(self):
        plan = CleanupPlan(
            stores={
                StoreKind.PUB: StorePlan(
                    store=StoreKind.PUB,
                    entries=[CacheEntry(store=StoreKind.PUB, path=Path("/c/a"))],
                    estimated_bytes=10,
                ),
                StoreKind.GRADLE: StorePlan(store=StoreKind.GRADLE, estimated_bytes=5),
            }
        )
        assert plan.total_bytes == 15
        assert plan.total_candidates == 1


class TestGlobalCleanupResult:
    def test_clean(self):
        result = GlobalCleanupResult(stores={StoreKind.PUB: CleanupResult(name="pub", freed_bytes=10)})
        assert result.outcome == CleanupOutcome.CLEAN
        assert result.freed_bytes == 10

    def test_partial_with_warnings_stays_successful(self):
        result = GlobalCleanupResult(
            stores={StoreKind.PUB: CleanupResult(name="pub", freed_bytes=10, warnings=[Path("/c/a")])}
        )
        assert result.outcome == CleanupOutcome.PARTIAL
        assert result.success

    def test_partial_with_errors(self):
        result = GlobalCleanupResult(
            stores={
                StoreKind.PUB: CleanupResult(name="pub"),
                StoreKind.GRADLE: CleanupResult(
                    name="gradle",
                    errors=[DeletionError(path=Path("/c/b"), message="busy")],
                    success=False,
                ),
            }
        )
        assert result.outcome == CleanupOutcome.PARTIAL
        assert not result.success
        assert len(result.errors) == 1

    def test_aborted(self):
        result = GlobalCleanupResult(cancelled=True)
        assert result.outcome == CleanupOutcome.ABORTED
        assert result.freed_bytes == 0
