"""Tests for the per-project and global used-package indexes."""

from conftest import APP_MANIFEST, lockfile_text, write_project

from flutter_cleaner.dependencies import build_for_project, build_global_index, deep_clean_index
from flutter_cleaner.models import PackageIdentity


def identity(name, version):
    return PackageIdentity(name=name, version=f'"{version}"')


class TestBuildForProject:
    def test_sample_app(self, app_project):
        deps = build_for_project(app_project)
        assert deps is not None
        assert deps.project_name == "app"
        assert deps.all_packages == {identity("http", "0.13.0"), identity("args", "2.3.0")}
        assert deps.direct_packages == {identity("http", "0.13.0")}

    def test_dev_dependency_is_direct(self, tmp_path):
        lock = lockfile_text({"lint": ("2.0.0", "direct dev"), "meta": ("1.9.0", "transitive")})
        project = write_project(tmp_path / "app", APP_MANIFEST, lock)
        deps = build_for_project(project)
        assert deps.direct_packages == {identity("lint", "2.0.0")}

    def test_direct_iff_named_in_manifest(self, tmp_path):
        # Classification follows the manifest, not the lockfile's dependency field
        lock = lockfile_text(
            {
                "http": ("0.13.0", "transitive"),
                "lint": ("2.0.0", "direct dev"),
                "path": ("1.8.0", "direct main"),
            }
        )
        project = write_project(tmp_path / "app", APP_MANIFEST, lock)
        deps = build_for_project(project)
        for package in deps.all_packages:
            named = package.name in ("http", "lint")
            assert (package in deps.direct_packages) == named

    def test_missing_lockfile_is_valid_and_empty(self, tmp_path):
        project = write_project(tmp_path / "app", APP_MANIFEST)
        deps = build_for_project(project)
        assert deps is not None
        assert deps.all_packages == set()
        assert deps.direct_packages == set()

    def test_missing_manifest_returns_none(self, tmp_path):
        assert build_for_project(tmp_path) is None

    def test_nameless_manifest_uses_directory_name(self, tmp_path):
        project = write_project(tmp_path / "my_app", "dependencies:\n  http: any\n")
        assert build_for_project(project).project_name == "my_app"


class TestBuildGlobalIndex:
    def test_shared_package_counted_once(self, tmp_path):
        a = write_project(
            tmp_path / "a",
            "name: a\n",
            lockfile_text({"shared": ("1.0.0", "transitive"), "only_a": ("2.0.0", "transitive")}),
        )
        b = write_project(tmp_path / "b", "name: b\n", lockfile_text({"shared": ("1.0.0", "transitive")}))

        index = build_global_index([a, b])

        shared = [p for p in index.all_packages if p.name == "shared"]
        assert shared == [identity("shared", "1.0.0")]
        assert index.used_names == {"shared", "only_a"}
        assert index.is_package_used("shared")
        assert len(index.projects) == 2

    def test_skips_projects_without_manifest(self, tmp_path, app_project):
        index = build_global_index([tmp_path / "missing", app_project])
        assert [p.project_name for p in index.projects] == ["app"]
        assert index.used_names == {"http", "args"}

    def test_no_projects(self):
        index = build_global_index([])
        assert index.all_packages == set()
        assert index.projects == []


class TestDeepCleanIndex:
    def test_uses_configured_projects(self, tmp_path, app_project):
        other = write_project(tmp_path / "other", "name: other\n", lockfile_text({"dio": ("5.0.0", "direct main")}))
        index = deep_clean_index([other], fallback_project=app_project)
        assert index.used_names == {"dio"}

    def test_falls_back_to_current_project(self, app_project):
        index = deep_clean_index([], fallback_project=app_project)
        assert index.used_names == {"http", "args"}

    def test_nothing_configured(self):
        index = deep_clean_index([])
        assert index.projects == []
