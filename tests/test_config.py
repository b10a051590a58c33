"""Tests for configuration loading, merging and persistence."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from flutter_cleaner.config import (
    Config,
    ConfigManager,
    GlobalCacheOptions,
    find_config_file,
    merge_with_defaults,
)
from flutter_cleaner.exceptions import ConfigError


class TestMergeWithDefaults:
    def test_empty_document_gives_defaults(self):
        assert merge_with_defaults({}) == Config()

    def test_non_object_gives_defaults(self):
        assert merge_with_defaults(["not", "a", "config"]) == Config()
        assert merge_with_defaults(None) == Config()

    def test_nested_override_keeps_sibling_defaults(self):
        config = merge_with_defaults({"cleanOptions": {"android": {"idea": True}}})
        assert config.clean_options.android.idea is True
        assert config.clean_options.android.gradle is True
        assert config.clean_options.ios.pods is True

    def test_camel_case_aliases(self):
        config = merge_with_defaults(
            {
                "globalCache": {"pubCache": False, "cocoaPods": False},
                "cleanOptions": {"flutter": {"dartTool": False}},
            }
        )
        assert config.global_cache.pub_cache is False
        assert config.global_cache.cocoapods is False
        assert config.global_cache.gradle is True
        assert config.clean_options.flutter.dart_tool is False

    def test_snake_case_names_accepted(self):
        config = merge_with_defaults({"global_cache": {"pub_cache": False}})
        assert config.global_cache.pub_cache is False

    def test_wrong_type_falls_back_to_default(self):
        config = merge_with_defaults({"globalCache": {"gradle": "no", "pubCache": False}})
        assert config.global_cache.gradle is True
        assert config.global_cache.pub_cache is False

    def test_wrong_type_for_group_falls_back(self):
        config = merge_with_defaults({"cleanOptions": "all"})
        assert config.clean_options == Config().clean_options

    def test_unknown_keys_ignored(self):
        config = merge_with_defaults({"safeMode": True, "globalCache": {"maven": True}})
        assert config == Config()

    def test_projects_parsed(self, tmp_path):
        config = merge_with_defaults({"projects": [{"name": "app", "path": str(tmp_path)}]})
        assert config.projects[0].name == "app"
        assert config.projects[0].path == tmp_path
        assert config.projects[0].enabled is True

    def test_invalid_project_dropped(self, tmp_path):
        config = merge_with_defaults(
            {"projects": [{"name": "app", "path": str(tmp_path)}, {"enabled": False}, "junk"]}
        )
        assert [p.name for p in config.projects] == ["app"]

    def test_projects_not_a_list(self):
        assert merge_with_defaults({"projects": {"name": "app"}}).projects == []

    def test_order_independent(self):
        a = merge_with_defaults({"globalCache": {"gradle": False}, "version": "2.0"})
        b = merge_with_defaults({"version": "2.0", "globalCache": {"gradle": False}})
        assert a == b


class TestFindConfigFile:
    def test_finds_in_start_directory(self, tmp_path):
        config = tmp_path / ".flutter-cleaner.json"
        config.write_text("{}")
        assert find_config_file(tmp_path) == config

    def test_finds_in_parent(self, tmp_path):
        config = tmp_path / "flutter-cleaner.config.json"
        config.write_text("{}")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config

    def test_not_found(self, tmp_path):
        with patch("flutter_cleaner.config.CONFIG_FILENAMES", ("no-such-config-file.json",)):
            assert find_config_file(tmp_path) is None


class TestConfigManager:
    @pytest.fixture
    def manager(self, tmp_path):
        return ConfigManager(tmp_path / "config.json")

    def test_default_path_in_home(self):
        assert ConfigManager().config_path == Path.home() / ".flutter-cleaner.json"

    def test_load_missing_gives_defaults(self, manager):
        assert not manager.exists()
        assert manager.load() == Config()

    def test_load_invalid_json_gives_defaults(self, manager):
        manager.config_path.write_text("{not json")
        assert manager.load() == Config()

    def test_save_uses_aliases(self, manager):
        manager.save(Config(global_cache=GlobalCacheOptions(pub_cache=False)))
        data = json.loads(manager.config_path.read_text())
        assert data["globalCache"]["pubCache"] is False
        assert "cleanOptions" in data

    def test_save_and_load(self, manager, tmp_path):
        config = Config(global_cache=GlobalCacheOptions(gradle=False))
        manager.save(config)
        assert manager.load() == config

    def test_save_failure_raises(self, manager):
        with patch.object(Path, "write_text", side_effect=OSError("read-only")):
            with pytest.raises(ConfigError):
                manager.save(Config())

    def test_initialize(self, manager):
        manager.initialize()
        assert manager.exists()

    def test_add_project(self, manager, tmp_path):
        manager.add_project("app", tmp_path / "app")
        projects = manager.load().projects
        assert len(projects) == 1
        assert projects[0].path == (tmp_path / "app").resolve()

    def test_add_existing_project_updates(self, manager, tmp_path):
        manager.add_project("app", tmp_path / "app")
        manager.add_project("renamed", tmp_path / "app", enabled=False)
        projects = manager.load().projects
        assert [(p.name, p.enabled) for p in projects] == [("renamed", False)]

    def test_remove_project(self, manager, tmp_path):
        manager.add_project("app", tmp_path / "app")
        assert manager.remove_project(tmp_path / "app")
        assert manager.load().projects == []

    def test_remove_unknown_project(self, manager, tmp_path):
        assert not manager.remove_project(tmp_path / "app")

    def test_enabled_project_paths(self, manager, tmp_path):
        manager.add_project("a", tmp_path / "a")
        manager.add_project("b", tmp_path / "b", enabled=False)
        assert manager.enabled_project_paths() == [(tmp_path / "a").resolve()]
