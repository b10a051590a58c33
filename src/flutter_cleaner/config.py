"""Persisted settings: registered projects and enabled clean options."""

import json
import logging
import typing
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from flutter_cleaner.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".flutter-cleaner.json", "flutter-cleaner.config.json")
CONFIG_VERSION = "1.0"


class _Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FlutterCleanOptions(_Settings):
    build: bool = True
    dart_tool: bool = Field(True, alias="dartTool")
    plugin_files: bool = Field(True, alias="pluginFiles")


class AndroidCleanOptions(_Settings):
    build: bool = True
    gradle: bool = True
    idea: bool = False


class IOSCleanOptions(_Settings):
    build: bool = True
    pods: bool = True
    symlinks: bool = True
    frameworks: bool = True


class CleanOptions(_Settings):
    """Per-platform toggles for cleaning a single project."""

    flutter: FlutterCleanOptions = Field(default_factory=FlutterCleanOptions)
    android: AndroidCleanOptions = Field(default_factory=AndroidCleanOptions)
    ios: IOSCleanOptions = Field(default_factory=IOSCleanOptions)


class GlobalCacheOptions(_Settings):
    """Which global stores a deep clean touches."""

    gradle: bool = True
    cocoapods: bool = Field(True, alias="cocoaPods")
    pub_cache: bool = Field(True, alias="pubCache")


class ProjectConfig(_Settings):
    """A registered project whose dependencies a deep clean must keep."""

    name: str
    path: Path
    enabled: bool = True


class Config(_Settings):
    version: str = CONFIG_VERSION
    projects: list[ProjectConfig] = Field(default_factory=list)
    clean_options: CleanOptions = Field(default_factory=CleanOptions, alias="cleanOptions")
    global_cache: GlobalCacheOptions = Field(default_factory=GlobalCacheOptions, alias="globalCache")


def _merge_list_of_models(item_cls: type[BaseModel], raw: Any, default: list) -> list:
    if not isinstance(raw, list):
        logger.warning("Expected a list of %s, using default", item_cls.__name__)
        return default
    items = []
    for item in raw:
        try:
            items.append(item_cls.model_validate(item))
        except ValidationError as e:
            logger.warning("Ignoring invalid %s entry %r: %s", item_cls.__name__, item, e)
    return items


def _merge_model(model_cls: type[BaseModel], raw: Any, defaults: BaseModel) -> BaseModel:
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning("Expected an object for %s, using defaults", model_cls.__name__)
        return defaults

    values: dict[str, Any] = {}
    for name, field in model_cls.model_fields.items():
        default_value = getattr(defaults, name)
        key = field.alias or name
        if key in raw:
            value = raw[key]
        elif name in raw:
            value = raw[name]
        else:
            values[name] = default_value
            continue

        if isinstance(default_value, BaseModel):
            values[name] = _merge_model(type(default_value), value, default_value)
            continue

        args = typing.get_args(field.annotation)
        if (
            typing.get_origin(field.annotation) is list
            and args
            and isinstance(args[0], type)
            and issubclass(args[0], BaseModel)
        ):
            values[name] = _merge_list_of_models(args[0], value, default_value)
            continue

        try:
            values[name] = TypeAdapter(field.annotation).validate_python(value, strict=True)
        except ValidationError:
            logger.warning("Invalid value %r for %s.%s, using default", value, model_cls.__name__, key)
            values[name] = default_value

    return model_cls.model_validate(values)


def merge_with_defaults(raw: Any) -> Config:
    """
    Overlay a loaded config document on the defaults.

    Every field is overridden on its own, nested option groups field by
    field. Unknown keys are ignored and values of the wrong type fall back
    to that field's default, so the result is always a complete Config.

    Args:
        raw: Parsed JSON document (any shape)

    Returns:
        Complete Config
    """
    return _merge_model(Config, raw, Config())


def find_config_file(start: Path) -> Optional[Path]:
    """
    Look for a config file in ``start`` and each of its parents.

    Args:
        start: Directory to start from

    Returns:
        Path of the first config file found, or None
    """
    current = Path(start).resolve()
    for directory in (current, *current.parents):
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
    return None


class ConfigManager:
    """Loads and saves the JSON config file."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else self.default_config_path()

    @staticmethod
    def default_config_path() -> Path:
        return Path.home() / CONFIG_FILENAMES[0]

    @property
    def config_dir(self) -> Path:
        return self.config_path.parent

    def exists(self) -> bool:
        return self.config_path.is_file()

    def load(self) -> Config:
        """Load the config, falling back to defaults if missing or unreadable."""
        if not self.exists():
            return Config()

        try:
            raw = json.loads(self.config_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Failed to load config %s: %s", self.config_path, e)
            return Config()

        return merge_with_defaults(raw)

    def save(self, config: Config) -> None:
        """
        Write the config as JSON.

        Raises:
            ConfigError: if the file cannot be written
        """
        data = config.model_dump(by_alias=True, mode="json")
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot write config {self.config_path}: {e}") from e

    def initialize(self) -> Config:
        config = Config()
        self.save(config)
        return config

    def add_project(self, name: str, project_path: Path, enabled: bool = True) -> Config:
        """Register a project, or update it if its path is already registered."""
        config = self.load()
        resolved = Path(project_path).resolve()

        for project in config.projects:
            if project.path.resolve() == resolved:
                project.name = name
                project.enabled = enabled
                break
        else:
            config.projects.append(ProjectConfig(name=name, path=resolved, enabled=enabled))

        self.save(config)
        return config

    def remove_project(self, project_path: Path) -> bool:
        """Unregister a project. Returns True if it was registered."""
        config = self.load()
        resolved = Path(project_path).resolve()
        remaining = [p for p in config.projects if p.path.resolve() != resolved]
        if len(remaining) == len(config.projects):
            return False
        config.projects = remaining
        self.save(config)
        return True

    def enabled_projects(self) -> list[ProjectConfig]:
        return [p for p in self.load().projects if p.enabled]

    def enabled_project_paths(self) -> list[Path]:
        """Project roots whose dependencies a deep clean must keep."""
        return [p.path for p in self.enabled_projects()]
