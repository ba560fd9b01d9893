"""
Configuration management for dbseed.

Loads and validates an optional dbseed.yaml file:

    lifecycle: per_class          # or per_instance
    link_enclosing: true
    default_binder: myproject.db:PsycopgBinder
    log_level: INFO

Lookup order: explicit path, $DBSEED_CONFIG, ./dbseed.yaml. Without any
file the defaults apply.
"""

import importlib
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from dbseed.engine import BinderConfiguration, DefaultBinderConfiguration
from dbseed.errors import DbSeedError


CONFIG_ENV_VAR = "DBSEED_CONFIG"
DEFAULT_CONFIG_FILE = "dbseed.yaml"
LIFECYCLES = ("per_class", "per_instance")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(DbSeedError):
    """Configuration validation error."""
    pass


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", "off"):
        return False
    raise ConfigError(f"{key}: expected a boolean, got {value!r}")


@dataclass(frozen=True)
class SeedConfig:
    """
    dbseed settings.

    Attributes:
        lifecycle: per_class shares one context (and replay tracking) across a
            class's tests; per_instance creates one per test instance
        link_enclosing: Create and link enclosing instances for nested test classes
        default_binder: module:attribute path of the default BinderConfiguration
        log_level: Logging level used by the CLI
    """
    lifecycle: str = "per_class"
    link_enclosing: bool = True
    default_binder: Optional[str] = None
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.lifecycle not in LIFECYCLES:
            raise ConfigError(f"lifecycle: expected one of {LIFECYCLES}, got {self.lifecycle!r}")
        if not isinstance(self.link_enclosing, bool):
            raise ConfigError(f"link_enclosing: expected a boolean, got {self.link_enclosing!r}")
        if self.default_binder is not None and ":" not in str(self.default_binder):
            raise ConfigError(f"default_binder: expected 'module:attribute', got {self.default_binder!r}")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level: expected one of {LOG_LEVELS}, got {self.log_level!r}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SeedConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        values = dict(data)
        if "link_enclosing" in values:
            values["link_enclosing"] = _to_bool("link_enclosing", values["link_enclosing"])
        return cls(**values)

    def override(self, **values: Any) -> "SeedConfig":
        """Return a copy with the non-None values replaced."""
        present = {k: v for k, v in values.items() if v is not None}
        if "link_enclosing" in present:
            present["link_enclosing"] = _to_bool("link_enclosing", present["link_enclosing"])
        return replace(self, **present)

    def get_default_binder(self) -> BinderConfiguration:
        """
        Resolve the default binder configuration.

        The path may name a BinderConfiguration instance or a class that is
        instantiated without arguments.

        Raises:
            ConfigError: If the path cannot be imported or is not a binder
        """
        if self.default_binder is None:
            return DefaultBinderConfiguration.INSTANCE

        module_name, _, attribute = self.default_binder.partition(":")
        try:
            target: Any = importlib.import_module(module_name)
        except ImportError as e:
            raise ConfigError(f"default_binder: cannot import {module_name}: {e}") from e
        for part in attribute.split("."):
            if not hasattr(target, part):
                raise ConfigError(f"default_binder: {self.default_binder} not found")
            target = getattr(target, part)

        if isinstance(target, type) and issubclass(target, BinderConfiguration):
            target = target()
        if not isinstance(target, BinderConfiguration):
            raise ConfigError(f"default_binder: {self.default_binder} is not a BinderConfiguration")
        return target


def _load_yaml(config_path: Path) -> dict[str, Any]:
    """Load and parse a YAML configuration file."""
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {config_path}")
    return data


def load_config(config_path: Optional[Path | str] = None) -> SeedConfig:
    """
    Load dbseed configuration.

    Args:
        config_path: Path to a YAML file. Defaults to $DBSEED_CONFIG, then ./dbseed.yaml

    Returns:
        SeedConfig instance (defaults when no file is found)

    Raises:
        ConfigError: If an explicitly requested file is missing or the config is invalid
    """
    if config_path is None and os.environ.get(CONFIG_ENV_VAR):
        config_path = os.environ[CONFIG_ENV_VAR]

    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        return SeedConfig.from_dict(_load_yaml(path))

    path = Path.cwd() / DEFAULT_CONFIG_FILE
    if path.exists():
        return SeedConfig.from_dict(_load_yaml(path))
    return SeedConfig()
