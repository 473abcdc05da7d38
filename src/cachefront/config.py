from __future__ import annotations

from typing import Protocol

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml


class AppConfig(Protocol):
    def __getitem__(self, key: str) -> object: ...


_DEFAULTS: dict[str, object] = {
    "store": {
        "type": "file",
        "serializer": "pickle",
        "file": {
            "directory": "~/.cache/cachefront",
        },
        "sqlite": {
            "db_path": "~/.cache/cachefront/cache.db",
        },
        "redis": {
            "url": "redis://localhost:6379/0",
            "default_expiry": 0,
            "retries": 3,
            "generation_max_age": 60,
        },
    },
    "cache": {
        "global_namespace": "",
        "enabled": True,
    },
}


def create_config(
    yaml_path: str = "cachefront.yaml",
    env_prefix: str = "CACHEFRONT",
    defaults: dict[str, object] | None = None,
    overrides: dict[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file; a missing file is ignored.
        env_prefix: Prefix for environment variables, e.g. ``CACHEFRONT__STORE__TYPE``.
        defaults: Default configuration values.
        overrides: Values taking precedence over every other layer.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]
    if overrides:
        layers.insert(0, config_from_dict(overrides))

    return ConfigurationSet(*layers)


def config_bool(value: object) -> bool:
    """Interpret a config value that may arrive as a string from the environment."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
