"""YAML config loader, API key resolution and runtime get/set."""

import json
import os
from pathlib import Path
from typing import Any

import yaml

from meteo.config.defaults import DEFAULT_CITIES
from meteo.config.schema import MeteoConfig


class ConfigError(Exception):
    """Raised when required configuration is missing."""


def load_config(path: str | Path) -> MeteoConfig:
    """Load and validate config from a YAML file.

    If no cities are specified in the YAML, injects DEFAULT_CITIES. If no
    default city is given, the first configured city is used.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    if "cities" not in raw or not raw["cities"]:
        raw["cities"] = list(DEFAULT_CITIES)
    if not raw.get("default_city"):
        raw["default_city"] = raw["cities"][0]

    return MeteoConfig(**raw)


def resolve_api_key(config: MeteoConfig, environ: dict[str, str] | None = None) -> str:
    """Read the API key from the environment variable the config names."""
    env = os.environ if environ is None else environ
    key = env.get(config.api.api_key_env, "").strip()
    if not key:
        raise ConfigError(f"{config.api.api_key_env} not set")
    return key


def get_config_value(config: MeteoConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'display.forecast_window'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: MeteoConfig, dotted_key: str, value: Any) -> MeteoConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new MeteoConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    old_value = target[parts[-1]]
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return MeteoConfig(**data)


def save_config(config: MeteoConfig, path: str | Path) -> None:
    with open(path, "w") as f:
        yaml.safe_dump(config.model_dump(), f, sort_keys=False)
