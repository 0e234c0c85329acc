"""YAML store configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/stores.yaml : store definitions and static defaults
#   2. .env file          : local developer overrides
#   3. Environment vars   : set at deploy time
#
# The ``stores:`` list only ever comes from YAML; the ``redis`` and
# ``logging`` sections are deep-merged with values from Settings.
#
#   base      = {"redis": {"url": "redis://a"}, "stores": [...]}
#   overrides = {"redis": {"url": "redis://b"}}
#   result    = {"redis": {"url": "redis://b"}, "stores": [...]}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from memstash.config.settings import Settings
from memstash.utils.errors import ConfigurationError


def load_config(path: str | None = None, settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML file. Defaults to ``settings.stores_config_path``.
        settings: Settings to merge in. A fresh ``Settings()`` when omitted.

    Returns:
        Fully resolved configuration dictionary with at least a ``stores`` list.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping.
    """
    settings = settings or Settings()
    config_path = Path(path or settings.stores_config_path)

    if config_path.exists():
        with open(config_path) as f:
            try:
                yaml_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"cannot parse {config_path}: {exc}") from exc
    else:
        yaml_config = {}

    if not isinstance(yaml_config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")

    env_values = {
        "redis": {
            "url": settings.redis_url,
        },
        "logging": {
            "level": settings.log_level,
            "json": settings.app_env == "production",
        },
    }

    # Values explicitly set in the environment win over YAML; Settings
    # defaults only fill the gaps YAML leaves.
    explicit = settings.model_fields_set
    env_overrides: dict = {"redis": {}, "logging": {}}
    if "redis_url" in explicit:
        env_overrides["redis"]["url"] = settings.redis_url
    if "log_level" in explicit:
        env_overrides["logging"]["level"] = settings.log_level
    if "app_env" in explicit:
        env_overrides["logging"]["json"] = env_values["logging"]["json"]

    _deep_merge(env_values, yaml_config)
    _deep_merge(env_values, env_overrides)
    env_values.setdefault("stores", [])
    return env_values


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
