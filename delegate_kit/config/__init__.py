"""Configuration loading and schema.

- YAML profiles under configs/*.yaml (app, dev = app + dev overlay)
- Strict ${ENV_VAR} expansion (missing/empty env vars are errors)
- AppConfig: typed, validated view of the merged mapping
"""

from __future__ import annotations

from delegate_kit.config.loader import load_config, resolve_profile_configs
from delegate_kit.config.model import AppConfig, HostConfig, ScenarioConfig
from delegate_kit.errors import ConfigError

__all__ = [
    "AppConfig",
    "ConfigError",
    "HostConfig",
    "ScenarioConfig",
    "load_config",
    "resolve_profile_configs",
]
