"""Configuration loading and schema.

- YAML files, later files overriding earlier ones
- Strict ${ENV_VAR} expansion (missing/empty env vars are errors)
"""

from __future__ import annotations

from release_channel.config.errors import ConfigError
from release_channel.config.loader import load_config, load_release_config
from release_channel.config.model import ReleaseConfig

__all__ = ["ConfigError", "ReleaseConfig", "load_config", "load_release_config"]
