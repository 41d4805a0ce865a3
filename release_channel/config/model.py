from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from release_channel.channel.base import DEFAULT_MARKER
from release_channel.config.errors import ConfigError


LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class ReleaseConfig:
    root_marker: str = DEFAULT_MARKER
    channels: list[str] = field(default_factory=lambda: ["release"])
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ReleaseConfig:
        marker = raw.get("root_marker", DEFAULT_MARKER)
        if not isinstance(marker, str) or not marker.strip():
            raise ConfigError("must be a non-empty string", path="root_marker")

        channels = raw.get("channels", ["release"])
        if isinstance(channels, str):
            channels = [channels]
        if not isinstance(channels, list) or not all(isinstance(x, str) and x for x in channels):
            raise ConfigError("must be a list of channel kinds", path="channels")
        if not channels:
            raise ConfigError("at least one channel is required", path="channels")

        log_raw = raw.get("logging") or {}
        if not isinstance(log_raw, Mapping):
            raise ConfigError("must be a mapping", path="logging")
        log_format = str(log_raw.get("format", ReleaseConfig.log_format))
        if log_format not in LOG_FORMATS:
            raise ConfigError(f"unsupported format: {log_format!r}", path="logging.format")

        return cls(
            root_marker=marker,
            channels=list(channels),
            log_level=str(log_raw.get("level", ReleaseConfig.log_level)).upper(),
            log_format=log_format,
        )
