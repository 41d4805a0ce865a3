from __future__ import annotations

from release_channel.channel.errors import ReleaseChannelError


class ConfigError(ReleaseChannelError):
    """Raised when configuration is invalid or incomplete."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
