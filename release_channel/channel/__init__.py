"""Channel base class, hook completion types and registry."""

from __future__ import annotations

from .base import (
    DEFAULT_CONFLICT_MESSAGE,
    DEFAULT_MARKER,
    EXIT_CODE,
    NO_VERSION,
    BaseChannel,
    ChannelCapabilities,
    SetVersionStatus,
)
from .completion import PENDING, Completion, Immediate
from .errors import (
    ArgumentError,
    ChannelRegistryError,
    ReleaseChannelError,
    RootNotFoundError,
    VersionSetError,
)
from .registry import (
    available_channels,
    create_channel,
    get_channel_class,
    register_channel,
    unregister_channel,
)

__all__ = [
    "DEFAULT_CONFLICT_MESSAGE",
    "DEFAULT_MARKER",
    "EXIT_CODE",
    "NO_VERSION",
    "PENDING",
    "ArgumentError",
    "BaseChannel",
    "ChannelCapabilities",
    "ChannelRegistryError",
    "Completion",
    "Immediate",
    "ReleaseChannelError",
    "RootNotFoundError",
    "SetVersionStatus",
    "VersionSetError",
    "available_channels",
    "create_channel",
    "get_channel_class",
    "register_channel",
    "unregister_channel",
]
