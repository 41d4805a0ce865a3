"""Channel registry.

Concrete channels register under an explicit kind string (`BaseChannel.kind`)
so the CLI and config can refer to them by name.
"""

from __future__ import annotations

import os
from typing import TypeVar

from .base import BaseChannel
from .errors import ChannelRegistryError

__all__ = [
    "available_channels",
    "create_channel",
    "get_channel_class",
    "register_channel",
    "unregister_channel",
]


C = TypeVar("C", bound=type[BaseChannel])

_REGISTRY: dict[str, type[BaseChannel]] = {}


def register_channel(channel_cls: C) -> C:
    """Register a channel class under its kind. Usable as a decorator."""

    kind = channel_cls.channel_kind()
    existing = _REGISTRY.get(kind)
    if existing is not None and existing is not channel_cls:
        raise ChannelRegistryError(
            f"channel kind {kind!r} already registered by {existing.__qualname__}"
        )
    _REGISTRY[kind] = channel_cls
    return channel_cls


def unregister_channel(kind: str) -> None:
    _REGISTRY.pop(kind, None)


def get_channel_class(kind: str) -> type[BaseChannel]:
    try:
        return _REGISTRY[kind]
    except KeyError:
        known = ", ".join(available_channels()) or "<none>"
        raise ChannelRegistryError(f"unknown channel kind {kind!r} (known: {known})") from None


def available_channels() -> list[str]:
    return sorted(_REGISTRY)


def create_channel(
    kind: str,
    directory: str | os.PathLike[str] | None = None,
    *,
    marker: str | None = None,
) -> BaseChannel:
    return get_channel_class(kind)(directory, marker=marker)
