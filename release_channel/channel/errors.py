from __future__ import annotations


class ReleaseChannelError(Exception):
    """Base exception for this project."""


class ArgumentError(ReleaseChannelError, TypeError):
    """Raised when a helper is called without its required arguments."""


class RootNotFoundError(ReleaseChannelError):
    """Raised on root-relative file access when no project root was resolved."""

    def __init__(self, message: str, *, cwd: str | None = None):
        super().__init__(f"{message} (searched from {cwd})" if cwd else message)
        self.cwd = cwd


class VersionSetError(ReleaseChannelError):
    """Wraps any failure raised while comparing or setting a version.

    Never propagated out of `BaseChannel.set_version`; it is logged and kept on
    `BaseChannel.last_error` instead.
    """

    def __init__(self, message: str, *, version: str | None = None):
        super().__init__(message)
        self.version = version


class ChannelRegistryError(ReleaseChannelError):
    """Raised for duplicate or unknown channel kinds."""
