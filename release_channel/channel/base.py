"""Base class for release channels.

A channel is created for a directory inside a project. On construction it walks
up from that directory until it finds the project root (the first directory
holding `release.json`, or whatever `_is_root` accepts) and from then on reads
and writes files relative to that root.

Concrete channels customise behaviour by defining any of these hooks:

- `_get_name()`: channel name (default: `kind`, else the lowercased class name)
- `_is_root(directory)`: root predicate (default: the marker file exists)
- `_get_version(default)`: current version, `default` when there is none
- `_set_version(version, done)`: write a new version
- `_conflict_check(version, done)`: return a message, or True, on conflict

`_set_version` and `_conflict_check` either return a result or return
`PENDING` and call `done(value)` themselves later; see `completion`.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

from release_channel.observability.logging import get_logger

from .completion import Callback, Completion
from .errors import ArgumentError, RootNotFoundError, VersionSetError

__all__ = [
    "DEFAULT_CONFLICT_MESSAGE",
    "DEFAULT_MARKER",
    "EXIT_CODE",
    "NO_VERSION",
    "BaseChannel",
    "ChannelCapabilities",
    "SetVersionStatus",
]


DEFAULT_MARKER = "release.json"

# Passed to `_get_version` by `set_version`; returned when there is no version yet.
NO_VERSION = "none"

DEFAULT_CONFLICT_MESSAGE = "Conflict reported"

# sys.exit(-1) surfaces as status 255 on POSIX.
EXIT_CODE = -1


class SetVersionStatus(str, Enum):
    SUCCESS = "success"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ChannelCapabilities:
    """Which optional hooks a channel class implements."""

    name: bool = False
    root_predicate: bool = False
    version_getter: bool = False
    version_setter: bool = False
    conflict_check: bool = False

    @classmethod
    def of(cls, channel_cls: type[BaseChannel]) -> ChannelCapabilities:
        return cls(
            name=channel_cls._get_name is not None,
            root_predicate=channel_cls._is_root is not None,
            version_getter=channel_cls._get_version is not None,
            version_setter=channel_cls._set_version is not None,
            conflict_check=channel_cls._conflict_check is not None,
        )


class BaseChannel:
    kind: ClassVar[str | None] = None
    marker: str = DEFAULT_MARKER

    # Optional hooks, see module docstring.
    _get_name = None
    _is_root = None
    _get_version = None
    _set_version = None
    _conflict_check = None

    def __init__(self, directory: str | os.PathLike[str] | None = None, *, marker: str | None = None) -> None:
        if marker is not None:
            self.marker = marker

        self.capabilities = ChannelCapabilities.of(type(self))
        self.cwd: Path | None = None
        self.root_dir: Path | None = None
        self.version_changed: bool | None = None
        self.last_error: VersionSetError | None = None
        self._is_package = False
        self._probe_dir: Path | None = None

        # A `_get_name` hook may read root-relative files, so the root comes
        # first and logs under the kind until the name is known.
        self._bind_logger(self.channel_kind())
        self.find_root(directory)
        self._bind_logger(self.get_name())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(root_dir={self.root_dir!r})"

    def _bind_logger(self, name: str) -> None:
        self.pre = f"release:{name}"  # prepended to log messages
        self._log = get_logger(f"release_channel.channels.{name}", channel=name)

    @classmethod
    def channel_kind(cls) -> str:
        return cls.kind or cls.__name__.lower()

    def get_name(self) -> str:
        """Return the channel name (e.g. npm)."""

        if self.capabilities.name:
            return str(self._get_name())
        return self.channel_kind()

    # Root resolution

    def get_root(self) -> Path | None:
        return self.root_dir or self.cwd

    def find_root(self, directory: str | os.PathLike[str] | None = None) -> Path | None:
        """Walk up from `directory` (default: the process cwd) to the project root.

        Returns None when the filesystem root is reached without a match. A
        successful result is cached for the lifetime of the instance.
        """

        if self.root_dir is not None:
            return self.root_dir

        start = Path(os.path.abspath(directory or os.getcwd()))
        try:
            for candidate in (start, *start.parents):
                self.cwd = candidate
                self._probe_dir = candidate
                if self.is_root(candidate):
                    self._is_package = True
                    self.root_dir = candidate
                    return candidate
        finally:
            self._probe_dir = None

        self.debug("find_root - reached root directory")
        self._is_package = False
        return None

    def is_package(self) -> bool:
        return self._is_package

    def is_root(self, directory: Path) -> bool:
        if self.capabilities.root_predicate:
            return bool(self._is_root(directory))
        return self.exists(self.marker)

    # Root-relative file helpers

    def _path(self, name: str | os.PathLike[str]) -> Path:
        base = self.root_dir or self._probe_dir
        if base is None:
            raise RootNotFoundError(
                f"no {self.marker} found",
                cwd=str(self.cwd) if self.cwd is not None else None,
            )
        return base / name

    def exists(self, *names: str | os.PathLike[str]) -> bool:
        """True if every name exists under the root."""

        if not names:
            raise ArgumentError("No argument supplied to exists(), at least 1 argument required.")
        for name in names:
            if not self._path(name).exists():
                return False
        return True

    def read_json(self, name: str | os.PathLike[str]) -> Any:
        return json.loads(self._path(name).read_text(encoding="utf-8"))

    def write_json(self, name: str | os.PathLike[str], data: Any) -> None:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        self._path(name).write_text(text, encoding="utf-8")

    # Versions

    def get_version(self, default: Any = None) -> Any:
        if not self.capabilities.version_getter:
            return None
        return self._get_version(default)

    def set_version(self, version: str, callback: Callback | None = None) -> SetVersionStatus:
        """Set the version number in the channel's source.

        `callback` receives the setter's result once: immediately, or whenever
        an asynchronous `_set_version` completes. Errors from the getter or
        setter are logged and reported as `SetVersionStatus.FAILED`; the
        callback is not called in that case. Exceptions raised by `callback`
        itself propagate to the caller.
        """

        callback_errors: list[Exception] = []

        def deliver(value: Any) -> None:
            if callback is None:
                return
            try:
                callback(value)
            except Exception as exc:
                callback_errors.append(exc)
                raise

        try:
            current = self.get_version(NO_VERSION)
            if current == version:
                self.debug("Version unchanged (%s)", version)
                self.version_changed = False
                deliver(None)
                return SetVersionStatus.UNCHANGED

            self.debug("Changing version from %s to %s", current, version)
            done = Completion(deliver, on_duplicate=self._on_duplicate("set_version"))
            if self.capabilities.version_setter:
                done.settle(self._set_version(version, done))
            else:
                done(None)
            self.version_changed = True
            return SetVersionStatus.SUCCESS
        except Exception as exc:  # noqa: BLE001
            if any(exc is e for e in callback_errors):
                raise
            err = VersionSetError(str(exc) or type(exc).__name__, version=version)
            err.__cause__ = exc
            self.last_error = err
            self.error(err)
            self.error("Failed to set version number")
            return SetVersionStatus.FAILED

    def conflict_check(self, version: str, callback: Callback | None = None) -> Completion:
        """Ask the channel whether `version` can be released.

        The callback receives None for no conflict, otherwise a message. `True`
        from the hook becomes `DEFAULT_CONFLICT_MESSAGE`. The returned handle is
        already fulfilled unless the hook completes asynchronously.
        """

        result = Completion(callback)
        if not self.capabilities.conflict_check:
            result(None)
            return result

        def report(msg: Any) -> None:
            if msg is True:
                msg = DEFAULT_CONFLICT_MESSAGE
            if not msg:
                msg = None
            else:
                self.error(msg)
            result(msg)

        reporter = Completion(report, on_duplicate=self._on_duplicate("conflict_check"))
        reporter.settle(self._conflict_check(version, reporter))
        return result

    def _on_duplicate(self, operation: str) -> Callback:
        def _ignored(value: Any) -> None:
            self.debug("%s completed more than once; ignoring %r", operation, value)

        return _ignored

    # Process and logging hooks

    def exit(self) -> None:  # noqa: A003
        sys.exit(EXIT_CODE)

    def error(self, msg: object, *args: object) -> None:
        self._emit(logging.ERROR, msg, args)

    def debug(self, msg: object, *args: object) -> None:
        self._emit(logging.DEBUG, msg, args)

    def _emit(self, level: int, msg: object, args: tuple[object, ...]) -> None:
        text = str(msg) % args if args else str(msg)
        self._log.log(level, "%s: %s", self.pre, text)
