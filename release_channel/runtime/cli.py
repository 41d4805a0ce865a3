from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

import release_channel.channels  # noqa: F401  (registers built-in channels)
from release_channel.channel import (
    BaseChannel,
    ChannelRegistryError,
    SetVersionStatus,
    available_channels,
    create_channel,
)
from release_channel.config import ConfigError, load_release_config
from release_channel.observability.logging import configure_logging


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-channel",
        description="Read, check and bump project version numbers across release channels",
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. DEBUG, INFO, WARNING); overrides the config",
    )
    parser.add_argument("--config", type=Path, help="Path to a YAML config file")
    parser.add_argument(
        "--cwd",
        type=Path,
        default=None,
        help="Directory to start the project root search from (default: current directory)",
    )
    parser.add_argument(
        "--channel",
        dest="channels",
        action="append",
        metavar="KIND",
        help="Channel kind to use; repeatable (overrides the config)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("channels", help="List registered channel kinds")
    sub.add_parser("show", help="Print the current version of each channel")

    check_p = sub.add_parser("check", help="Run conflict checks for VERSION")
    check_p.add_argument("version")

    set_p = sub.add_parser("set", help="Check for conflicts, then set VERSION on every channel")
    set_p.add_argument("version")

    return parser


def _conflicts(channels: Sequence[BaseChannel], version: str) -> dict[str, str]:
    """Run every channel's conflict check; return kind -> message for failures."""

    found: dict[str, str] = {}
    for ch in channels:
        handle = ch.conflict_check(version)
        if not handle.done:
            # Only synchronous completion can be observed from here.
            found[ch.get_name()] = "conflict check did not complete"
        elif handle.value is not None:
            found[ch.get_name()] = str(handle.value)
    return found


def _set_versions(channels: Sequence[BaseChannel], version: str) -> dict[str, str]:
    # Every channel is checked before any of them is written.
    conflicts = _conflicts(channels, version)
    if conflicts:
        by_name = {ch.get_name(): ch for ch in channels}
        for name in conflicts:
            by_name[name].error("Refusing to set version %s", version)
        by_name[next(iter(conflicts))].exit()

    statuses: dict[str, str] = {}
    for ch in channels:
        statuses[ch.get_name()] = ch.set_version(version).value
    return statuses


def _write_json(obj: Any) -> None:
    sys.stdout.write(json.dumps(obj, ensure_ascii=False, indent=2))
    sys.stdout.write("\n")


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint referenced by pyproject.toml.

    Exit codes: 0 ok, 1 conflict or failed version update, 2 usage/config
    error. A conflict during `set` exits through `BaseChannel.exit()`.
    """

    parser = _build_parser()
    try:
        ns = parser.parse_args(argv)
    except SystemExit as e:
        # argparse has already printed help/usage to stdout/stderr.
        code = e.code
        return int(code) if isinstance(code, int) else 1

    try:
        cfg = load_release_config(ns.config)
    except ConfigError as e:
        configure_logging(level=ns.log_level or "INFO")
        logger.error("config_error", extra={"error": str(e)})
        sys.stderr.write(f"ConfigError: {e}\n")
        return 2

    configure_logging(level=ns.log_level or cfg.log_level, fmt=cfg.log_format)

    if ns.command == "channels":
        for kind in available_channels():
            sys.stdout.write(f"{kind}\n")
        return 0

    kinds = ns.channels or cfg.channels
    try:
        channels = [create_channel(kind, ns.cwd, marker=cfg.root_marker) for kind in kinds]
    except ChannelRegistryError as e:
        sys.stderr.write(f"{e}\n")
        return 2

    missing = [ch for ch in channels if not ch.is_package()]
    if missing:
        sys.stderr.write(f"No {cfg.root_marker} found above {ns.cwd or Path.cwd()}\n")
        return 2

    logger.info(
        "channels_loaded",
        extra={"root": str(channels[0].root_dir), "channels": [ch.get_name() for ch in channels]},
    )

    if ns.command == "show":
        _write_json({ch.get_name(): ch.get_version() for ch in channels})
        return 0

    if ns.command == "check":
        conflicts = _conflicts(channels, ns.version)
        if conflicts:
            _write_json(conflicts)
            return 1
        return 0

    statuses = _set_versions(channels, ns.version)
    _write_json(statuses)
    return 1 if SetVersionStatus.FAILED.value in statuses.values() else 0
