from __future__ import annotations

from typing import Any

from release_channel.channel import BaseChannel, Completion, Immediate, register_channel


@register_channel
class ReleaseJsonChannel(BaseChannel):
    """Keeps the version in the root manifest itself, under `"version"`."""

    kind = "release"

    def _manifest(self) -> dict[str, Any]:
        data = self.read_json(self.marker)
        if not isinstance(data, dict):
            raise ValueError(f"{self.marker} must contain a JSON object")
        return data

    def _get_version(self, default: Any) -> Any:
        version = self._manifest().get("version")
        if not isinstance(version, str) or not version:
            return default
        return version

    def _set_version(self, version: str, done: Completion) -> Immediate:
        data = self._manifest()
        data["version"] = version
        self.write_json(self.marker, data)
        return Immediate(version)
