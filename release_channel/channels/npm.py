from __future__ import annotations

from typing import Any

from release_channel.channel import BaseChannel, Completion, Immediate, register_channel


@register_channel
class NpmChannel(BaseChannel):
    """Keeps the version in `package.json`.

    Publishing itself is left to npm; this channel only refuses versions for
    packages npm would not publish (private or unnamed).
    """

    kind = "npm"
    package_file = "package.json"

    def _package(self) -> dict[str, Any]:
        data = self.read_json(self.package_file)
        if not isinstance(data, dict):
            raise ValueError(f"{self.package_file} must contain a JSON object")
        return data

    def _get_version(self, default: Any) -> Any:
        if not self.exists(self.package_file):
            return default
        version = self._package().get("version")
        return version if isinstance(version, str) and version else default

    def _set_version(self, version: str, done: Completion) -> Immediate:
        data = self._package()
        data["version"] = version
        self.write_json(self.package_file, data)
        return Immediate(version)

    def _conflict_check(self, version: str, done: Completion) -> Any:
        if not self.exists(self.package_file):
            return f"{self.package_file} not found in {self.root_dir}"

        data = self._package()
        if not data.get("name"):
            return f"{self.package_file} has no name"
        if data.get("private") is True:
            return True
        # A bare None would read as "will call done() later".
        return Immediate(None)
