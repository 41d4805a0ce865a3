"""Built-in channels.

Importing this package registers them.
"""

from __future__ import annotations

from .npm import NpmChannel
from .release_json import ReleaseJsonChannel

__all__ = ["NpmChannel", "ReleaseJsonChannel"]
