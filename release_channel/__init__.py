"""Release channel plugins.

A channel owns one place where a project records its version number (a
manifest, a package file, a tag) and knows how to read, bump and sanity-check
it relative to the project root.
"""

from __future__ import annotations

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
