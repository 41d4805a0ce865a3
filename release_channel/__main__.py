from __future__ import annotations

from release_channel.runtime.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
