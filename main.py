from __future__ import annotations

from delegate_kit.runtime.lifecycle import main


if __name__ == "__main__":
    raise SystemExit(main())
