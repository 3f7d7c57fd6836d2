"""``python -m localmail`` runs the same command as the installed script."""

from __future__ import annotations

from .entry import main

if __name__ == "__main__":
    raise SystemExit(main())
