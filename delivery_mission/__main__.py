"""Module entry point: python -m delivery_mission ..."""

from __future__ import annotations

from delivery_mission.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
