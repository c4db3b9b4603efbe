"""Точка входа для ``python -m ahtvc``."""

from __future__ import annotations

from ahtvc.cli import main

if __name__ == "__main__":
    main()
