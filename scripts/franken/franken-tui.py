#!/usr/bin/env python3
"""Thin entrypoint for the franken console dashboard."""

from __future__ import annotations

from franken_tui.app import main


if __name__ == "__main__":
    raise SystemExit(main())
