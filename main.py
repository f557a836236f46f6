#!/usr/bin/env python3
"""Pomodorise entry point.

Run with:
    python main.py stats 1
    python -m pomodorise stats 1
"""

import sys

from pomodorise.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
