#!/usr/bin/env python3
"""markgrid - view a markup document and select text with the mouse.

Usage:
    python main.py FILE [--width N] [--diffs FILE.json] [--read-only] [--print]
"""

import sys
from markgrid.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
