#!/usr/bin/env python3
"""
Operator console.

Usage:
    python3 scripts/interactive.py
    STOCK_CONFIG_PATH=site.yaml python3 scripts/interactive.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from scripts.cli.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
