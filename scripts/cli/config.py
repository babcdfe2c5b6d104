"""CLI configuration: paths used by the console."""

from pathlib import Path

# Project root (parent of scripts/)
ROOT = Path(__file__).resolve().parent.parent.parent

LOG_DIR = ROOT / "logs"
LOG_FILE = "interactive.log"

# Table width for every console view
WIDTH = 72
