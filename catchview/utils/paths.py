"""Centralized path definitions for catchview.

Single source of truth for every file the viewer writes locally. The viewer
keeps no message data on disk, only its configuration and logs.
"""

from pathlib import Path

# Base application directory
CATCHVIEW_DIR = Path.home() / ".catchview"

# Subdirectories
LOGS_DIR = CATCHVIEW_DIR / "logs"

# Specific files
CONFIG_PATH = CATCHVIEW_DIR / "config.json"
