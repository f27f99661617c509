#!/usr/bin/env python3
"""
Launcher script for the catchview application.
This script allows running the viewer from the root directory.
"""
import sys
import os
from pathlib import Path

# Get the directory where this script is located
script_dir = Path(__file__).parent

# Try to find and use the virtual environment
venv_python = script_dir / ".venv" / "bin" / "python"
if venv_python.exists() and sys.executable != str(venv_python):
    # Re-execute with the virtual environment's Python
    os.execv(str(venv_python), [str(venv_python)] + sys.argv)

from catchview.cli import main

if __name__ == "__main__":
    sys.exit(main())
