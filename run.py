"""
Development runner for the Heic2JPG GUI.

Starts the application from a source checkout without installing it.
"""

import sys
from pathlib import Path

# The core and gui packages live under src/ next to this file
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from gui.main import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
