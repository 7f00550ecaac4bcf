"""Pytest configuration."""

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

# Tests run against the built-in ECO table only
os.environ.pop("ECO_TSV_PATH", None)
