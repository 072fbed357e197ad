"""
Root pytest configuration.

Puts src on the Python path before test collection so the top-level
packages (config, core, database, ...) import without installation.
"""

import sys
from pathlib import Path

src_path = Path(__file__).parent / "src"
src_str = str(src_path.absolute())

if src_str in sys.path:
    sys.path.remove(src_str)
sys.path.insert(0, src_str)
