"""
Test-time path setup.

Makes `import pathviz` work whether pytest runs from the repo root or from
`tests/`, without requiring an editable install.
"""

import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]

if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))
