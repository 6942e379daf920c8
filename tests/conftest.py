"""
Pytest Configuration

Puts ``src`` on ``sys.path`` for checkouts that are not installed and
registers the Hypothesis profile used by the property suites.
"""

from __future__ import annotations

import sys
from pathlib import Path

from hypothesis import HealthCheck, settings

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Shard writes make examples I/O bound.
settings.register_profile(
    "test",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile("test")
