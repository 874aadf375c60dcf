"""Centralised wall-clock helper — single source of truth for 'now'.

The extraction cache stamps and expires entries through ``now_ts``; tests
inject their own clock instead of sleeping.

Usage:
    from articlex.utils.clock import now_ts
"""

from __future__ import annotations

import time


def now_ts() -> float:
    """Return the current time as epoch seconds."""
    return time.time()
