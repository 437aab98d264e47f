"""
Core Utilities.

Shared utility functions used across the package.
"""

import time
from uuid import uuid4


def now_ms() -> int:
    """
    Return the current time as integer milliseconds since the Unix epoch.

    This is the unit used by note timestamps, matching documents written
    by earlier releases.
    """
    return time.time_ns() // 1_000_000


def new_id() -> str:
    """Return a fresh opaque record identifier."""
    return str(uuid4())
