"""
Time-based identifiers
"""

import threading
import time


_lock = threading.Lock()
_last_ms = 0


def monotonic_ms() -> int:
    """
    Current epoch time in milliseconds, bumped when needed so that no two
    calls in this process ever return the same value
    """
    global _last_ms
    with _lock:
        _last_ms = max(time.time_ns() // 1_000_000, _last_ms + 1)
        return _last_ms


def new_campaign_id() -> str:
    return f"campaign_{monotonic_ms()}"


def new_stream_token(prefix: str) -> str:
    """Token shared by all snapshots of one reveal, e.g. 'stream-1759226400000'"""
    return f"{prefix}-{monotonic_ms()}"
