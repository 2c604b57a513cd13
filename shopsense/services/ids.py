import threading
import time

_lock = threading.Lock()
_last_ms = 0


def new_id(suffix: str = "") -> str:
    """Clock-derived id in epoch milliseconds, strictly increasing within the process.

    Two calls inside the same millisecond get consecutive values instead of
    colliding.
    """
    global _last_ms
    with _lock:
        now_ms = int(time.time() * 1000)
        _last_ms = max(now_ms, _last_ms + 1)
        return f"{_last_ms}{suffix}"
