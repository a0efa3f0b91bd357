import os
import time
import threading
from collections import deque

# Debug logging
DEBUG_LOG_PATH = os.environ.get(
    "SOCKWATCH_DEBUG_LOG",
    os.path.expanduser("~/.config/sockwatch/debug.log"),
)
RECENT_LOG_SIZE = 200

_recent_lines = deque(maxlen=RECENT_LOG_SIZE)
_recent_lock = threading.Lock()


def debug_log(msg):
    """Write a timestamped message to the debug log."""
    line = f"[{time.strftime('%Y-%m-%d %H:%M:%S')}] {msg}"
    with _recent_lock:
        _recent_lines.append(line)
    try:
        os.makedirs(os.path.dirname(DEBUG_LOG_PATH), exist_ok=True)
        with open(DEBUG_LOG_PATH, "a") as f:
            f.write(line + "\n")
    except OSError:
        pass


def recent_log_lines(limit=None):
    """Return the most recent log lines, oldest first."""
    with _recent_lock:
        lines = list(_recent_lines)
    if limit is not None:
        lines = lines[-limit:] if limit > 0 else []
    return lines
