import os
from datetime import datetime

# Project root: the directory holding the warp_kitten package, main.py and assets/
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Create log function (print to console and write to file for debugging)
LOG_FILE = os.environ.get("WARP_KITTEN_LOG_FILE", os.path.join(ROOT_DIR, "game_debug.log"))


def set_log_file(path):
    """Redirect the debug log file; None keeps console output only."""
    global LOG_FILE
    LOG_FILE = path


def log(msg: str):
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    line = f"[{ts}] {msg}"
    try:
        print(line)
    except Exception:
        pass
    if not LOG_FILE:
        return
    # Also append to a log file (best-effort; ignore failures)
    try:
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except Exception:
        pass
