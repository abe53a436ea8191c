"""Shared helpers."""

import sys
from datetime import datetime


def log(message: str):
    """Print timestamped log message to stderr for visibility."""
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {message}", file=sys.stderr, flush=True)
