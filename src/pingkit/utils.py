"""
utils.py

Utility functions used throughout the library.
"""

import math
import socket
from typing import Optional


def resolve_ip(hostname: str) -> Optional[str]:
    """Resolve the IP address of a given hostname."""
    try:
        return socket.gethostbyname(hostname)
    except (socket.gaierror, UnicodeError, TypeError, ValueError):
        return None


def round_latency(milliseconds: float) -> int:
    """Round a latency to the nearest whole millisecond, halves up (2.5 -> 3)."""
    return max(0, int(math.floor(milliseconds + 0.5)))


def elapsed_ms(start: float, end: float) -> int:
    """Milliseconds between two perf_counter() readings, rounded."""
    return round_latency((end - start) * 1000)
