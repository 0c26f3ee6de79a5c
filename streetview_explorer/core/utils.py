"""
Utility functions for the Street View Explorer service.
"""
from datetime import datetime, timezone


def format_kb(num_bytes: int) -> str:
    """
    Render a byte count as whole kilobytes, e.g. 43520 -> '43KB'. Halves round up.
    """
    return f"{int(num_bytes / 1024 + 0.5)}KB"


def iso_timestamp(epoch_seconds: float) -> str:
    """Convert a POSIX timestamp to an ISO-8601 UTC string."""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).isoformat()
