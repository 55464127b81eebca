"""
Utility functions for releaselog.
"""

from datetime import datetime, timedelta
import re

RELATIVE_PATTERN = re.compile(r'^(\d+)([mhdwM])$')

RELATIVE_UNITS = {
    'm': timedelta(minutes=1),
    'h': timedelta(hours=1),
    'd': timedelta(days=1),
    'w': timedelta(weeks=1),
    'M': timedelta(days=30),  # Approximate month
}


def parse_timespec(spec: str) -> datetime:
    """
    Parse a --since value into a datetime.

    Results are naive local time unless an ISO value carries an offset.

    Supports:
        - Relative to now: "30m", "2h", "7d", "1w", "6M"
        - ISO date or datetime: "2024-01-15", "2024-01-15T10:30:00"
        - Epoch seconds, git style: "@1700000000"

    Raises:
        ValueError: If spec cannot be parsed
    """
    spec = spec.strip()

    if spec.startswith('@') and spec[1:].isdigit():
        return datetime.fromtimestamp(int(spec[1:]))

    relative = RELATIVE_PATTERN.match(spec)
    if relative:
        amount, unit = int(relative.group(1)), relative.group(2)
        return datetime.now() - amount * RELATIVE_UNITS[unit]

    try:
        return datetime.fromisoformat(spec)
    except ValueError:
        raise ValueError(f"Cannot parse time specification: {spec}") from None
