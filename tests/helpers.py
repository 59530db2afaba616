"""Small helpers shared by tests."""

from datetime import datetime


def ts_ms(moment: datetime) -> int:
    """Epoch milliseconds, the format run files use for ``ts``."""
    return int(moment.timestamp() * 1000)
