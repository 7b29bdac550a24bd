"""Wall-clock source in epoch milliseconds."""
from datetime import UTC, datetime
from typing import Callable

Clock = Callable[[], int]


def system_clock() -> int:
    """Return the current time in milliseconds since the epoch."""
    return int(datetime.now(UTC).timestamp() * 1000)
