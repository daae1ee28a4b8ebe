"""Date, rounding and tick sampling helpers used alongside the layout."""
import math
from datetime import date, datetime, timezone
from typing import Any, Sequence, Union

import numpy as np

MS_PER_DAY = 86_400_000

Timestamp = Union[datetime, date, str, np.datetime64, int, float]


def _as_datetime64(value: Timestamp) -> np.datetime64:
    """
    Coerce a timestamp to millisecond ``datetime64``.

    Strings are parsed as ISO-8601, numbers are epoch milliseconds and aware
    datetimes are converted to UTC before the timezone is dropped.
    """
    if isinstance(value, np.datetime64):
        return value.astype("datetime64[ms]")
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return np.datetime64(value, "ms")
    if isinstance(value, date):
        return np.datetime64(value, "ms")
    return np.datetime64(int(value), "ms")


def date_diff(a: Timestamp, b: Timestamp) -> int:
    """Whole days from ``b`` to ``a``, floored (negative when ``a`` is earlier)."""
    delta_ms = (_as_datetime64(a) - _as_datetime64(b)).astype(np.int64)
    return int(delta_ms // MS_PER_DAY)


def round_to_nearest(value: float, step: float) -> float:
    """Round ``value`` to the nearest multiple of ``step``; halves round up."""
    return math.floor(value / step + 0.5) * step


def max_tick_values(max_ticks: int, domain: Sequence[Any]) -> Sequence[Any]:
    """
    Evenly sample at most ``max_ticks`` values from ``domain``.

    A domain that already fits is returned as is (same object). Otherwise
    sampling starts at ``domain[0]`` and steps ``len(domain) // max_ticks``
    indices, e.g. ``max_tick_values(5, range(1, 11))`` gives ``[1, 3, 5, 7, 9]``.
    """
    if len(domain) <= max_ticks:
        return domain
    if max_ticks <= 0:
        return []

    step = len(domain) // max_ticks
    indices = np.arange(max_ticks) * step
    return [domain[i] for i in indices.tolist()]
