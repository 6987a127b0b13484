from datetime import date, timedelta
from decimal import Decimal

from utils.constants import MONTHLY_FACTORS, WEEK_INTERVALS
from utils.date_helpers import add_months, to_day
from utils.errors import UnsupportedFrequency


def next_occurrence(d: date, frequency: str, anchor_day: int | None = None) -> date:
    """Return the occurrence following ``d`` for the given frequency.

    Monthly steps clamp to the last day of short months. ``anchor_day`` is
    the series' preferred day of month (normally the start date's day), so
    Jan 31 -> Feb 29 -> Mar 31 instead of settling on the 29th.
    """
    current = to_day(d)
    if current is None:
        raise ValueError(f"Invalid date: {d!r}")
    if frequency in WEEK_INTERVALS:
        return current + timedelta(days=WEEK_INTERVALS[frequency])
    if frequency == "monthly":
        return add_months(current, 1, anchor_day=anchor_day)
    raise UnsupportedFrequency(frequency)


def monthly_equivalent(amount: Decimal, frequency: str) -> Decimal:
    """Approximate monthly cost of an amount recurring at ``frequency``, unrounded."""
    if frequency not in MONTHLY_FACTORS:
        raise UnsupportedFrequency(frequency)
    return Decimal(amount) * MONTHLY_FACTORS[frequency]
