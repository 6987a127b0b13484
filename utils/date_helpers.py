from datetime import date, datetime
import calendar
from utils.constants import DATE_FORMAT


def today() -> date:
    return date.today()


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    # Stored timestamps such as 2024-01-31T00:00:00
    try:
        return datetime.fromisoformat(date_str).date()
    except ValueError:
        return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def to_day(value) -> date | None:
    """Normalize a date, datetime or date string to a calendar day.

    Datetimes lose their time-of-day component so repeated arithmetic
    never drifts. Returns None for empty or unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date(value.strip())
    return None


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int, anchor_day: int | None = None) -> date:
    """Add n months to date d, clamping day to month end.

    anchor_day replaces d.day as the preferred day of month, so a series
    started on the 31st returns to the 31st after a short month.
    """
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, anchor_day or d.day)
    return d.replace(year=year, month=month, day=day)
