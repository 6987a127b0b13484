from datetime import date
from typing import Protocol

from utils.date_helpers import today


class Clock(Protocol):
    def today(self) -> date: ...


class SystemClock:
    def today(self) -> date:
        return today()


class FixedClock:
    """Clock pinned to a given day; move it with ``advance_to``."""

    def __init__(self, day: date):
        self._day = day

    def today(self) -> date:
        return self._day

    def advance_to(self, day: date):
        self._day = day
