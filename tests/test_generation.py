"""Occurrence generation and duplicate detection (pure, no stores)."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from models.recurring_template import RecurringTemplate
from models.transaction import Transaction
from services.duplicate_detector import existing_occurrence_dates
from services.occurrence_generator import default_horizon, generate, occurrence_dates


def _template(**overrides) -> RecurringTemplate:
    fields = dict(
        id="recurring_expense_1",
        kind="expense",
        profile_id="p1",
        description="Gym",
        amount=Decimal("25.00"),
        frequency="weekly",
        start_date=date(2024, 1, 1),
        is_active=True,
        created_at=datetime(2023, 12, 1),
        category_id="health",
    )
    fields.update(overrides)
    return RecurringTemplate(**fields)


def _tx(day: date, **overrides) -> Transaction:
    fields = dict(
        id=f"tx_{day.isoformat()}",
        profile_id="p1",
        type="expense",
        description="Gym",
        amount=Decimal("25.00"),
        date=day,
        category_id="health",
    )
    fields.update(overrides)
    return Transaction(**fields)


def test_weekly_coverage_up_to_horizon_inclusive():
    drafts = generate(_template(), set(), date(2024, 1, 22))
    assert [d.date for d in drafts] == [
        date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22),
    ]


def test_end_date_clamps_series():
    drafts = generate(_template(end_date=date(2024, 1, 10)), set(), date(2024, 1, 22))
    assert [d.date for d in drafts] == [date(2024, 1, 1), date(2024, 1, 8)]


def test_existing_dates_are_skipped():
    drafts = generate(_template(), {date(2024, 1, 8)}, date(2024, 1, 22))
    assert [d.date for d in drafts] == [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 22)]


def test_monthly_month_end_policy():
    template = _template(frequency="monthly", start_date=date(2024, 1, 31))
    drafts = generate(template, set(), date(2024, 4, 30))
    assert [d.date for d in drafts] == [
        date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30),
    ]


def test_fortnightly_series():
    template = _template(frequency="fortnightly")
    assert list(occurrence_dates(template, date(2024, 2, 1))) == [
        date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29),
    ]


@pytest.mark.parametrize(
    "overrides",
    [{"is_active": False}, {"frequency": "one-time"}],
)
def test_inactive_or_one_time_generates_nothing(overrides):
    assert generate(_template(**overrides), set(), date(2025, 1, 1)) == []


def test_horizon_before_start_generates_nothing():
    assert generate(_template(start_date=date(2024, 2, 1)), set(), date(2024, 1, 31)) == []


def test_expense_draft_fields():
    draft = generate(_template(), set(), date(2024, 1, 1))[0]
    assert draft.profile_id == "p1"
    assert draft.type == "expense"
    assert draft.description == "Gym"
    assert draft.amount == Decimal("25.00")
    assert draft.category_id == "health"
    assert draft.frequency is None
    assert draft.recurring_template_id == "recurring_expense_1"


def test_income_draft_carries_frequency_tag():
    template = _template(id="recurring_income_1", kind="income", category_id=None, frequency="fortnightly")
    draft = generate(template, set(), date(2024, 1, 1))[0]
    assert draft.type == "income"
    assert draft.frequency == "fortnightly"
    assert draft.category_id is None


def test_default_horizon_is_months_ahead():
    assert default_horizon(date(2024, 1, 22), 12) == date(2025, 1, 22)


def test_detector_matches_back_reference_first():
    template = _template()
    transactions = [
        _tx(date(2024, 1, 1), recurring_template_id="recurring_expense_1", description="Renamed"),
        _tx(date(2024, 1, 8), recurring_template_id="recurring_expense_other"),
        _tx(date(2024, 1, 15)),
    ]
    assert existing_occurrence_dates(transactions, template) == {
        date(2024, 1, 1), date(2024, 1, 15),
    }


def test_detector_content_fallback_requires_exact_fields():
    template = _template()
    transactions = [
        _tx(date(2024, 1, 1), amount=Decimal("25")),
        _tx(date(2024, 1, 8), amount=Decimal("26.00")),
        _tx(date(2024, 1, 15), description="gym"),
        _tx(date(2024, 1, 22), category_id="other"),
        _tx(datetime(2024, 1, 29, 18, 45)),
    ]
    assert existing_occurrence_dates(transactions, template) == {
        date(2024, 1, 1), date(2024, 1, 29),
    }


def test_detector_ignores_category_for_income():
    template = _template(kind="income", category_id=None)
    transactions = [_tx(date(2024, 1, 1), type="income", category_id=None)]
    assert existing_occurrence_dates(transactions, template) == {date(2024, 1, 1)}
