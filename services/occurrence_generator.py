from collections.abc import Iterator
from datetime import date

from models.recurring_template import RecurringTemplate
from models.transaction import TransactionDraft
from services.frequency import next_occurrence
from utils.constants import ONE_TIME
from utils.date_helpers import add_months, to_day


def default_horizon(reference: date, months: int) -> date:
    """Cutoff for a run started on ``reference``: ``months`` ahead."""
    return add_months(reference, months)


def occurrence_dates(template: RecurringTemplate, horizon: date) -> Iterator[date]:
    """Yield the schedule from start_date to min(horizon, end_date), inclusive."""
    horizon = to_day(horizon)
    cursor = to_day(template.start_date)
    anchor_day = cursor.day
    while cursor <= horizon:
        if template.end_date and cursor > template.end_date:
            break
        yield cursor
        following = next_occurrence(cursor, template.frequency, anchor_day=anchor_day)
        if following <= cursor:
            raise RuntimeError(
                f"Schedule of template {template.id} did not advance past {cursor}"
            )
        cursor = following


def generate(
    template: RecurringTemplate, existing_dates: set[date], horizon: date
) -> list[TransactionDraft]:
    """Drafts for every occurrence up to ``horizon`` not in ``existing_dates``."""
    if not template.is_active or template.frequency == ONE_TIME:
        return []

    drafts = []
    for day in occurrence_dates(template, horizon):
        if day in existing_dates:
            continue
        drafts.append(TransactionDraft(
            profile_id=template.profile_id,
            type=template.kind,
            description=template.description,
            amount=template.amount,
            date=day,
            category_id=template.category_id if template.kind == "expense" else None,
            frequency=template.frequency if template.kind == "income" else None,
            recurring_template_id=template.id,
        ))
    return drafts
