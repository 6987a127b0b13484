"""Find which occurrences of a template already exist as transactions.

Transactions written by the generator carry ``recurring_template_id`` and
are matched on it. Rows without a back-reference (entered by hand, or
created before the column existed) fall back to a content match on
description and amount, plus category for expenses. The fallback conflates
templates with identical content, and editing a template's description
orphans the legacy rows it generated earlier.
"""
from collections.abc import Iterable
from datetime import date

from models.recurring_template import RecurringTemplate
from models.transaction import Transaction
from utils.date_helpers import to_day


def matches_template(tx: Transaction, template: RecurringTemplate) -> bool:
    if tx.recurring_template_id is not None:
        return tx.recurring_template_id == template.id
    if tx.description != template.description or tx.amount != template.amount:
        return False
    if template.kind == "expense":
        return tx.category_id == template.category_id
    return True


def existing_occurrence_dates(
    transactions: Iterable[Transaction], template: RecurringTemplate
) -> set[date]:
    return {
        to_day(tx.date) for tx in transactions
        if matches_template(tx, template)
    }
