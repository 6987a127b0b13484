from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class TransactionDraft:
    """A transaction not yet persisted; the store assigns its id."""
    profile_id: str
    type: str               # 'income' | 'expense'
    description: str
    amount: Decimal
    date: date
    category_id: Optional[str] = None    # expenses
    frequency: Optional[str] = None      # incomes: template frequency or 'one-time'
    recurring_template_id: Optional[str] = None


@dataclass
class Transaction:
    id: str
    profile_id: str
    type: str               # 'income' | 'expense'
    description: str
    amount: Decimal
    date: date
    category_id: Optional[str] = None
    frequency: Optional[str] = None
    recurring_template_id: Optional[str] = None
    created_at: str = ""

    @classmethod
    def from_draft(cls, tx_id: str, draft: TransactionDraft, created_at: str = "") -> "Transaction":
        return cls(
            id=tx_id,
            profile_id=draft.profile_id,
            type=draft.type,
            description=draft.description,
            amount=draft.amount,
            date=draft.date,
            category_id=draft.category_id,
            frequency=draft.frequency,
            recurring_template_id=draft.recurring_template_id,
            created_at=created_at,
        )
