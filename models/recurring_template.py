from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from utils.date_helpers import format_date, to_day


@dataclass
class RecurringTemplate:
    id: str
    kind: str               # 'income' | 'expense'
    profile_id: str
    description: str
    amount: Decimal
    frequency: str          # 'weekly' | 'fortnightly' | 'monthly'
    start_date: date
    is_active: bool
    created_at: datetime
    category_id: Optional[str] = None   # expense templates only
    end_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "profile_id": self.profile_id,
            "description": self.description,
            "amount": str(self.amount),
            "frequency": self.frequency,
            "start_date": format_date(self.start_date),
            "end_date": format_date(self.end_date) if self.end_date else None,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "category_id": self.category_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RecurringTemplate":
        return cls(
            id=data["id"],
            kind=data["kind"],
            profile_id=data["profile_id"],
            description=data["description"],
            amount=Decimal(str(data["amount"])),
            frequency=data["frequency"],
            start_date=to_day(data["start_date"]),
            end_date=to_day(data.get("end_date")),
            is_active=bool(data.get("is_active", True)),
            created_at=datetime.fromisoformat(data["created_at"]),
            category_id=data.get("category_id"),
        )
