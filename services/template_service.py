import uuid
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from database.template_dao import TemplateDAO
from models.recurring_template import RecurringTemplate
from services.frequency import monthly_equivalent
from utils.constants import (
    MAX_AMOUNT, MAX_DESCRIPTION_LENGTH, ONE_TIME, RECURRING_FREQUENCIES,
    TEMPLATE_ID_PREFIXES,
)
from utils.date_helpers import to_day
from utils.errors import ValidationError
from utils.logging_setup import get_logger

log = get_logger("budget.services.template_service")

_EDITABLE_FIELDS = {
    "profile_id", "description", "amount", "frequency",
    "start_date", "end_date", "category_id", "is_active",
}


class TemplateService:
    """CRUD over one kind of recurring template ('expense' or 'income')."""

    def __init__(self, dao: TemplateDAO, kind: str):
        if kind not in TEMPLATE_ID_PREFIXES:
            raise ValueError(f"Invalid template kind: {kind}")
        self._dao = dao
        self.kind = kind

    def list_all(self) -> list[RecurringTemplate]:
        return self._dao.get_all()

    def list_by_profile(self, profile_id: str) -> list[RecurringTemplate]:
        return [t for t in self._dao.get_all() if t.profile_id == profile_id]

    def list_active(self, profile_id: str | None = None) -> list[RecurringTemplate]:
        return [
            t for t in self._dao.get_all()
            if t.is_active
            and t.frequency != ONE_TIME
            and (profile_id is None or t.profile_id == profile_id)
        ]

    def get(self, template_id: str) -> RecurringTemplate | None:
        return self._dao.get_by_id(template_id)

    def create(
        self,
        profile_id: str,
        description: str,
        amount,
        frequency: str,
        start_date,
        end_date=None,
        category_id: str | None = None,
    ) -> str:
        template = RecurringTemplate(
            id=f"{TEMPLATE_ID_PREFIXES[self.kind]}_{uuid.uuid4().hex}",
            kind=self.kind,
            profile_id=profile_id,
            description=description,
            amount=amount,
            frequency=frequency,
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            is_active=True,
            created_at=datetime.now(),
        )
        template = self._validated(template)
        self._dao.insert(template)
        log.info(
            "Added recurring %s template %s (profile=%s, frequency=%s)",
            self.kind, template.id, profile_id, template.frequency,
        )
        return template.id

    def update(self, template_id: str, **fields) -> RecurringTemplate:
        """Merge ``fields`` into the template. Passing ``end_date=None`` clears it."""
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        existing = self._dao.get_by_id(template_id)
        if existing is None:
            raise KeyError(template_id)
        updated = self._validated(replace(existing, **fields))
        self._dao.replace(updated)
        log.info("Updated recurring %s template %s", self.kind, template_id)
        return updated

    def deactivate(self, template_id: str):
        template = self._dao.get_by_id(template_id)
        if template is None:
            log.warning("Cannot deactivate unknown template %s", template_id)
            return
        if template.is_active:
            self._dao.replace(replace(template, is_active=False))
        log.info("Deactivated recurring %s template %s", self.kind, template_id)

    def delete(self, template_id: str):
        if self._dao.delete(template_id):
            log.info("Deleted recurring %s template %s", self.kind, template_id)

    def monthly_total(self, profile_id: str) -> Decimal:
        total = Decimal("0.00")
        for template in self.list_active(profile_id):
            total += monthly_equivalent(template.amount, template.frequency)
        return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def _validated(self, template: RecurringTemplate) -> RecurringTemplate:
        """Return the template with normalized fields, or raise ValidationError."""
        if not isinstance(template.profile_id, str) or not template.profile_id.strip():
            raise ValidationError("Profile is required.")

        description = template.description.strip() if isinstance(template.description, str) else ""
        if not description:
            raise ValidationError("Description is required.")
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Description must be less than {MAX_DESCRIPTION_LENGTH} characters."
            )

        amount = _to_amount(template.amount)
        if amount <= 0:
            raise ValidationError("Amount must be positive.")
        if amount > MAX_AMOUNT:
            raise ValidationError("Amount must be less than 1,000,000.")

        if template.frequency == ONE_TIME:
            raise ValidationError("One-time entries cannot be recurring.")
        if template.frequency not in RECURRING_FREQUENCIES:
            raise ValidationError("Invalid frequency.")

        start = to_day(template.start_date)
        if start is None:
            raise ValidationError("Invalid start date.")
        end = None
        if template.end_date is not None:
            end = to_day(template.end_date)
            if end is None:
                raise ValidationError("Invalid end date.")
            if end < start:
                raise ValidationError("End date cannot be before start date.")

        if self.kind == "expense" and not template.category_id:
            raise ValidationError("Category is required.")
        if self.kind == "income" and template.category_id is not None:
            raise ValidationError("Income templates have no category.")

        return replace(
            template,
            description=description,
            amount=amount,
            start_date=start,
            end_date=end,
            is_active=bool(template.is_active),
        )


def _to_amount(raw) -> Decimal:
    if isinstance(raw, bool) or raw is None:
        raise ValidationError("Amount must be a number.")
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a number.")
    if not amount.is_finite():
        raise ValidationError("Amount must be a number.")
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
