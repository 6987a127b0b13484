from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from models.recurring_template import RecurringTemplate
from services.duplicate_detector import existing_occurrence_dates
from services.materializer import MaterializationResult, materialize
from services.occurrence_generator import default_horizon, generate
from services.template_service import TemplateService
from services.transaction_store import TransactionStore
from utils.clock import Clock, SystemClock
from utils.date_helpers import to_day
from utils.logging_setup import get_logger

log = get_logger("budget.services.recurring_service")

_ALL_PROFILES = "*"


@dataclass
class RunSummary:
    templates: int = 0
    failed_templates: int = 0
    created: int = 0
    failed: int = 0
    skipped: bool = False
    load_failed: bool = False


class RecurringService:
    """Expands recurring templates of both kinds into stored transactions.

    ``run_pending`` is meant to be awaited on every app load. It is safe to
    call repeatedly: existing occurrences are re-read from the stores each
    time, so a run interrupted half way is completed by the next one.
    """

    def __init__(
        self,
        expense_templates: TemplateService,
        income_templates: TemplateService,
        expense_store: TransactionStore,
        income_store: TransactionStore,
        clock: Clock | None = None,
        horizon_months: int = 12,
    ):
        self._templates = {"expense": expense_templates, "income": income_templates}
        self._stores = {"expense": expense_store, "income": income_store}
        self._clock = clock or SystemClock()
        self._horizon_months = horizon_months
        self._running: set[str] = set()

    # ── Management surface ───────────────────────────────────────────────────

    def add_template(
        self,
        kind: str,
        profile_id: str,
        description: str,
        amount,
        frequency: str,
        start_date,
        end_date=None,
        category_id: str | None = None,
    ) -> str:
        return self._template_service(kind).create(
            profile_id=profile_id, description=description, amount=amount,
            frequency=frequency, start_date=start_date, end_date=end_date,
            category_id=category_id,
        )

    def get_template(self, template_id: str) -> RecurringTemplate | None:
        for service in self._templates.values():
            template = service.get(template_id)
            if template is not None:
                return template
        return None

    def update_template(self, template_id: str, **fields) -> RecurringTemplate:
        template = self.get_template(template_id)
        if template is None:
            raise KeyError(template_id)
        return self._templates[template.kind].update(template_id, **fields)

    def deactivate_template(self, template_id: str):
        template = self.get_template(template_id)
        if template is None:
            log.warning("Cannot deactivate unknown template %s", template_id)
            return
        self._templates[template.kind].deactivate(template_id)

    def delete_template(self, template_id: str):
        template = self.get_template(template_id)
        if template is not None:
            self._templates[template.kind].delete(template_id)

    def list_active_templates(self, profile_id: str, kind: str | None = None) -> list[RecurringTemplate]:
        kinds = [kind] if kind else list(self._templates)
        result = []
        for k in kinds:
            result.extend(self._template_service(k).list_active(profile_id))
        return result

    def monthly_recurring_total(self, profile_id: str, kind: str) -> Decimal:
        return self._template_service(kind).monthly_total(profile_id)

    # ── Generation ───────────────────────────────────────────────────────────

    def horizon(self) -> date:
        """Target date for on-demand regeneration: today plus ``horizon_months``."""
        return default_horizon(self._clock.today(), self._horizon_months)

    async def generate_records_for_template(
        self, template: RecurringTemplate, horizon: date | None = None
    ) -> MaterializationResult:
        """Materialize the missing occurrences of one template up to ``horizon``.

        Store errors while listing existing transactions propagate; errors
        creating single records are counted in the result.
        """
        horizon = to_day(horizon) if horizon else self.horizon()
        store = self._stores[template.kind]

        existing = await store.list(template.profile_id)
        existing_dates = existing_occurrence_dates(existing, template)
        drafts = generate(template, existing_dates, horizon)
        result = await materialize(store, template.profile_id, drafts)

        if drafts:
            log.info(
                "Generated %d recurring %s records for template %s (%d failed)",
                result.created, template.kind, template.id, result.failed,
            )
        return result

    async def run_pending(
        self, profile_id: str | None = None, horizon: date | None = None
    ) -> RunSummary:
        """Generate pending records for every active template, optionally for one profile.

        Records are generated up to ``horizon``, which defaults to today.

        A failing template is logged and skipped; the others still run.
        A call overlapping a run already in progress for the same profile
        (or for all profiles) returns immediately with ``skipped`` set.
        """
        key = profile_id or _ALL_PROFILES
        if key in self._running or _ALL_PROFILES in self._running or (
            key == _ALL_PROFILES and self._running
        ):
            log.info("Recurring generation already running for %s; skipping", key)
            return RunSummary(skipped=True)

        self._running.add(key)
        try:
            return await self._run(profile_id, to_day(horizon) if horizon else self._clock.today())
        finally:
            self._running.discard(key)

    async def _run(self, profile_id: str | None, horizon: date) -> RunSummary:
        summary = RunSummary()
        try:
            templates = self.list_active_templates(profile_id) if profile_id else [
                t for service in self._templates.values() for t in service.list_active()
            ]
        except Exception:
            log.error("Could not load recurring templates", exc_info=True)
            summary.load_failed = True
            return summary
        log.info("Processing %d active recurring templates", len(templates))

        for template in templates:
            summary.templates += 1
            try:
                result = await self.generate_records_for_template(template, horizon)
            except Exception:
                summary.failed_templates += 1
                log.error(
                    "Failed to generate records for template %s", template.id,
                    exc_info=True,
                )
                continue
            summary.created += result.created
            summary.failed += result.failed
        return summary

    def _template_service(self, kind: str) -> TemplateService:
        if kind not in self._templates:
            raise ValueError(f"Invalid template kind: {kind}")
        return self._templates[kind]
