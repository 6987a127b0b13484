from dataclasses import dataclass, field

from models.transaction import TransactionDraft
from services.transaction_store import TransactionStore
from utils.logging_setup import get_logger

log = get_logger("budget.services.materializer")


@dataclass
class MaterializationResult:
    created: int = 0
    failed: int = 0
    created_ids: list[str] = field(default_factory=list)

    def add(self, other: "MaterializationResult"):
        self.created += other.created
        self.failed += other.failed
        self.created_ids.extend(other.created_ids)


async def materialize(
    store: TransactionStore, profile_id: str, drafts: list[TransactionDraft]
) -> MaterializationResult:
    """Create each draft in order; a failed create is logged and skipped.

    Nothing is rolled back. Drafts that failed are simply still missing on
    the next run and get regenerated then.
    """
    result = MaterializationResult()
    for draft in drafts:
        try:
            tx_id = await store.create(profile_id, draft)
        except Exception:
            result.failed += 1
            log.error(
                "Failed to create recurring %s (template=%s, date=%s, amount=%s, description=%r)",
                draft.type, draft.recurring_template_id, draft.date,
                draft.amount, draft.description,
                exc_info=True,
            )
            continue
        result.created += 1
        result.created_ids.append(tx_id)
        log.info(
            "Generated recurring %s record %s (template=%s, date=%s, amount=%s)",
            draft.type, tx_id, draft.recurring_template_id, draft.date, draft.amount,
        )
    return result
