import asyncio
import os
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.kv_store import SettingsKeyValueStore
from database.template_dao import TemplateDAO
from database.transaction_dao import TransactionDAO

from services.recurring_service import RecurringService, RunSummary
from services.template_service import TemplateService
from services.transaction_store import SqliteTransactionStore

from utils.app_config import get_db_folder, get_horizon_months, get_log_level
from utils.constants import APP_NAME, TEMPLATE_STORAGE_KEYS
from utils.logging_setup import configure_logging, get_logger

log = get_logger("budget.main")


def build_recurring_service(db: DatabaseManager, horizon_months: int) -> RecurringService:
    # ── Template stores (local key-value slots) ─────────────────────────────
    kv = SettingsKeyValueStore(db)
    expense_templates = TemplateService(
        TemplateDAO(kv, TEMPLATE_STORAGE_KEYS["expense"]), "expense"
    )
    income_templates = TemplateService(
        TemplateDAO(kv, TEMPLATE_STORAGE_KEYS["income"]), "income"
    )

    # ── Transaction stores ───────────────────────────────────────────────────
    tx_dao = TransactionDAO(db)
    return RecurringService(
        expense_templates=expense_templates,
        income_templates=income_templates,
        expense_store=SqliteTransactionStore(tx_dao, "expense"),
        income_store=SqliteTransactionStore(tx_dao, "income"),
        horizon_months=horizon_months,
    )


def main(argv: list[str] | None = None) -> RunSummary:
    argv = sys.argv[1:] if argv is None else argv
    profile_id = argv[0] if argv else None

    # ── Bootstrap: read pre-DB config ────────────────────────────────────────
    configure_logging(get_log_level())
    db = DatabaseManager.open(db_folder=get_db_folder())

    try:
        recurring_svc = build_recurring_service(db, get_horizon_months())
        summary = asyncio.run(recurring_svc.run_pending(profile_id))
    finally:
        db.close()

    log.info(
        "%s: %d templates, %d records created, %d failed, %d templates failed",
        APP_NAME, summary.templates, summary.created, summary.failed,
        summary.failed_templates,
    )
    if summary.load_failed:
        log.warning("Recurring templates could not be loaded; nothing was generated")
    return summary


if __name__ == "__main__":
    main()
