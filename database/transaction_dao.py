from decimal import Decimal
from database.db_manager import DatabaseManager
from models.transaction import Transaction, TransactionDraft
from utils.date_helpers import format_date, parse_date


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=str(row["id"]),
            profile_id=row["profile_id"],
            type=row["type"],
            amount=Decimal(row["amount"]),
            category_id=row["category_id"],
            description=row["description"],
            date=parse_date(row["date"]),
            frequency=row["frequency"],
            recurring_template_id=row["recurring_template_id"],
            created_at=row["created_at"],
        )

    def get_by_profile(self, profile_id: str, type_: str) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM transactions
               WHERE profile_id = ? AND type = ?
               ORDER BY date ASC, id ASC""",
            (profile_id, type_),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(self, draft: TransactionDraft) -> str:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO transactions
               (profile_id, type, amount, category_id, description, date,
                frequency, recurring_template_id)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                draft.profile_id, draft.type, str(draft.amount),
                draft.category_id, draft.description, format_date(draft.date),
                draft.frequency, draft.recurring_template_id,
            ),
        )
        conn.commit()
        return str(cursor.lastrowid)
