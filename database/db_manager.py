import sqlite3
import os
from utils.constants import DB_FILE


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema; safe to call on every startup."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        conn.commit()

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Idempotent ALTER TABLE for columns added after initial release."""
        cols = {row[1] for row in conn.execute("PRAGMA table_info(transactions)").fetchall()}
        if "frequency" not in cols:
            conn.execute("ALTER TABLE transactions ADD COLUMN frequency TEXT")
        if "recurring_template_id" not in cols:
            conn.execute("ALTER TABLE transactions ADD COLUMN recurring_template_id TEXT")
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_transactions_template "
            "ON transactions(recurring_template_id)"
        )

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS transactions (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                profile_id   TEXT NOT NULL,
                type         TEXT NOT NULL CHECK(type IN ('income','expense')),
                amount       TEXT NOT NULL,
                category_id  TEXT,
                description  TEXT NOT NULL DEFAULT '',
                date         TEXT NOT NULL,
                frequency    TEXT,
                recurring_template_id TEXT,
                created_at   TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_profile ON transactions(profile_id, type);
            CREATE INDEX IF NOT EXISTS idx_transactions_date    ON transactions(date);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the DB in db_folder or the CWD."""
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            db_path = os.path.join(db_folder, DB_FILE)
        else:
            db_path = DB_FILE
        db = DatabaseManager(db_path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
