"""Async transaction stores keyed by profile.

Both implementations accept any number of identical rows; deduplication is
the generator's job, not the store's.
"""
import asyncio
import itertools
import sqlite3
import threading
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from database.transaction_dao import TransactionDAO
from models.transaction import Transaction, TransactionDraft
from utils.errors import StoreError


class TransactionStore(Protocol):
    async def list(self, profile_id: str) -> list[Transaction]: ...

    async def create(self, profile_id: str, draft: TransactionDraft) -> str: ...


class InMemoryTransactionStore:
    def __init__(self, type_: str):
        self.type = type_
        self._rows: dict[str, list[Transaction]] = {}
        self._ids = itertools.count(1)

    def all_rows(self) -> list[Transaction]:
        return [tx for rows in self._rows.values() for tx in rows]

    async def list(self, profile_id: str) -> list[Transaction]:
        return list(self._rows.get(profile_id, []))

    async def create(self, profile_id: str, draft: TransactionDraft) -> str:
        tx_id = f"{self.type}_{next(self._ids)}"
        tx = Transaction.from_draft(
            tx_id,
            replace(draft, profile_id=profile_id, type=self.type),
            created_at=datetime.now().isoformat(),
        )
        self._rows.setdefault(profile_id, []).append(tx)
        return tx_id


class SqliteTransactionStore:
    """Runs TransactionDAO calls off the event loop, one at a time."""

    def __init__(self, dao: TransactionDAO, type_: str):
        self._dao = dao
        self.type = type_
        self._lock = threading.Lock()

    def _locked(self, fn, *args):
        with self._lock:
            try:
                return fn(*args)
            except sqlite3.Error as exc:
                raise StoreError(f"{self.type} store: {exc}") from exc

    async def list(self, profile_id: str) -> list[Transaction]:
        return await asyncio.to_thread(
            self._locked, self._dao.get_by_profile, profile_id, self.type
        )

    async def create(self, profile_id: str, draft: TransactionDraft) -> str:
        draft = replace(draft, profile_id=profile_id, type=self.type)
        return await asyncio.to_thread(self._locked, self._dao.create, draft)
