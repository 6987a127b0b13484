"""Shared fixtures: in-memory stores, a pinned clock and a wired service.

Every test gets its own config dir so nothing reads or writes ~/.budget.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

import pytest

from database.kv_store import MemoryKeyValueStore
from database.template_dao import TemplateDAO
from services.recurring_service import RecurringService
from services.template_service import TemplateService
from services.transaction_store import InMemoryTransactionStore
from utils.clock import FixedClock
from utils.constants import TEMPLATE_STORAGE_KEYS


@pytest.fixture(autouse=True)
def _isolate_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_root = tmp_path / "config"
    config_root.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("BUDGET_CONFIG_DIR", os.fspath(config_root))


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def expense_templates(kv) -> TemplateService:
    return TemplateService(TemplateDAO(kv, TEMPLATE_STORAGE_KEYS["expense"]), "expense")


@pytest.fixture
def income_templates(kv) -> TemplateService:
    return TemplateService(TemplateDAO(kv, TEMPLATE_STORAGE_KEYS["income"]), "income")


@pytest.fixture
def expense_store() -> InMemoryTransactionStore:
    return InMemoryTransactionStore("expense")


@pytest.fixture
def income_store() -> InMemoryTransactionStore:
    return InMemoryTransactionStore("income")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(date(2024, 1, 22))


@pytest.fixture
def service(expense_templates, income_templates, expense_store, income_store, clock) -> RecurringService:
    return RecurringService(
        expense_templates=expense_templates,
        income_templates=income_templates,
        expense_store=expense_store,
        income_store=income_store,
        clock=clock,
        horizon_months=0,
    )
