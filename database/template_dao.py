import json
from typing import Optional

from database.kv_store import KeyValueStore
from models.recurring_template import RecurringTemplate
from utils.errors import StoreError
from utils.logging_setup import get_logger

log = get_logger("budget.database.template_dao")


class TemplateDAO:
    """Reads and writes one template collection as a JSON list under a fixed key.

    Records that fail to parse are skipped on read but written back untouched,
    so a single bad entry never costs the rest of the collection.
    """

    def __init__(self, kv: KeyValueStore, storage_key: str):
        self._kv = kv
        self._key = storage_key

    @property
    def storage_key(self) -> str:
        return self._key

    def _decode(self, raw: Optional[str]) -> list:
        """Raw JSON records of the slot; StoreError if the slot is not a JSON list."""
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except ValueError as exc:
            raise StoreError(f"Templates under {self._key!r} are not valid JSON: {exc}") from exc
        if not isinstance(items, list):
            raise StoreError(f"Templates under {self._key!r} are not a list")
        return items

    def _parse(self, item) -> Optional[RecurringTemplate]:
        try:
            return RecurringTemplate.from_dict(item)
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            log.error("Skipping malformed template in %r: %r (%s)", self._key, item, exc)
            return None

    def get_all(self) -> list[RecurringTemplate]:
        raw = self._kv.get(self._key)
        try:
            items = self._decode(raw)
        except StoreError as exc:
            # A slot that is not a JSON list reads as empty rather than blocking the app
            log.error("Could not load templates: %s", exc)
            return []
        templates = (self._parse(item) for item in items)
        return [t for t in templates if t is not None]

    def get_by_id(self, template_id: str) -> Optional[RecurringTemplate]:
        for template in self.get_all():
            if template.id == template_id:
                return template
        return None

    def _save_items(self, items: list):
        self._kv.set(self._key, json.dumps(items))

    def insert(self, template: RecurringTemplate):
        items = self._decode(self._kv.get(self._key))
        items.append(template.to_dict())
        self._save_items(items)

    def replace(self, template: RecurringTemplate) -> bool:
        items = self._decode(self._kv.get(self._key))
        for i, item in enumerate(items):
            if _item_id(item) == template.id:
                items[i] = template.to_dict()
                self._save_items(items)
                return True
        return False

    def delete(self, template_id: str) -> bool:
        items = self._decode(self._kv.get(self._key))
        remaining = [item for item in items if _item_id(item) != template_id]
        if len(remaining) == len(items):
            return False
        self._save_items(remaining)
        return True


def _item_id(item):
    return item.get("id") if isinstance(item, dict) else None
