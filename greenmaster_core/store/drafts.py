# =============================================================================
# greenmaster_core/store/drafts.py
# In-progress form state kept in local slots
# =============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional

from greenmaster_core.store.kv_storage import KeyValueStorage

DRAFT_PREFIX = "GM_DRAFT_"

FORM_LOG = "LOG"
FORM_PERSON = "PERSON"
FORM_SCHEDULE = "SCHED"


class DraftStore:
    """
    Per-form draft slots: ``GM_DRAFT_<FORM>``, or ``GM_DRAFT_<key>_<FORM>``
    when the store belongs to one browser.
    """

    def __init__(self, storage: KeyValueStorage, browser_key: Optional[str] = None):
        self.storage = storage
        self.prefix = f"{DRAFT_PREFIX}{browser_key}_" if browser_key else DRAFT_PREFIX

    def slot_for(self, form: str) -> str:
        return f"{self.prefix}{form.upper()}"

    def save(self, form: str, data: Dict[str, Any]) -> None:
        self.storage.set(self.slot_for(form), data)

    def load(self, form: str) -> Optional[Dict[str, Any]]:
        data = self.storage.get(self.slot_for(form))
        return data if isinstance(data, dict) else None

    def clear(self, form: str) -> None:
        self.storage.delete(self.slot_for(form))

    def clear_all(self) -> None:
        for key in self.storage.keys(self.prefix):
            self.storage.delete(key)
