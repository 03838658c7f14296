# =============================================================================
# greenmaster_core/context.py
# Composition root
# =============================================================================
"""
AppContext wires one Document Store Adapter, the Collection Synchronizer, the
Audit Logger, the Session/Identity Manager and the AI services together.

Build it once with ``build_app_context()`` and pass it to whatever needs it.
When several browser sessions share one process, build and start one context
and give each browser ``context.for_session(key)``: the store and the
snapshots are shared; the session user, its audit identity and the form
drafts are the browser's own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from greenmaster_core.ai import AIGateway, GreenMasterInsights
from greenmaster_core.auth import Capabilities, SessionManager, session_slot
from greenmaster_core.config import AppSettings, load_settings
from greenmaster_core.models import UserProfile, seed_documents
from greenmaster_core.state import AuditLogger, CollectionSynchronizer
from greenmaster_core.store import (
    DocumentStore,
    DraftStore,
    KeyValueStorage,
    create_document_store,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: AppSettings
    storage: KeyValueStorage
    store: DocumentStore
    audit: AuditLogger
    sync: CollectionSynchronizer
    session: SessionManager
    drafts: DraftStore
    insights: GreenMasterInsights
    owns_backend: bool = True

    @property
    def user(self) -> Optional[UserProfile]:
        return self.session.user

    @property
    def capabilities(self) -> Capabilities:
        return self.session.capabilities

    @property
    def mock_mode(self) -> bool:
        return self.store.mode == "local"

    def start(self) -> AppContext:
        """Open subscriptions (and seed empty collections)."""
        if self.owns_backend:
            self.sync.start()
        self.session.start()
        return self

    def close(self) -> None:
        self.session.stop()
        if self.owns_backend:
            self.sync.stop()
            self.store.close()

    def for_session(self, browser_key: str) -> AppContext:
        """
        Per-browser context over this context's store and snapshots.

        The result has its own SessionManager (slot ``greenmaster_user_<key>``),
        audit identity and draft slots. Closing it never stops the shared
        synchronizer or store. Call ``start()`` on it.
        """
        audit = AuditLogger(self.store, current_user=lambda: None, clock=self.audit.clock)
        sync = self.sync.with_audit(audit)
        session = SessionManager(sync, self.storage, audit, slot=session_slot(browser_key))
        audit.current_user = lambda: session.user
        return AppContext(
            settings=self.settings,
            storage=self.storage,
            store=self.store,
            audit=audit,
            sync=sync,
            session=session,
            drafts=DraftStore(self.storage, browser_key=browser_key),
            insights=self.insights,
            owns_backend=False,
        )


def build_app_context(
    settings: Optional[AppSettings] = None,
    storage: Optional[KeyValueStorage] = None,
    store: Optional[DocumentStore] = None,
    gateway: Optional[AIGateway] = None,
) -> AppContext:
    """
    Assemble an AppContext. Arguments left out are built from ``settings``.

    The context is not started; call ``start()``.
    """
    settings = settings or load_settings()
    storage = storage or KeyValueStorage(settings.db_path)
    store = store or create_document_store(settings, storage)

    audit = AuditLogger(store, current_user=lambda: None)
    sync = CollectionSynchronizer(store, audit, seeds=seed_documents())
    session = SessionManager(sync, storage, audit)
    audit.current_user = lambda: session.user

    gateway = gateway or AIGateway.from_settings(settings)
    return AppContext(
        settings=settings,
        storage=storage,
        store=store,
        audit=audit,
        sync=sync,
        session=session,
        drafts=DraftStore(storage),
        insights=GreenMasterInsights(gateway),
    )
