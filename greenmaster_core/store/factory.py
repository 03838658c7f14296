# =============================================================================
# greenmaster_core/store/factory.py
# Backend selection (done once at startup)
# =============================================================================

from __future__ import annotations

import logging

from greenmaster_core.config import AppSettings
from greenmaster_core.errors import DocumentStoreError
from greenmaster_core.store.base import DocumentStore
from greenmaster_core.store.kv_storage import KeyValueStorage
from greenmaster_core.store.local_mirror import LocalMirrorStore
from greenmaster_core.store.local_store import LocalDocumentStore
from greenmaster_core.store.supabase_store import SupabaseDocumentStore

logger = logging.getLogger(__name__)


def create_supabase_client(settings: AppSettings):
    """Create a Supabase client from resolved settings."""
    from supabase import create_client

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        raise DocumentStoreError(f"Failed to initialize Supabase client: {e}", operation="connect") from e


def create_document_store(settings: AppSettings, storage: KeyValueStorage) -> DocumentStore:
    """
    Pick the Document Store Adapter implementation.

    Remote mode needs both Supabase url and key; anything less is mock mode
    backed by the local mirror.
    """
    if settings.remote_enabled:
        logger.info("Document store: Supabase (%s)", settings.supabase_url)
        return SupabaseDocumentStore(
            create_supabase_client(settings),
            refresh_seconds=settings.refresh_seconds,
        )

    logger.info("Document store: local mirror at %s (mock mode, no Supabase credentials)", storage.db_path)
    return LocalDocumentStore(LocalMirrorStore(storage))
