"""
Store Module

Local Mirror Store, Document Store Adapter implementations and form drafts.
"""

from greenmaster_core.store.base import DocumentStore
from greenmaster_core.store.channel import CollectionChannel
from greenmaster_core.store.drafts import (
    FORM_LOG,
    FORM_PERSON,
    FORM_SCHEDULE,
    DraftStore,
)
from greenmaster_core.store.factory import create_document_store, create_supabase_client
from greenmaster_core.store.kv_storage import KeyValueStorage
from greenmaster_core.store.local_mirror import LocalMirrorStore, Snapshot, make_snapshot
from greenmaster_core.store.local_store import LocalDocumentStore
from greenmaster_core.store.supabase_store import SupabaseDocumentStore

__all__ = [
    "DocumentStore",
    "CollectionChannel",
    "DraftStore",
    "FORM_LOG",
    "FORM_PERSON",
    "FORM_SCHEDULE",
    "create_document_store",
    "create_supabase_client",
    "KeyValueStorage",
    "LocalMirrorStore",
    "Snapshot",
    "make_snapshot",
    "LocalDocumentStore",
    "SupabaseDocumentStore",
]
