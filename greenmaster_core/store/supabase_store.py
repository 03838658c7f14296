# =============================================================================
# greenmaster_core/store/supabase_store.py
# Document Store Adapter over Supabase (remote mode)
# =============================================================================
"""
SupabaseDocumentStore - one Supabase table per collection.

Table shape (see scripts/setup_document_tables.py):
    id text primary key, data jsonb, updated_at timestamptz

Change notification is a polling refresher: a daemon thread re-reads every
subscribed collection at ``refresh_seconds`` and publishes only when the
snapshot changed. Writes issued through this adapter refresh their collection
immediately so the writer sees its own change without waiting for the poll.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from greenmaster_core.errors import DocumentStoreError
from greenmaster_core.logging import LogContext
from greenmaster_core.models import is_placeholder_id
from greenmaster_core.store.base import DocumentStore
from greenmaster_core.store.channel import CollectionChannel, Unsubscribe
from greenmaster_core.store.local_mirror import Snapshot, make_snapshot

logger = logging.getLogger(__name__)


class SupabaseDocumentStore(DocumentStore):
    """Documents kept as jsonb rows; merges are read-modify-write."""

    mode = "remote"
    PAGE_SIZE = 1000

    def __init__(self, client, refresh_seconds: float = 15.0, start_refresher: bool = True):
        """
        Args:
            client: supabase ``Client`` (from ``create_client``)
            refresh_seconds: polling interval of the change feed
            start_refresher: start the background thread on first subscribe
        """
        self.client = client
        self.refresh_seconds = refresh_seconds
        self._start_refresher = start_refresher
        self._channels: Dict[str, CollectionChannel[Snapshot]] = {}
        self._refresh_locks: Dict[str, threading.RLock] = {}
        self._lock = threading.RLock()
        self._refresh_thread: Optional[threading.Thread] = None
        self._stop_refresh = threading.Event()

    # =========================================================================
    # READ / CHANGE FEED
    # =========================================================================

    def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        """Read every row of a collection (pages of PAGE_SIZE)."""
        rows: List[Dict[str, Any]] = []
        offset = 0
        try:
            while True:
                response = (
                    self.client.table(collection)
                    .select("*")
                    .order("updated_at")
                    .range(offset, offset + self.PAGE_SIZE - 1)
                    .execute()
                )
                if not response.data:
                    break
                rows.extend(response.data)
                if len(response.data) < self.PAGE_SIZE:
                    break
                offset += self.PAGE_SIZE
        except Exception as e:
            logger.error(f"Error fetching {collection}: {e}")
            raise DocumentStoreError(
                f"Failed to read {collection}", collection=collection, operation="read"
            ) from e
        return [self._row_to_document(row) for row in rows]

    def refresh(self, collection: str) -> bool:
        """Re-read one collection; publish if it changed. Returns True on publish.

        Fetch and publish of one collection are serialized, so a slow read
        can never publish over the result of a read that started after it.
        """
        channel = self._channel(collection)
        with self._refresh_lock(collection):
            snapshot = make_snapshot(self.fetch_all(collection))
            if channel.has_value and channel.latest == snapshot:
                return False
            channel.publish(snapshot)
        return True

    def subscribe(self, collection: str, callback: Callable[[Snapshot], None]) -> Unsubscribe:
        channel = self._channel(collection)
        if not channel.has_value:
            self.refresh(collection)
        if self._start_refresher:
            self.start_refresher()
        return channel.subscribe(callback)

    def _refresh_lock(self, collection: str) -> threading.RLock:
        with self._lock:
            return self._refresh_locks.setdefault(collection, threading.RLock())

    def _channel(self, collection: str) -> CollectionChannel[Snapshot]:
        with self._lock:
            channel = self._channels.get(collection)
            if channel is None:
                channel = CollectionChannel(collection)
                self._channels[collection] = channel
            return channel

    def start_refresher(self) -> None:
        """Start the background change-feed thread."""
        if self._refresh_thread is not None and self._refresh_thread.is_alive():
            return
        self._stop_refresh.clear()
        self._refresh_thread = threading.Thread(
            target=self._refresh_loop,
            daemon=True,
            name="SupabaseRefresher",
        )
        self._refresh_thread.start()
        logger.debug("Supabase refresher started")

    def close(self) -> None:
        """Stop the background change-feed thread."""
        self._stop_refresh.set()
        if self._refresh_thread:
            self._refresh_thread.join(timeout=5)
        logger.debug("Supabase refresher stopped")

    def _refresh_loop(self) -> None:
        while not self._stop_refresh.is_set():
            if self._stop_refresh.wait(timeout=self.refresh_seconds):
                break
            for collection in list(self._channels):
                try:
                    with LogContext(logger, f"refresh {collection}", level=logging.DEBUG):
                        self.refresh(collection)
                except DocumentStoreError as e:
                    logger.error(f"Background refresh of {collection} failed: {e}")

    # =========================================================================
    # WRITES
    # =========================================================================

    def save(self, collection: str, document: Mapping[str, Any]) -> str:
        doc_id = document.get("id")
        if is_placeholder_id(doc_id):
            doc_id = self.new_id(collection)
            existing = None
        else:
            existing = self._fetch_one(collection, doc_id)

        if existing is not None:
            data = self.merge(existing, document)
        else:
            data = dict(document)
            data["id"] = doc_id
            self.validate_new(collection, data)

        self._upsert_rows(collection, [data], operation="save")
        self.refresh(collection)
        return doc_id

    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        existing = self._fetch_one(collection, doc_id)
        if existing is None:
            logger.debug(f"update ignored: {collection}/{doc_id} does not exist")
            return
        self._upsert_rows(collection, [self.merge(existing, fields)], operation="update")
        self.refresh(collection)

    def delete(self, collection: str, doc_id: str) -> None:
        try:
            self.client.table(collection).delete().eq("id", doc_id).execute()
        except Exception as e:
            logger.error(f"Error deleting {collection}/{doc_id}: {e}")
            raise DocumentStoreError(
                f"Failed to delete from {collection}",
                collection=collection, document_id=doc_id, operation="delete",
            ) from e
        self.refresh(collection)

    def seed_if_empty(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> bool:
        try:
            response = self.client.table(collection).select("id").limit(1).execute()
        except Exception as e:
            raise DocumentStoreError(
                f"Failed to inspect {collection}", collection=collection, operation="seed"
            ) from e
        if response.data:
            return False

        for doc in documents:
            self.validate_new(collection, doc)
        self._upsert_rows(collection, [dict(doc) for doc in documents], operation="seed")
        logger.info(f"Seeded {collection} with {len(documents)} sample documents")
        self.refresh(collection)
        return True

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _fetch_one(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.client.table(collection).select("*").eq("id", doc_id).execute()
        except Exception as e:
            raise DocumentStoreError(
                f"Failed to read {collection}/{doc_id}",
                collection=collection, document_id=doc_id, operation="read",
            ) from e
        if not response.data:
            return None
        return self._row_to_document(response.data[0])

    def _upsert_rows(self, collection: str, documents: List[Dict[str, Any]], operation: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        rows = [
            {"id": doc["id"], "data": doc, "updated_at": now}
            for doc in documents
        ]
        try:
            self.client.table(collection).upsert(rows).execute()
        except Exception as e:
            logger.error(f"Error writing {collection}: {e}")
            raise DocumentStoreError(
                f"Failed to write {collection}",
                collection=collection,
                document_id=documents[0]["id"] if len(documents) == 1 else None,
                operation=operation,
            ) from e

    @staticmethod
    def _row_to_document(row: Mapping[str, Any]) -> Dict[str, Any]:
        document = dict(row.get("data") or {})
        document["id"] = row["id"]
        return document
