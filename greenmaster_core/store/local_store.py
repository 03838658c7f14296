# =============================================================================
# greenmaster_core/store/local_store.py
# Document Store Adapter over the Local Mirror Store ("mock mode")
# =============================================================================

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Sequence

from greenmaster_core.models import is_placeholder_id
from greenmaster_core.store.base import DocumentStore
from greenmaster_core.store.channel import Unsubscribe
from greenmaster_core.store.local_mirror import LocalMirrorStore, Snapshot

logger = logging.getLogger(__name__)


class LocalDocumentStore(DocumentStore):
    """Whole-array read/modify/write against the local mirror."""

    mode = "local"

    def __init__(self, mirror: LocalMirrorStore):
        self.mirror = mirror
        self._lock = threading.RLock()

    def subscribe(self, collection: str, callback: Callable[[Snapshot], None]) -> Unsubscribe:
        return self.mirror.add_listener(collection, callback)

    def save(self, collection: str, document: Mapping[str, Any]) -> str:
        with self._lock:
            documents = self.mirror.read(collection)
            doc_id = document.get("id")

            if not is_placeholder_id(doc_id):
                for idx, existing in enumerate(documents):
                    if existing.get("id") == doc_id:
                        documents[idx] = self.merge(existing, document)
                        self.mirror.write(collection, documents)
                        return doc_id
            else:
                doc_id = self.new_id(collection)

            new_doc = dict(document)
            new_doc["id"] = doc_id
            self.validate_new(collection, new_doc)
            documents.append(new_doc)
            self.mirror.write(collection, documents)
            return doc_id

    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        with self._lock:
            documents = self.mirror.read(collection)
            for idx, existing in enumerate(documents):
                if existing.get("id") == doc_id:
                    documents[idx] = self.merge(existing, fields)
                    self.mirror.write(collection, documents)
                    return
            logger.debug(f"update ignored: {collection}/{doc_id} does not exist")

    def delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            documents = self.mirror.read(collection)
            remaining = [doc for doc in documents if doc.get("id") != doc_id]
            if len(remaining) != len(documents):
                self.mirror.write(collection, remaining)

    def seed_if_empty(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> bool:
        with self._lock:
            if self.mirror.read(collection):
                return False
            for doc in documents:
                self.validate_new(collection, doc)
            self.mirror.write(collection, [dict(doc) for doc in documents])
            logger.info(f"Seeded {collection} with {len(documents)} sample documents")
            return True
