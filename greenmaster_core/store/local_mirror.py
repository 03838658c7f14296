# =============================================================================
# greenmaster_core/store/local_mirror.py
# Local Mirror Store (per-collection persisted arrays with listeners)
# =============================================================================

from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Callable, Dict, List, Sequence, Tuple

from greenmaster_core.store.channel import CollectionChannel, Unsubscribe
from greenmaster_core.store.kv_storage import KeyValueStorage

logger = logging.getLogger(__name__)

SLOT_PREFIX = "greenmaster_"

Snapshot = Tuple[Dict[str, Any], ...]


def make_snapshot(documents: Sequence[Dict[str, Any]]) -> Snapshot:
    """Immutable point-in-time copy handed to listeners."""
    return tuple(copy.deepcopy(dict(doc)) for doc in documents)


class LocalMirrorStore:
    """
    Durable, synchronous, collection-scoped storage with change notification.

    ``write`` persists first and only then notifies listeners, all before it
    returns.
    """

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage
        self._channels: Dict[str, CollectionChannel[Snapshot]] = {}
        self._lock = threading.RLock()

    @staticmethod
    def slot_for(collection: str) -> str:
        return f"{SLOT_PREFIX}{collection}"

    def read(self, collection: str) -> List[Dict[str, Any]]:
        """Persisted documents for ``collection``; empty if never written."""
        documents = self.storage.get(self.slot_for(collection), default=None)
        if not isinstance(documents, list):
            return []
        return documents

    def write(self, collection: str, documents: Sequence[Dict[str, Any]]) -> None:
        with self._lock:
            self.storage.set(self.slot_for(collection), [dict(doc) for doc in documents])
            logger.debug(f"Wrote {len(documents)} documents to {collection}")
            self._channel(collection).publish(make_snapshot(documents))

    def add_listener(self, collection: str, callback: Callable[[Snapshot], None]) -> Unsubscribe:
        """Register ``callback``; it is called at once with the current contents."""
        return self._channel(collection).subscribe(callback)

    def _channel(self, collection: str) -> CollectionChannel[Snapshot]:
        with self._lock:
            channel = self._channels.get(collection)
            if channel is None:
                channel = CollectionChannel(collection)
                channel.publish(make_snapshot(self.read(collection)))
                self._channels[collection] = channel
            return channel
