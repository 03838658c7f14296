# =============================================================================
# greenmaster_core/store/base.py
# Document Store Adapter interface
# =============================================================================

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Sequence

from greenmaster_core.errors import DocumentValidationError
from greenmaster_core.models import ID_PREFIXES, required_document_fields
from greenmaster_core.store.channel import Unsubscribe
from greenmaster_core.store.local_mirror import Snapshot


class DocumentStore(ABC):
    """
    One interface over the backing document store.

    Mutations take the target collection first. Errors from the backend
    propagate to the caller.
    """

    mode: str = ""

    @abstractmethod
    def subscribe(self, collection: str, callback: Callable[[Snapshot], None]) -> Unsubscribe:
        """Deliver the current snapshot now and on every later change."""

    @abstractmethod
    def save(self, collection: str, document: Mapping[str, Any]) -> str:
        """Upsert by id (field-level merge); assign an id when absent or temporary.

        Returns the id of the stored document.
        """

    @abstractmethod
    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        """Merge ``fields`` into an existing document."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document; absent ids are ignored."""

    @abstractmethod
    def seed_if_empty(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> bool:
        """Write ``documents`` (ids preserved) if the collection is empty.

        Returns True when the seed was applied.
        """

    def close(self) -> None:
        """Release background resources (no-op by default)."""

    # -------------------------------------------------------------------------

    @staticmethod
    def new_id(collection: str) -> str:
        return f"{ID_PREFIXES.get(collection, 'doc')}-{uuid.uuid4().hex}"

    @staticmethod
    def validate_new(collection: str, document: Mapping[str, Any]) -> None:
        """Check the required fields of a document about to be created."""
        missing = [
            key for key in required_document_fields(collection)
            if document.get(key) is None
        ]
        if missing:
            raise DocumentValidationError(
                f"Cannot create {collection} document: missing {', '.join(missing)}",
                collection=collection,
                missing=missing,
            )

    @staticmethod
    def merge(existing: Mapping[str, Any], fields: Mapping[str, Any]) -> Dict[str, Any]:
        merged = dict(existing)
        merged.update(fields)
        merged["id"] = existing["id"]
        return merged
