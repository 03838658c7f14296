# =============================================================================
# greenmaster_core/state/synchronizer.py
# Collection Synchronizer (live snapshots + audited mutations)
# =============================================================================
"""
CollectionSynchronizer - owns one live snapshot per tracked collection.

Snapshots only change through the store subscription: mutation methods write
through the Document Store Adapter and return; the new state arrives via the
subscription callback. In local mode that happens before the mutation returns,
in remote mode after the post-write refresh.
"""

from __future__ import annotations

import copy
import logging
import threading
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Set, Union

from greenmaster_core.errors import GreenMasterError
from greenmaster_core.models import (
    COLLECTION_COURSES,
    COLLECTION_EVENTS,
    COLLECTION_FINANCIALS,
    COLLECTION_LOGS,
    COLLECTION_MATERIALS,
    COLLECTION_PEOPLE,
    COLLECTION_SYSTEM_LOGS,
    COLLECTION_TODOS,
    COLLECTION_USERS,
    TRACKED_COLLECTIONS,
    AuditAction,
    AuditEvent,
    AuditTarget,
    Department,
    Entity,
    ExternalEvent,
    FinancialRecord,
    GolfCourse,
    LogEntry,
    MaterialRecord,
    Person,
    TodoItem,
    UserProfile,
    UserRole,
    UserStatus,
    parse_documents,
    to_camel,
)
from greenmaster_core.state.audit import AuditLogger, now_ms
from greenmaster_core.state.people_merge import find_duplicate, merge_person_fields
from greenmaster_core.store import CollectionChannel, DocumentStore, Snapshot

logger = logging.getLogger(__name__)

DocumentLike = Union[Entity, Mapping[str, Any]]


def as_document(obj: DocumentLike) -> Dict[str, Any]:
    """Entity or mapping -> stored document (camelCase keys, enum values)."""
    if isinstance(obj, Entity):
        return obj.to_document()
    return normalize_fields(obj)


def normalize_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept snake_case or camelCase keys and typed values for partial writes."""
    normalized: Dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, list):
            value = [item.to_document() if isinstance(item, Entity) else item for item in value]
        normalized[to_camel(key)] = value
    return normalized


class CollectionSynchronizer:
    """Live per-collection snapshots plus audited add/update/delete triads."""

    def __init__(
        self,
        store: DocumentStore,
        audit: AuditLogger,
        seeds: Optional[Mapping[str, Sequence[Mapping[str, Any]]]] = None,
        collections: Sequence[str] = TRACKED_COLLECTIONS,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.audit = audit
        self.seeds = dict(seeds or {})
        self.collections = tuple(collections)
        self.clock = clock
        self._channels: Dict[str, CollectionChannel[Snapshot]] = {
            name: CollectionChannel(name) for name in self.collections
        }
        self._observed: Set[str] = set()
        self._unsubscribes: List[Callable[[], None]] = []
        self._pending_seeds: List[str] = []
        self._starting = False
        self._lock = threading.RLock()

    def with_audit(self, audit: AuditLogger) -> CollectionSynchronizer:
        """
        A view over the same snapshots whose mutations are audited by ``audit``.

        Used to give each browser session its own acting user on top of one
        shared synchronizer. The view must not be started or stopped.
        """
        view = copy.copy(self)
        view.audit = audit
        return view

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> None:
        """Open one store subscription per tracked collection."""
        with self._lock:
            if self._unsubscribes:
                return
            self._starting = True
        try:
            for name in self.collections:
                self._unsubscribes.append(
                    self.store.subscribe(name, partial(self._on_snapshot, name))
                )
                # seed outside the replay so no channel lock is held while writing
                self._seed_pending()
        finally:
            self._starting = False
        logger.info(f"Synchronizer started ({self.store.mode} mode, {len(self.collections)} collections)")

    def stop(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes.clear()

    def _on_snapshot(self, collection: str, snapshot: Snapshot) -> None:
        with self._lock:
            first = collection not in self._observed
            self._observed.add(collection)

        if first and not snapshot and self.seeds.get(collection):
            with self._lock:
                self._pending_seeds.append(collection)
            if not self._starting:
                self._seed_pending()
            return

        self._channels[collection].publish(snapshot)

    def _seed_pending(self) -> None:
        with self._lock:
            pending, self._pending_seeds = self._pending_seeds, []
        for collection in pending:
            try:
                self.store.seed_if_empty(collection, self.seeds[collection])
            except GreenMasterError as e:
                logger.error(f"Seeding {collection} failed: {e}")
                self._channels[collection].publish(())

    # =========================================================================
    # READS
    # =========================================================================

    def subscribe(
        self,
        collection: str,
        callback: Callable[[Snapshot], None],
        weak: bool = False,
    ) -> Callable[[], None]:
        """Callback gets the current snapshot (if any) now and each later one.

        With ``weak=True`` the callback (a bound method) is dropped once its
        object is garbage collected.
        """
        return self._channels[collection].subscribe(callback, weak=weak)

    def snapshot(self, collection: str) -> Snapshot:
        return self._channels[collection].latest or ()

    def find(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        for doc in self.snapshot(collection):
            if doc.get("id") == doc_id:
                return doc
        return None

    @property
    def logs(self) -> List[LogEntry]:
        return parse_documents(LogEntry, self.snapshot(COLLECTION_LOGS))

    @property
    def courses(self) -> List[GolfCourse]:
        return parse_documents(GolfCourse, self.snapshot(COLLECTION_COURSES))

    @property
    def people(self) -> List[Person]:
        return parse_documents(Person, self.snapshot(COLLECTION_PEOPLE))

    @property
    def events(self) -> List[ExternalEvent]:
        return parse_documents(ExternalEvent, self.snapshot(COLLECTION_EVENTS))

    @property
    def users(self) -> List[UserProfile]:
        return parse_documents(UserProfile, self.snapshot(COLLECTION_USERS))

    @property
    def audit_events(self) -> List[AuditEvent]:
        return parse_documents(AuditEvent, self.snapshot(COLLECTION_SYSTEM_LOGS))

    @property
    def financials(self) -> List[FinancialRecord]:
        return parse_documents(FinancialRecord, self.snapshot(COLLECTION_FINANCIALS))

    @property
    def materials(self) -> List[MaterialRecord]:
        return parse_documents(MaterialRecord, self.snapshot(COLLECTION_MATERIALS))

    @property
    def todos(self) -> List[TodoItem]:
        """Newest first."""
        items = parse_documents(TodoItem, self.snapshot(COLLECTION_TODOS))
        return sorted(items, key=lambda item: item.created_at, reverse=True)

    def course_names(self) -> Dict[str, str]:
        return {doc["id"]: doc.get("name", "") for doc in self.snapshot(COLLECTION_COURSES)}

    # =========================================================================
    # GENERIC MUTATIONS
    # =========================================================================

    def _create(self, collection: str, target: AuditTarget, document: Dict[str, Any], name_key: str) -> str:
        doc_id = self.store.save(collection, document)
        self.audit.record(AuditAction.CREATE, target, document.get(name_key, doc_id))
        return doc_id

    def _update(
        self,
        collection: str,
        target: AuditTarget,
        doc_id: str,
        fields: DocumentLike,
        name_key: str,
        details: Optional[str] = None,
    ) -> None:
        document = as_document(fields)
        document.pop("id", None)
        self.store.update(collection, doc_id, document)
        name = document.get(name_key) or self._name_of(collection, doc_id, name_key)
        self.audit.record(AuditAction.UPDATE, target, name, details)

    def _delete(self, collection: str, target: AuditTarget, doc_id: str, name_key: str) -> None:
        name = self._name_of(collection, doc_id, name_key)
        self.store.delete(collection, doc_id)
        self.audit.record(AuditAction.DELETE, target, name)

    def _name_of(self, collection: str, doc_id: str, name_key: str) -> str:
        doc = self.find(collection, doc_id)
        return (doc or {}).get(name_key) or doc_id

    # =========================================================================
    # LOGS
    # =========================================================================

    def add_log(self, log: DocumentLike) -> str:
        document = as_document(log)
        stamp = self.clock()
        document.setdefault("createdAt", stamp)
        document["updatedAt"] = stamp
        return self._create(COLLECTION_LOGS, AuditTarget.LOG, document, "title")

    def update_log(self, log_id: str, fields: DocumentLike) -> None:
        document = as_document(fields)
        document["updatedAt"] = self.clock()
        self._update(COLLECTION_LOGS, AuditTarget.LOG, log_id, document, "title")

    def delete_log(self, log_id: str) -> None:
        self._delete(COLLECTION_LOGS, AuditTarget.LOG, log_id, "title")

    # =========================================================================
    # COURSES
    # =========================================================================

    def add_course(self, course: DocumentLike) -> str:
        return self._create(COLLECTION_COURSES, AuditTarget.COURSE, as_document(course), "name")

    def update_course(self, course_id: str, fields: DocumentLike) -> None:
        self._update(COLLECTION_COURSES, AuditTarget.COURSE, course_id, fields, "name")

    def delete_course(self, course_id: str) -> None:
        self._delete(COLLECTION_COURSES, AuditTarget.COURSE, course_id, "name")

    # =========================================================================
    # PEOPLE
    # =========================================================================

    def add_person(self, person: DocumentLike) -> str:
        """Create a person, or merge into an existing one with the same normalized name."""
        document = as_document(person)
        existing = find_duplicate(self.snapshot(COLLECTION_PEOPLE), document.get("name", ""))
        if existing is None:
            return self._create(COLLECTION_PEOPLE, AuditTarget.PERSON, document, "name")

        merged = merge_person_fields(existing, document, self.course_names())
        self.store.update(COLLECTION_PEOPLE, existing["id"], merged)
        self.audit.record(
            AuditAction.UPDATE, AuditTarget.PERSON, existing.get("name", ""),
            details="Merged duplicate entry",
        )
        logger.info(f"Merged person submission into {existing['id']}")
        return existing["id"]

    def update_person(self, person_id: str, fields: DocumentLike) -> None:
        self._update(COLLECTION_PEOPLE, AuditTarget.PERSON, person_id, fields, "name")

    def delete_person(self, person_id: str) -> None:
        self._delete(COLLECTION_PEOPLE, AuditTarget.PERSON, person_id, "name")

    # =========================================================================
    # EXTERNAL EVENTS
    # =========================================================================

    def add_event(self, event: DocumentLike) -> str:
        return self._create(COLLECTION_EVENTS, AuditTarget.EVENT, as_document(event), "title")

    def update_event(self, event_id: str, fields: DocumentLike) -> None:
        self._update(COLLECTION_EVENTS, AuditTarget.EVENT, event_id, fields, "title")

    def delete_event(self, event_id: str) -> None:
        self._delete(COLLECTION_EVENTS, AuditTarget.EVENT, event_id, "title")

    # =========================================================================
    # FINANCIALS / MATERIALS
    # =========================================================================

    def _financial_label(self, document: Mapping[str, Any]) -> str:
        course = self.course_names().get(document.get("courseId"), document.get("courseId", ""))
        return f"{course} {document.get('year', '')}".strip()

    def add_financial(self, record: DocumentLike) -> str:
        document = as_document(record)
        document["updatedAt"] = self.clock()
        doc_id = self.store.save(COLLECTION_FINANCIALS, document)
        self.audit.record(AuditAction.CREATE, AuditTarget.FINANCE, self._financial_label(document))
        return doc_id

    def update_financial(self, record_id: str, fields: DocumentLike) -> None:
        document = as_document(fields)
        document.pop("id", None)
        document["updatedAt"] = self.clock()
        self.store.update(COLLECTION_FINANCIALS, record_id, document)
        existing = self.find(COLLECTION_FINANCIALS, record_id) or document
        self.audit.record(AuditAction.UPDATE, AuditTarget.FINANCE, self._financial_label(existing))

    def delete_financial(self, record_id: str) -> None:
        label = self._financial_label(self.find(COLLECTION_FINANCIALS, record_id) or {"courseId": record_id})
        self.store.delete(COLLECTION_FINANCIALS, record_id)
        self.audit.record(AuditAction.DELETE, AuditTarget.FINANCE, label)

    def add_material(self, record: DocumentLike) -> str:
        return self._create(COLLECTION_MATERIALS, AuditTarget.MATERIAL, as_document(record), "name")

    def update_material(self, record_id: str, fields: DocumentLike) -> None:
        self._update(COLLECTION_MATERIALS, AuditTarget.MATERIAL, record_id, fields, "name")

    def delete_material(self, record_id: str) -> None:
        self._delete(COLLECTION_MATERIALS, AuditTarget.MATERIAL, record_id, "name")

    # =========================================================================
    # ADMIN TO-DO BOARD
    # =========================================================================

    def add_todo(self, text: str, author: str) -> str:
        document = {
            "text": text.strip(),
            "author": author,
            "isCompleted": False,
            "createdAt": self.clock(),
        }
        return self._create(COLLECTION_TODOS, AuditTarget.TODO, document, "text")

    def update_todo(self, todo_id: str, fields: DocumentLike) -> None:
        self._update(COLLECTION_TODOS, AuditTarget.TODO, todo_id, fields, "text")

    def toggle_todo(self, todo_id: str) -> None:
        doc = self.find(COLLECTION_TODOS, todo_id)
        if doc is None:
            logger.debug(f"toggle ignored: todos/{todo_id} does not exist")
            return
        done = not doc.get("isCompleted", False)
        self._update(
            COLLECTION_TODOS, AuditTarget.TODO, todo_id, {"isCompleted": done}, "text",
            details="Completed" if done else "Reopened",
        )

    def delete_todo(self, todo_id: str) -> None:
        self._delete(COLLECTION_TODOS, AuditTarget.TODO, todo_id, "text")

    # =========================================================================
    # USER ADMINISTRATION
    # =========================================================================

    def update_user_status(self, user_id: str, status: UserStatus) -> None:
        self.store.update(COLLECTION_USERS, user_id, {"status": status.value})
        action = {
            UserStatus.APPROVED: AuditAction.APPROVE,
            UserStatus.REJECTED: AuditAction.REJECT,
        }.get(status, AuditAction.UPDATE)
        self.audit.record(
            action, AuditTarget.USER, self._name_of(COLLECTION_USERS, user_id, "name"),
            details=f"Status -> {status.value}",
        )

    def update_user_role(self, user_id: str, role: UserRole) -> None:
        self.store.update(COLLECTION_USERS, user_id, {"role": role.value})
        self.audit.record(
            AuditAction.UPDATE, AuditTarget.USER, self._name_of(COLLECTION_USERS, user_id, "name"),
            details=f"Role -> {role.value}",
        )

    def update_user_department(self, user_id: str, department: Department) -> None:
        self.store.update(COLLECTION_USERS, user_id, {"department": department.value})
        self.audit.record(
            AuditAction.UPDATE, AuditTarget.USER, self._name_of(COLLECTION_USERS, user_id, "name"),
            details=f"Department -> {department.value}",
        )
