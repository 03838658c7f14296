# =============================================================================
# greenmaster_core/models/entities.py
# Typed GreenMaster Entities
# =============================================================================
"""
One dataclass per tracked collection.

Documents are stored as plain dicts with camelCase keys (``courseId``,
``createdAt``...). ``from_document()`` / ``to_document()`` convert between the
stored form and these typed variants. Enum fields are stored by value.
"""

from __future__ import annotations

import logging
from dataclasses import MISSING, dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from greenmaster_core.errors import DocumentValidationError
from greenmaster_core.models.collections import (
    COLLECTION_COURSES,
    COLLECTION_EVENTS,
    COLLECTION_FINANCIALS,
    COLLECTION_LOGS,
    COLLECTION_MATERIALS,
    COLLECTION_PEOPLE,
    COLLECTION_SYSTEM_LOGS,
    COLLECTION_TODOS,
    COLLECTION_USERS,
)
from greenmaster_core.models.enums import (
    AffinityLevel,
    AuditAction,
    AuditTarget,
    CourseType,
    Department,
    EventSource,
    EventType,
    GrassType,
    MaterialCategory,
    UserRole,
    UserStatus,
)

logger = logging.getLogger(__name__)


def to_camel(name: str) -> str:
    """course_id -> courseId"""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _coerce_enum(enum_cls, value):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        pass
    if isinstance(value, str) and value in enum_cls.__members__:
        return enum_cls[value]
    raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}")


def _enum_field(enum_cls, default=MISSING):
    if default is MISSING:
        return field(metadata={"enum": enum_cls})
    return field(default=default, metadata={"enum": enum_cls})


# =============================================================================
# BASE
# =============================================================================

class Entity:
    """Mixin for document-backed dataclasses."""

    COLLECTION: ClassVar[str] = ""

    @classmethod
    def required_fields(cls) -> Tuple[str, ...]:
        """Stored (camelCase) names of fields that have no default, minus ``id``."""
        return tuple(
            to_camel(f.name)
            for f in fields(cls)
            if f.name != "id" and f.default is MISSING and f.default_factory is MISSING
        )

    @classmethod
    def from_document(cls, doc: Dict[str, Any]):
        missing = [
            to_camel(f.name)
            for f in fields(cls)
            if f.default is MISSING and f.default_factory is MISSING
            and to_camel(f.name) not in doc
        ]
        if missing:
            raise DocumentValidationError(
                f"{cls.__name__} document is missing required fields",
                collection=cls.COLLECTION,
                missing=missing,
            )

        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            key = to_camel(f.name)
            if key not in doc:
                continue
            value = doc[key]
            if "enum" in f.metadata:
                try:
                    value = _coerce_enum(f.metadata["enum"], value)
                except ValueError as e:
                    raise DocumentValidationError(
                        str(e), collection=cls.COLLECTION
                    ) from e
            elif "nested" in f.metadata and value is not None:
                value = [f.metadata["nested"].from_document(item) for item in value]
            kwargs[f.name] = value
        return cls(**kwargs)

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            elif "nested" in f.metadata:
                value = [item.to_document() for item in value]
            elif isinstance(value, list):
                value = list(value)
            doc[to_camel(f.name)] = value
        return doc


# =============================================================================
# ENTITIES
# =============================================================================

@dataclass
class LogEntry(Entity):
    """A field visit / activity log."""

    COLLECTION: ClassVar[str] = COLLECTION_LOGS

    id: str
    date: str
    author: str
    department: Department = _enum_field(Department)
    course_id: str
    course_name: str
    title: str
    content: str
    image_urls: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    contact_person: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None


@dataclass
class GolfCourse(Entity):
    COLLECTION: ClassVar[str] = COLLECTION_COURSES

    id: str
    name: str
    holes: int
    type: CourseType = _enum_field(CourseType)
    open_year: str
    address: str
    grass_type: GrassType = _enum_field(GrassType)
    area: str
    description: str
    length: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    issues: Optional[List[str]] = None


@dataclass
class CareerRecord(Entity):
    """One position held by a person; ``end_date`` is None while current."""

    course_id: str
    course_name: str
    role: str
    start_date: str
    end_date: Optional[str] = None
    description: Optional[str] = None


@dataclass
class Person(Entity):
    COLLECTION: ClassVar[str] = COLLECTION_PEOPLE

    id: str
    name: str
    phone: str
    current_role: str
    careers: List[CareerRecord] = field(metadata={"nested": CareerRecord})
    affinity: AffinityLevel = _enum_field(AffinityLevel)
    notes: str
    current_role_start_date: Optional[str] = None
    current_course_id: Optional[str] = None


@dataclass
class UserProfile(Entity):
    COLLECTION: ClassVar[str] = COLLECTION_USERS

    id: str
    name: str
    email: str
    role: UserRole = _enum_field(UserRole)
    department: Department = _enum_field(Department)
    status: UserStatus = _enum_field(UserStatus)
    avatar: Optional[str] = None


@dataclass
class AuditEvent(Entity):
    """Append-only record of one mutating action."""

    COLLECTION: ClassVar[str] = COLLECTION_SYSTEM_LOGS

    id: str
    timestamp: int
    user_id: str
    user_name: str
    action_type: AuditAction = _enum_field(AuditAction)
    target_type: AuditTarget = _enum_field(AuditTarget)
    target_name: str
    details: Optional[str] = None


@dataclass
class FinancialRecord(Entity):
    """Annual revenue (KRW) for one course."""

    COLLECTION: ClassVar[str] = COLLECTION_FINANCIALS

    id: str
    course_id: str
    year: int
    revenue: float
    updated_at: int
    profit: Optional[float] = None


@dataclass
class MaterialRecord(Entity):
    COLLECTION: ClassVar[str] = COLLECTION_MATERIALS

    id: str
    course_id: str
    category: MaterialCategory = _enum_field(MaterialCategory)
    name: str
    quantity: float
    unit: str
    last_updated: str
    supplier: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class ExternalEvent(Entity):
    """Calendar entry imported from Google/Outlook or entered by hand."""

    COLLECTION: ClassVar[str] = COLLECTION_EVENTS

    id: str
    title: str
    date: str
    source: EventSource = _enum_field(EventSource)
    time: Optional[str] = None
    location: Optional[str] = None
    type: Optional[EventType] = _enum_field(EventType, default=None)
    course_id: Optional[str] = None
    person_id: Optional[str] = None


@dataclass
class TodoItem(Entity):
    """Admin to-do board entry."""

    COLLECTION: ClassVar[str] = COLLECTION_TODOS

    id: str
    text: str
    author: str
    is_completed: bool
    created_at: int


ENTITY_TYPES = {
    cls.COLLECTION: cls
    for cls in (
        LogEntry,
        GolfCourse,
        Person,
        UserProfile,
        AuditEvent,
        FinancialRecord,
        MaterialRecord,
        ExternalEvent,
        TodoItem,
    )
}


def required_document_fields(collection: str) -> Tuple[str, ...]:
    """Required stored field names for ``collection`` (empty if untyped)."""
    entity_cls = ENTITY_TYPES.get(collection)
    return entity_cls.required_fields() if entity_cls else ()


def parse_documents(entity_cls, documents) -> list:
    """Convert a snapshot to typed entities, skipping malformed documents."""
    parsed = []
    for doc in documents:
        try:
            parsed.append(entity_cls.from_document(doc))
        except DocumentValidationError as e:
            logger.warning(
                "Skipping malformed %s document %s: %s",
                entity_cls.COLLECTION, doc.get("id"), e.message,
            )
    return parsed
