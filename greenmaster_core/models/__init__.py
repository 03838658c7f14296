"""
Models Module

Typed entities, enums, collection names and bundled seed sets.
"""

from greenmaster_core.models.collections import (
    COLLECTION_COURSES,
    COLLECTION_EVENTS,
    COLLECTION_FINANCIALS,
    COLLECTION_LOGS,
    COLLECTION_MATERIALS,
    COLLECTION_TODOS,
    COLLECTION_PEOPLE,
    COLLECTION_SYSTEM_LOGS,
    COLLECTION_USERS,
    ID_PREFIXES,
    TEMP_ID_PREFIX,
    TRACKED_COLLECTIONS,
    is_placeholder_id,
)
from greenmaster_core.models.entities import (
    ENTITY_TYPES,
    AuditEvent,
    CareerRecord,
    Entity,
    ExternalEvent,
    FinancialRecord,
    GolfCourse,
    LogEntry,
    MaterialRecord,
    Person,
    TodoItem,
    UserProfile,
    parse_documents,
    required_document_fields,
    to_camel,
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
from greenmaster_core.models.seed_data import DEFAULT_ADMIN, seed_documents

__all__ = [
    "COLLECTION_COURSES", "COLLECTION_EVENTS", "COLLECTION_FINANCIALS",
    "COLLECTION_LOGS", "COLLECTION_MATERIALS", "COLLECTION_PEOPLE",
    "COLLECTION_SYSTEM_LOGS", "COLLECTION_TODOS", "COLLECTION_USERS", "ID_PREFIXES",
    "TEMP_ID_PREFIX", "TRACKED_COLLECTIONS", "is_placeholder_id",
    "ENTITY_TYPES", "AuditEvent", "CareerRecord", "Entity", "ExternalEvent",
    "FinancialRecord", "GolfCourse", "LogEntry", "MaterialRecord", "Person",
    "TodoItem", "UserProfile", "parse_documents", "required_document_fields", "to_camel",
    "AffinityLevel", "AuditAction", "AuditTarget", "CourseType", "Department",
    "EventSource", "EventType", "GrassType", "MaterialCategory", "UserRole",
    "UserStatus", "DEFAULT_ADMIN", "seed_documents",
]
