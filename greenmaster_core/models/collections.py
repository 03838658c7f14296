"""Collection names (schema-in-code).

Use these constants so collection names stay consistent between the local
mirror slots, the remote tables and the synchronizer.
"""

COLLECTION_LOGS = "logs"
COLLECTION_COURSES = "courses"
COLLECTION_PEOPLE = "people"
COLLECTION_EVENTS = "events"
COLLECTION_USERS = "users"
COLLECTION_SYSTEM_LOGS = "system_logs"
COLLECTION_FINANCIALS = "financials"
COLLECTION_MATERIALS = "materials"
COLLECTION_TODOS = "todos"

TRACKED_COLLECTIONS = (
    COLLECTION_LOGS,
    COLLECTION_COURSES,
    COLLECTION_PEOPLE,
    COLLECTION_EVENTS,
    COLLECTION_USERS,
    COLLECTION_SYSTEM_LOGS,
    COLLECTION_FINANCIALS,
    COLLECTION_MATERIALS,
    COLLECTION_TODOS,
)

# Prefix used when the local store assigns a fresh id
ID_PREFIXES = {
    COLLECTION_LOGS: "log",
    COLLECTION_COURSES: "course",
    COLLECTION_PEOPLE: "person",
    COLLECTION_EVENTS: "event",
    COLLECTION_USERS: "user",
    COLLECTION_SYSTEM_LOGS: "sys",
    COLLECTION_FINANCIALS: "fin",
    COLLECTION_MATERIALS: "mat",
    COLLECTION_TODOS: "todo",
}

TEMP_ID_PREFIX = "temp-"


def is_placeholder_id(doc_id) -> bool:
    """True when an id is absent or a client-side temporary marker."""
    return not doc_id or str(doc_id).startswith(TEMP_ID_PREFIX)
