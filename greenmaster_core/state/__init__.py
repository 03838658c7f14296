"""
State Module

Collection Synchronizer, Audit Logger and the person-merge heuristic.
"""

from greenmaster_core.state.audit import AuditLogger, now_ms
from greenmaster_core.state.people_merge import (
    find_duplicate,
    merge_person_fields,
    normalize_name,
)
from greenmaster_core.state.synchronizer import (
    CollectionSynchronizer,
    as_document,
    normalize_fields,
)

__all__ = [
    "AuditLogger",
    "now_ms",
    "find_duplicate",
    "merge_person_fields",
    "normalize_name",
    "CollectionSynchronizer",
    "as_document",
    "normalize_fields",
]
