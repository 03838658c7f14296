# =============================================================================
# greenmaster_core/state/people_merge.py
# Duplicate-person detection by normalized name
# =============================================================================
"""
People are entered by hand with no stable external key, so a new submission
whose name matches an existing record (ignoring whitespace and case) is merged
into that record instead of creating a duplicate.

This is a heuristic: two different people with the same name are merged too.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional

MERGED_NOTES_MARKER = "[Merged Info]"
ARCHIVED_CAREER_NOTE = "Auto-archived upon merge with new data"
UNKNOWN_COURSE = "Unknown Course"


def normalize_name(name: Optional[str]) -> str:
    """Remove all whitespace and case-fold: ' 김 철수 ' -> '김철수'."""
    return "".join((name or "").split()).casefold()


def find_duplicate(people: Iterable[Mapping[str, Any]], name: str) -> Optional[Mapping[str, Any]]:
    target = normalize_name(name)
    if not target:
        return None
    for person in people:
        if normalize_name(person.get("name")) == target:
            return person
    return None


def merge_person_fields(
    existing: Mapping[str, Any],
    incoming: Mapping[str, Any],
    course_names: Mapping[str, str],
    today: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Fields to write onto ``existing`` when ``incoming`` turns out to be the
    same person.

    Args:
        existing: stored person document
        incoming: submitted person document
        course_names: course id -> course name, for archiving the old position
        today: end date for an archived position (defaults to today, ISO)
    """
    today = today or date.today().isoformat()
    careers = [dict(c) for c in existing.get("careers") or []]

    new_course = incoming.get("currentCourseId")
    old_course = existing.get("currentCourseId")
    if new_course and old_course and new_course != old_course:
        careers.append({
            "courseId": old_course,
            "courseName": course_names.get(old_course, UNKNOWN_COURSE),
            "role": existing.get("currentRole", ""),
            "startDate": existing.get("currentRoleStartDate") or "",
            "endDate": today,
            "description": ARCHIVED_CAREER_NOTE,
        })

    merged: Dict[str, Any] = {"careers": careers}
    for key in ("phone", "currentRole", "currentCourseId", "currentRoleStartDate"):
        value = incoming.get(key)
        if value:
            merged[key] = value

    affinity = incoming.get("affinity")
    if affinity:
        merged["affinity"] = affinity

    notes = existing.get("notes") or ""
    if incoming.get("notes"):
        notes = f"{notes}\n\n{MERGED_NOTES_MARKER}: {incoming['notes']}"
    merged["notes"] = notes
    return merged
