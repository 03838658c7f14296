# =============================================================================
# greenmaster_core/relationships/graph.py
# People <-> course connections and their radial layout
# =============================================================================
"""
Relationship map model.

A connection links a person to a course through a current or past position.
Courses with at least one (filtered) connection become hubs placed on a
circle starting at 12 o'clock; each hub's people sit on a smaller ring around
it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from greenmaster_core.models import AffinityLevel, GolfCourse, Person

CENTER = (400.0, 350.0)
HUB_RADIUS = 220.0
PERSON_RADIUS = 75.0

COLOR_FRIENDLY = "#16a34a"
COLOR_HOSTILE = "#dc2626"
COLOR_NEUTRAL = "#64748b"


class RoleCategory(Enum):
    COURSE = "COURSE"
    MANAGEMENT = "MANAGEMENT"
    OPERATIONS = "OPERATIONS"
    OTHER = "OTHER"


class ConnectionStatus(Enum):
    CURRENT = "CURRENT"
    PAST = "PAST"


# Checked in order; first match wins
_CATEGORY_PATTERNS = (
    (RoleCategory.COURSE, re.compile(r"코스|잔디|그린|조경|시설|설비|장비")),
    (RoleCategory.MANAGEMENT, re.compile(r"지배인|대표|이사|사장|회장|전무|상무|본부장")),
    (RoleCategory.OPERATIONS, re.compile(r"운영|경기|지원|프론트|예약|마케팅|영업|식음")),
)


def role_category(role: Optional[str]) -> RoleCategory:
    compact = "".join((role or "").split())
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(compact):
            return category
    return RoleCategory.OTHER


def _parse_partial_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    for fmt in ("%Y-%m-%d", "%Y-%m", "%Y"):
        try:
            return datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            continue
    return None


def tenure(start: Optional[str], end: Optional[str] = None, today: Optional[date] = None) -> str:
    """'N년 M개월' (or 'M개월') between two YYYY[-MM[-DD]] dates."""
    start_date = _parse_partial_date(start)
    if start_date is None:
        return "기간 미상"
    end_date = _parse_partial_date(end) or today or date.today()
    days = abs((end_date - start_date).days)
    years, remainder = divmod(days, 365)
    months = remainder // 30
    if years > 0:
        return f"{years}년 {months}개월"
    return f"{months}개월"


def affinity_color(level: AffinityLevel) -> str:
    if level >= 1:
        return COLOR_FRIENDLY
    if level <= -1:
        return COLOR_HOSTILE
    return COLOR_NEUTRAL


@dataclass(frozen=True)
class Connection:
    course_id: str
    person_id: str
    person_name: str
    person_role: str
    affinity: AffinityLevel
    status: ConnectionStatus
    category: RoleCategory
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @property
    def tenure(self) -> str:
        return tenure(self.start_date, self.end_date)


@dataclass
class ConnectionFilter:
    """None means 'all' for every criterion."""
    affinity: Optional[AffinityLevel] = None
    category: Optional[RoleCategory] = None
    status: Optional[ConnectionStatus] = None
    search: str = ""

    def matches_person(self, person: Person) -> bool:
        if self.affinity is not None and person.affinity != self.affinity:
            return False
        term = self.search.strip()
        return not term or term in person.name or term in person.current_role

    def wants(self, status: ConnectionStatus, category: RoleCategory) -> bool:
        if self.status is not None and status != self.status:
            return False
        return self.category is None or category == self.category


def build_connections(people: Sequence[Person], flt: Optional[ConnectionFilter] = None) -> List[Connection]:
    flt = flt or ConnectionFilter()
    connections: List[Connection] = []
    for person in people:
        if not flt.matches_person(person):
            continue

        if person.current_course_id:
            category = role_category(person.current_role)
            if flt.wants(ConnectionStatus.CURRENT, category):
                connections.append(Connection(
                    course_id=person.current_course_id,
                    person_id=person.id,
                    person_name=person.name,
                    person_role=person.current_role,
                    affinity=person.affinity,
                    status=ConnectionStatus.CURRENT,
                    category=category,
                    start_date=person.current_role_start_date,
                ))

        for career in person.careers:
            if not career.course_id:
                continue
            # open-ended entry for the current course is the current position
            if career.end_date is None and career.course_id == person.current_course_id:
                continue
            category = role_category(career.role)
            if flt.wants(ConnectionStatus.PAST, category):
                connections.append(Connection(
                    course_id=career.course_id,
                    person_id=person.id,
                    person_name=person.name,
                    person_role=career.role,
                    affinity=person.affinity,
                    status=ConnectionStatus.PAST,
                    category=category,
                    start_date=career.start_date,
                    end_date=career.end_date,
                ))
    return connections


# =============================================================================
# LAYOUT
# =============================================================================

@dataclass
class PersonNode:
    connection: Connection
    x: float
    y: float


@dataclass
class Hub:
    course: GolfCourse
    x: float
    y: float
    people: List[PersonNode] = field(default_factory=list)

    @property
    def current_count(self) -> int:
        return sum(1 for node in self.people if node.connection.status == ConnectionStatus.CURRENT)

    @property
    def past_count(self) -> int:
        return len(self.people) - self.current_count


def ring_positions(count: int, center: Tuple[float, float], radius: float, start_angle: float) -> np.ndarray:
    """(count, 2) array of points evenly spaced on a circle."""
    angles = np.arange(count) / max(count, 1) * 2 * np.pi + start_angle
    return np.column_stack((
        center[0] + np.cos(angles) * radius,
        center[1] + np.sin(angles) * radius,
    ))


def layout_hubs(
    courses: Sequence[GolfCourse],
    connections: Sequence[Connection],
    center: Tuple[float, float] = CENTER,
    hub_radius: float = HUB_RADIUS,
    person_radius: float = PERSON_RADIUS,
) -> List[Hub]:
    """Hubs in course order; the first one sits at 12 o'clock (screen y grows downward)."""
    by_course: Dict[str, List[Connection]] = {}
    for conn in connections:
        by_course.setdefault(conn.course_id, []).append(conn)

    active = [course for course in courses if by_course.get(course.id)]
    hub_points = ring_positions(len(active), center, hub_radius, start_angle=-np.pi / 2)

    hubs: List[Hub] = []
    for course, (hx, hy) in zip(active, hub_points):
        related = by_course[course.id]
        person_points = ring_positions(len(related), (hx, hy), person_radius, start_angle=0.0)
        hub = Hub(course=course, x=float(hx), y=float(hy))
        hub.people = [
            PersonNode(connection=conn, x=float(px), y=float(py))
            for conn, (px, py) in zip(related, person_points)
        ]
        hubs.append(hub)
    return hubs
