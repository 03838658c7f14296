# =============================================================================
# tests/unit/test_relationships.py
# Unit Tests for the relationship map model and layout
# =============================================================================

from datetime import date

import numpy as np
import pytest

from greenmaster_core.models import AffinityLevel, GolfCourse, Person, seed_documents
from greenmaster_core.relationships import (
    ConnectionFilter,
    ConnectionStatus,
    RoleCategory,
    affinity_color,
    build_connections,
    layout_hubs,
    ring_positions,
    role_category,
    tenure,
)


@pytest.fixture
def people():
    return [Person.from_document(d) for d in seed_documents(now_ms=0)["people"]]


@pytest.fixture
def courses():
    docs = seed_documents(now_ms=0)["courses"]
    docs.append({
        "id": "c3", "name": "오션비치", "holes": 18, "type": "대중제", "openYear": "2005",
        "address": "", "grassType": "혼합", "area": "", "description": "",
    })
    return [GolfCourse.from_document(d) for d in docs]


class TestRoleCategory:

    @pytest.mark.parametrize("role, expected", [
        ("코스팀장", RoleCategory.COURSE),
        ("그린 키퍼", RoleCategory.COURSE),
        ("총지배인", RoleCategory.MANAGEMENT),
        ("대표 이사", RoleCategory.MANAGEMENT),
        ("운영팀장", RoleCategory.OPERATIONS),
        ("경기 과장", RoleCategory.OPERATIONS),
        ("대리", RoleCategory.OTHER),
        ("", RoleCategory.OTHER),
    ])
    def test_categories(self, role, expected):
        assert role_category(role) == expected

    def test_first_match_wins(self):
        assert role_category("코스관리 이사") == RoleCategory.COURSE


class TestTenure:

    def test_years_and_months(self):
        assert tenure("2018-03", "2020-09") == "2년 6개월"

    def test_months_only(self):
        assert tenure("2024-01-01", "2024-04-15") == "3개월"

    def test_open_ended_uses_today(self):
        assert tenure("2024-01-01", today=date(2025, 1, 10)) == "1년 0개월"

    def test_unknown_start(self):
        assert tenure(None) == "기간 미상"


class TestConnections:

    def test_current_and_past_positions(self, people):
        connections = build_connections(people)
        kim = [(c.course_id, c.status) for c in connections if c.person_id == "p1"]
        assert kim == [("c1", ConnectionStatus.CURRENT), ("c2", ConnectionStatus.PAST)]

    def test_open_career_entry_at_current_course_is_not_doubled(self, people):
        connections = build_connections(people)
        lee = [c for c in connections if c.person_id == "p2" and c.course_id == "c2"]
        assert len(lee) == 1
        assert lee[0].status == ConnectionStatus.CURRENT

    def test_affinity_filter(self, people):
        flt = ConnectionFilter(affinity=AffinityLevel.ALLY)
        assert {c.person_id for c in build_connections(people, flt)} == {"p1"}

    def test_status_and_category_filter(self, people):
        flt = ConnectionFilter(status=ConnectionStatus.PAST, category=RoleCategory.OPERATIONS)
        connections = build_connections(people, flt)
        assert [(c.person_id, c.course_id) for c in connections] == [("p2", "c3")]

    def test_search_by_name_or_role(self, people):
        assert {c.person_id for c in build_connections(people, ConnectionFilter(search="지배인"))} == {"p2"}

    def test_affinity_colors(self):
        assert affinity_color(AffinityLevel.ALLY) == "#16a34a"
        assert affinity_color(AffinityLevel.UNFRIENDLY) == "#dc2626"
        assert affinity_color(AffinityLevel.NEUTRAL) == "#64748b"


class TestLayout:

    def test_ring_positions_are_on_the_circle(self):
        points = ring_positions(4, (0.0, 0.0), 10.0, start_angle=0.0)
        np.testing.assert_allclose(np.hypot(points[:, 0], points[:, 1]), 10.0)
        np.testing.assert_allclose(points[0], [10.0, 0.0], atol=1e-9)

    def test_first_hub_at_twelve_o_clock(self, people, courses):
        hubs = layout_hubs(courses, build_connections(people))
        assert hubs[0].course.id == "c1"
        assert hubs[0].x == pytest.approx(400.0)
        assert hubs[0].y == pytest.approx(350.0 - 220.0)

    def test_only_courses_with_connections_become_hubs(self, people, courses):
        flt = ConnectionFilter(status=ConnectionStatus.CURRENT)
        hubs = layout_hubs(courses, build_connections(people, flt))
        assert [h.course.id for h in hubs] == ["c1", "c2"]

    def test_people_ring_around_their_hub(self, people, courses):
        hubs = layout_hubs(courses, build_connections(people))
        c2 = next(h for h in hubs if h.course.id == "c2")
        assert (c2.current_count, c2.past_count) == (1, 1)
        for node in c2.people:
            assert np.hypot(node.x - c2.x, node.y - c2.y) == pytest.approx(75.0)

    def test_no_connections_no_hubs(self, courses):
        assert layout_hubs(courses, []) == []
