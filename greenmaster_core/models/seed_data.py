# =============================================================================
# greenmaster_core/models/seed_data.py
# Bundled Sample Data (applied once to an empty collection)
# =============================================================================

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from greenmaster_core.models.collections import (
    COLLECTION_COURSES,
    COLLECTION_EVENTS,
    COLLECTION_LOGS,
    COLLECTION_PEOPLE,
    COLLECTION_USERS,
)
from greenmaster_core.models.entities import (
    CareerRecord,
    ExternalEvent,
    GolfCourse,
    LogEntry,
    Person,
    UserProfile,
)
from greenmaster_core.models.enums import (
    AffinityLevel,
    CourseType,
    Department,
    EventSource,
    GrassType,
    UserRole,
    UserStatus,
)

HOUR_MS = 3_600_000
DAY_MS = 24 * HOUR_MS

DEFAULT_ADMIN = UserProfile(
    id="admin-01",
    name="김관리 (System)",
    email="admin@greenmaster.com",
    role=UserRole.SENIOR,
    department=Department.MANAGEMENT,
    status=UserStatus.APPROVED,
    avatar="https://ui-avatars.com/api/?name=Admin&background=0D9488&color=fff",
)

SAMPLE_COURSES = [
    GolfCourse(
        id="c1",
        name="스카이뷰 CC",
        holes=18,
        type=CourseType.PUBLIC,
        open_year="2015",
        address="경기 여주시 북내면",
        grass_type=GrassType.ZOYSIA,
        area="42만평",
        description="난이도가 높은 산악형 코스. 최근 그린 스피드 이슈 있음.",
    ),
    GolfCourse(
        id="c2",
        name="레이크사이드",
        holes=54,
        type=CourseType.MEMBER,
        open_year="1990",
        address="경기 용인시 처인구",
        grass_type=GrassType.BENTGRASS,
        area="120만평",
        description="전통적인 명문 구장. 배수 불량 구간 공사 예정.",
    ),
]

SAMPLE_PEOPLE = [
    Person(
        id="p1",
        name="김철수",
        phone="010-1234-5678",
        current_role="코스팀장",
        current_course_id="c1",
        affinity=AffinityLevel.ALLY,
        notes="전 직장(레이크사이드) 때부터 우리 제품을 선호함. 기술적 조언을 구하는 편.",
        careers=[
            CareerRecord("c2", "레이크사이드", "대리", "2010-03", "2018-02", "그린 보수 공사 총괄"),
            CareerRecord("c1", "스카이뷰 CC", "팀장", "2018-03"),
        ],
    ),
    Person(
        id="p2",
        name="이영희",
        phone="010-9876-5432",
        current_role="총지배인",
        current_course_id="c2",
        affinity=AffinityLevel.UNFRIENDLY,
        notes="예산 절감을 최우선으로 함. 경쟁사(A사) 제품 선호 경향.",
        careers=[
            CareerRecord("c3", "오션비치", "운영팀장", "2015-01", "2020-12"),
            CareerRecord("c2", "레이크사이드", "총지배인", "2021-01"),
        ],
    ),
]

SAMPLE_EVENTS = [
    ExternalEvent(id="e1", title="골프장 경영 협회 세미나", date="2024-05-22",
                  source=EventSource.GOOGLE, time="14:00", location="서울 코엑스"),
    ExternalEvent(id="e2", title="본사 2분기 전략 회의", date="2024-05-27",
                  source=EventSource.OUTLOOK, time="09:00", location="본사 대회의실"),
    ExternalEvent(id="e3", title="CEO 오찬 미팅", date="2024-05-10",
                  source=EventSource.GOOGLE, time="12:00", location="강남구"),
    ExternalEvent(id="e4", title="산업 안전 교육", date="2024-05-02",
                  source=EventSource.OUTLOOK, time="10:00"),
]


def _sample_logs(now_ms: int) -> List[LogEntry]:
    rows = [
        ("l1", "2024-05-20", "박영업", Department.SALES, "c1", "스카이뷰 CC",
         "하반기 비료 납품 계약 미팅",
         "김철수 팀장과 미팅 진행. 경쟁사 대비 단가 이슈가 있었으나, 기술지원 서비스(드론 촬영 등) 포함하여 계약 유력.",
         ["계약", "영업"], 2 * HOUR_MS),
        ("l2", "2024-05-18", "최연구", Department.RESEARCH, "c1", "스카이뷰 CC",
         "신규 제초제 약효 시험 3차",
         "14번 홀 페어웨이 우측 러프 지역 살포. 3일차 관찰 결과 잡초 변색 시작됨. 사진 첨부함.",
         ["임상", "제초제"], 2 * DAY_MS),
        ("l3", "2024-05-15", "정건설", Department.CONSTRUCTION, "c2", "레이크사이드",
         "동코스 5번홀 배수공사 견적 제출",
         "현장 실사 완료. 암반 지형이라 굴착 비용이 추가될 것으로 보임. 1차 견적서 제출 완료.",
         ["견적", "공사"], 5 * DAY_MS),
        ("l4", "2024-05-10", "장부사장", Department.CONSULTING, "c2", "레이크사이드",
         "경영 효율화 컨설팅 착수",
         "객단가 상승을 위한 코스 리뉴얼 제안. 야간 라운드 활성화를 위한 조명 교체 필요성 언급.",
         ["경영", "컨설팅"], 10 * DAY_MS),
    ]
    logs = []
    for log_id, date, author, dept, course_id, course_name, title, content, tags, age in rows:
        stamp = now_ms - age
        logs.append(LogEntry(
            id=log_id, date=date, author=author, department=dept,
            course_id=course_id, course_name=course_name, title=title,
            content=content, tags=tags, created_at=stamp, updated_at=stamp,
        ))
    logs[1].image_urls = ["https://picsum.photos/400/300"]
    return logs


def seed_documents(now_ms: Optional[int] = None) -> Dict[str, List[Dict[str, Any]]]:
    """Seed sets keyed by collection, as stored documents.

    Collections without an entry (financials, materials, system_logs, todos) are never
    seeded.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return {
        COLLECTION_LOGS: [log.to_document() for log in _sample_logs(now_ms)],
        COLLECTION_COURSES: [c.to_document() for c in SAMPLE_COURSES],
        COLLECTION_PEOPLE: [p.to_document() for p in SAMPLE_PEOPLE],
        COLLECTION_EVENTS: [e.to_document() for e in SAMPLE_EVENTS],
        COLLECTION_USERS: [DEFAULT_ADMIN.to_document()],
    }
