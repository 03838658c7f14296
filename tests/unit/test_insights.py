# =============================================================================
# tests/unit/test_insights.py
# Unit Tests for the GreenMaster AI operations
# =============================================================================

import json

import pytest

from greenmaster_core.ai import (
    MAX_UPLOAD_BYTES,
    DocumentInput,
    map_course_type,
    map_grass_type,
    validate_document_input,
)
from greenmaster_core.errors import AIInputError
from greenmaster_core.models import (
    CourseType,
    Department,
    GolfCourse,
    GrassType,
    LogEntry,
    Person,
    seed_documents,
)


@pytest.fixture
def seeded():
    docs = seed_documents(now_ms=1_716_000_000_000)
    return {
        "logs": [LogEntry.from_document(d) for d in docs["logs"]],
        "courses": [GolfCourse.from_document(d) for d in docs["courses"]],
        "people": [Person.from_document(d) for d in docs["people"]],
    }


class TestUploadValidation:
    """Checked before any AI call"""

    def test_pdf_is_accepted(self):
        attachment = validate_document_input(DocumentInput(data=b"%PDF-1.7", mime_type="application/pdf"))
        assert attachment.mime_type == "application/pdf"

    def test_pasted_text_needs_no_attachment(self):
        assert validate_document_input(DocumentInput(text="3번홀 배수 불량")) is None

    def test_unsupported_type(self):
        with pytest.raises(AIInputError) as exc:
            validate_document_input(DocumentInput(data=b"x", mime_type="text/csv"))
        assert "지원하지 않는 파일 형식" in exc.value.message

    def test_oversized_file(self):
        data = b"0" * (MAX_UPLOAD_BYTES + 1)
        with pytest.raises(AIInputError) as exc:
            validate_document_input(DocumentInput(data=data, mime_type="image/png"))
        assert "10MB" in exc.value.message

    def test_nothing_to_analyze(self):
        with pytest.raises(AIInputError):
            validate_document_input(DocumentInput(text="   "))


class TestCourseMapping:

    @pytest.mark.parametrize("text, expected", [
        ("회원제", CourseType.MEMBER),
        ("퍼블릭(대중제)", CourseType.PUBLIC),
        (None, CourseType.PUBLIC),
    ])
    def test_course_type(self, text, expected):
        assert map_course_type(text) == expected

    @pytest.mark.parametrize("text, expected", [
        ("벤트그라스 그린", GrassType.BENTGRASS),
        ("켄터키 블루그라스", GrassType.KENTUCKY),
        ("한국잔디(중지)", GrassType.ZOYSIA),
        ("", GrassType.MIXED),
    ])
    def test_grass_type(self, text, expected):
        assert map_grass_type(text) == expected


class TestInsightOperations:
    """Prompts built from snapshots; responses mapped to typed results"""

    def test_course_summary_includes_only_that_course(self, insights, fake_completions, seeded):
        fake_completions.queue("리포트")
        course = seeded["courses"][0]
        assert insights.course_summary(course, seeded["logs"], seeded["people"]) == "리포트"

        prompt = fake_completions.calls[0]["messages"][-1]["content"]
        assert "스카이뷰 CC" in prompt
        assert "하반기 비료 납품 계약 미팅" in prompt
        assert "배수공사 견적" not in prompt
        assert "김철수" in prompt and "이영희" not in prompt

    def test_analyze_log(self, insights, fake_completions, seeded):
        fake_completions.queue("**핵심 요약**")
        insights.analyze_log(seeded["logs"][0])
        prompt = fake_completions.calls[0]["messages"][-1]["content"]
        assert "계약, 영업" in prompt

    def test_analyze_document_returns_drafts(self, insights, fake_completions):
        fake_completions.queue(json.dumps([
            {"title": "그린 보수", "content": "3번홀 보수", "courseName": "스카이뷰 CC",
             "summary_report": "보수 필요", "department": "건설사업", "tags": ["공사"]},
            {"title": "신규 영업", "content": "첫 미팅", "courseName": "신규CC",
             "summary_report": "기회", "course_info": {"address": "충북", "holes": 27}},
        ], ensure_ascii=False))

        drafts = insights.analyze_document(DocumentInput(text="메신저 대화 ..."), ["스카이뷰 CC"])

        assert [d.course_name for d in drafts] == ["스카이뷰 CC", "신규CC"]
        assert drafts[0].department == Department.CONSTRUCTION
        assert drafts[1].department == Department.SALES
        assert drafts[1].tags == []
        assert drafts[1].course_info["holes"] == 27
        prompt = fake_completions.calls[0]["messages"][-1]["content"]
        assert "[스카이뷰 CC]" in prompt
        assert "메신저 대화" in prompt

    def test_invalid_upload_never_reaches_the_provider(self, insights, fake_completions):
        with pytest.raises(AIInputError):
            insights.analyze_document(DocumentInput(data=b"x", mime_type="application/zip"))
        assert fake_completions.calls == []

    def test_draft_to_log_document(self, insights, fake_completions):
        fake_completions.queue(json.dumps({
            "title": "t", "content": "본문", "courseName": "레이크사이드", "summary_report": "요약",
            "key_issues": ["배수"], "contact_person": "이영희", "date": "2024-06-03",
        }, ensure_ascii=False))
        draft = insights.analyze_document(DocumentInput(text="x"))[0]
        doc = draft.to_log_document("c2", "박영업")
        assert doc["courseId"] == "c2"
        assert doc["author"] == "박영업"
        assert doc["date"] == "2024-06-03"
        assert doc["contactPerson"] == "이영희"
        assert "[AI 요약]\n요약" in doc["content"]
        assert "- 배수" in doc["content"]

    def test_course_details(self, insights, fake_completions):
        fake_completions.queue(json.dumps({
            "address": "경기 용인시", "holes": 36, "type": "회원제", "grassType": "벤트그라스",
            "description": "구릉지형", "lat": 37.2, "lng": 127.2,
        }, ensure_ascii=False))
        details = insights.course_details("레이크사이드")
        assert details.holes == 36
        assert details.type == CourseType.MEMBER
        assert details.grass_type == GrassType.BENTGRASS
        assert details.lat == 37.2

    def test_course_details_needs_a_name(self, insights):
        with pytest.raises(AIInputError):
            insights.course_details("  ")

    def test_search_uses_fast_model_and_recent_logs(self, insights, fake_completions, seeded):
        fake_completions.queue("2024-05-20 일지에 따르면...")
        insights.search("비료 계약", seeded["logs"], seeded["courses"], seeded["people"])
        call = fake_completions.calls[0]
        assert call["model"] == "fast-model"
        assert "비료 계약" in call["messages"][-1]["content"]

    def test_search_needs_a_query(self, insights, seeded):
        with pytest.raises(AIInputError):
            insights.search("", seeded["logs"], seeded["courses"], seeded["people"])
