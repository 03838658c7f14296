# =============================================================================
# tests/unit/test_people_merge.py
# Unit Tests for duplicate-person detection and field merging
# =============================================================================

from greenmaster_core.state import find_duplicate, merge_person_fields, normalize_name


EXISTING = {
    "id": "p1",
    "name": "김철수",
    "phone": "010-1234-5678",
    "currentRole": "코스팀장",
    "currentCourseId": "c1",
    "currentRoleStartDate": "2018-03",
    "careers": [{"courseId": "c2", "courseName": "레이크사이드", "role": "대리", "startDate": "2010-03"}],
    "affinity": 2,
    "notes": "기술적 조언을 구하는 편.",
}


class TestNormalizeName:

    def test_whitespace_and_case_are_ignored(self):
        assert normalize_name(" 김 철수\t") == "김철수"
        assert normalize_name("John  SMITH") == normalize_name("johnsmith")

    def test_empty(self):
        assert normalize_name(None) == ""


class TestFindDuplicate:

    def test_finds_match(self):
        assert find_duplicate([EXISTING], "김  철 수")["id"] == "p1"

    def test_blank_name_never_matches(self):
        assert find_duplicate([{"id": "x", "name": ""}], "   ") is None

    def test_no_match(self):
        assert find_duplicate([EXISTING], "김철호") is None


class TestMergePersonFields:

    def test_course_change_archives_previous_position(self):
        merged = merge_person_fields(
            EXISTING, {"currentCourseId": "c3", "currentRole": "총지배인"},
            {"c1": "스카이뷰 CC"}, today="2024-06-01",
        )
        archived = merged["careers"][-1]
        assert archived == {
            "courseId": "c1",
            "courseName": "스카이뷰 CC",
            "role": "코스팀장",
            "startDate": "2018-03",
            "endDate": "2024-06-01",
            "description": "Auto-archived upon merge with new data",
        }
        assert merged["currentCourseId"] == "c3"
        assert merged["currentRole"] == "총지배인"
        assert len(merged["careers"]) == 2

    def test_unknown_course_name(self):
        merged = merge_person_fields(EXISTING, {"currentCourseId": "c9"}, {}, today="2024-06-01")
        assert merged["careers"][-1]["courseName"] == "Unknown Course"

    def test_same_course_does_not_archive(self):
        merged = merge_person_fields(EXISTING, {"currentCourseId": "c1"}, {"c1": "스카이뷰 CC"})
        assert len(merged["careers"]) == 1

    def test_empty_incoming_values_do_not_overwrite(self):
        merged = merge_person_fields(EXISTING, {"phone": "", "affinity": 0, "notes": ""}, {})
        assert "phone" not in merged
        assert "affinity" not in merged
        assert merged["notes"] == EXISTING["notes"]

    def test_notes_are_appended(self):
        merged = merge_person_fields(EXISTING, {"notes": "골프 좋아함"}, {})
        assert merged["notes"] == "기술적 조언을 구하는 편.\n\n[Merged Info]: 골프 좋아함"

    def test_existing_careers_are_not_mutated(self):
        merge_person_fields(EXISTING, {"currentCourseId": "c3"}, {})
        assert len(EXISTING["careers"]) == 1
