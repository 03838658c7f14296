# =============================================================================
# tests/unit/test_synchronizer.py
# Unit Tests for the Collection Synchronizer and the Audit Logger
# =============================================================================

import pytest

from greenmaster_core.errors import DocumentStoreError, DocumentValidationError
from greenmaster_core.models import (
    AffinityLevel,
    AuditAction,
    AuditTarget,
    Department,
    LogEntry,
    UserRole,
    UserStatus,
    seed_documents,
)
from greenmaster_core.state import AuditLogger, CollectionSynchronizer, normalize_fields
from greenmaster_core.store import LocalDocumentStore


def audit_entries(sync):
    return [(e.action_type, e.target_type, e.target_name) for e in sync.audit_events]


class TestSeeding:
    """First empty snapshot seeds bundled sample data"""

    def test_seeded_collections_are_visible(self, sync):
        assert {c.id for c in sync.courses} == {"c1", "c2"}
        assert {p.id for p in sync.people} == {"p1", "p2"}
        assert len(sync.logs) == 4
        assert len(sync.events) == 4
        assert [u.id for u in sync.users] == ["admin-01"]

    def test_unseeded_collections_stay_empty(self, sync):
        assert sync.financials == []
        assert sync.materials == []

    def test_seed_is_not_applied_to_non_empty_collection(self, local_store, audit, mirror):
        mirror.write("courses", [{
            "id": "own", "name": "자체 골프장", "holes": 9, "type": "대중제", "openYear": "2020",
            "address": "", "grassType": "혼합", "area": "", "description": "",
        }])
        synchronizer = CollectionSynchronizer(local_store, audit, seeds=seed_documents())
        synchronizer.start()
        assert [c.id for c in synchronizer.courses] == ["own"]
        synchronizer.stop()

    def test_deleting_everything_does_not_reseed(self, sync):
        for course in sync.courses:
            sync.delete_course(course.id)
        assert sync.courses == []

    def test_seed_failure_publishes_empty_snapshot(self, audit):
        class FailingSeedStore:
            mode = "local"

            def subscribe(self, collection, callback):
                callback(())
                return lambda: None

            def seed_if_empty(self, collection, documents):
                raise DocumentStoreError("quota exceeded", collection=collection, operation="seed")

        synchronizer = CollectionSynchronizer(FailingSeedStore(), audit, seeds=seed_documents())
        synchronizer.start()
        seen = []
        synchronizer.subscribe("courses", seen.append)
        assert seen == [()]

    def test_seeding_runs_after_the_replay_returns(self, mirror, audit):
        """Seed writes happen outside the subscription callback"""
        seed_calls = []

        class ReplayTrackingStore(LocalDocumentStore):
            in_callback = False

            def subscribe(self, collection, callback):
                def tracked(snapshot):
                    self.in_callback = True
                    try:
                        callback(snapshot)
                    finally:
                        self.in_callback = False

                return super().subscribe(collection, tracked)

            def seed_if_empty(self, collection, documents):
                seed_calls.append((collection, self.in_callback))
                return super().seed_if_empty(collection, documents)

        synchronizer = CollectionSynchronizer(ReplayTrackingStore(mirror), audit, seeds=seed_documents())
        synchronizer.start()

        assert {name for name, _ in seed_calls} == {"logs", "courses", "people", "events", "users"}
        assert not any(inside for _, inside in seed_calls)
        assert {c.id for c in synchronizer.courses} == {"c1", "c2"}
        synchronizer.stop()


class TestSnapshots:
    """Replay and write-then-read"""

    def test_late_subscriber_gets_current_snapshot(self, sync):
        seen = []
        sync.subscribe("courses", seen.append)
        assert len(seen) == 1
        assert {d["id"] for d in seen[0]} == {"c1", "c2"}

    def test_write_then_read_sees_change(self, sync):
        sync.update_course("c1", {"description": "그린 스피드 개선 완료"})
        course = next(c for c in sync.courses if c.id == "c1")
        assert course.description == "그린 스피드 개선 완료"

    def test_add_log_stamps_times(self, sync, clock):
        log_id = sync.add_log({
            "date": "2024-06-01",
            "author": "박영업",
            "department": Department.SALES,
            "courseId": "c1",
            "courseName": "스카이뷰 CC",
            "title": "재방문",
            "content": "견적서 전달",
        })
        log = next(l for l in sync.logs if l.id == log_id)
        assert log.created_at == log.updated_at
        assert log.department == Department.SALES

    def test_update_log_keeps_created_at(self, sync):
        before = next(l for l in sync.logs if l.id == "l1")
        sync.update_log("l1", {"title": "계약 체결"})
        after = next(l for l in sync.logs if l.id == "l1")
        assert after.created_at == before.created_at
        assert after.updated_at > before.updated_at
        assert after.title == "계약 체결"

    def test_entity_objects_are_accepted(self, sync):
        log = LogEntry(
            id="temp-1", date="2024-06-02", author="최연구", department=Department.RESEARCH,
            course_id="c2", course_name="레이크사이드", title="토양 샘플링", content="3개 홀 채취",
        )
        new_id = sync.add_log(log)
        assert new_id != "temp-1"
        assert any(l.title == "토양 샘플링" for l in sync.logs)

    def test_normalize_fields_accepts_snake_case_and_enums(self):
        assert normalize_fields({"course_id": "c1", "department": Department.SALES}) == {
            "courseId": "c1", "department": "영업",
        }


class TestAuditTrail:
    """Exactly one audit event per successful mutation"""

    def test_update_course_records_course_name(self, sync):
        sync.update_course("c1", {"description": "배수 공사 완료"})
        assert audit_entries(sync) == [(AuditAction.UPDATE, AuditTarget.COURSE, "스카이뷰 CC")]

    def test_create_and_delete_triad(self, sync):
        event_id = sync.add_event({"title": "현장 점검", "date": "2024-06-01", "source": "Manual"})
        sync.update_event(event_id, {"time": "09:30"})
        sync.delete_event(event_id)
        assert audit_entries(sync) == [
            (AuditAction.CREATE, AuditTarget.EVENT, "현장 점검"),
            (AuditAction.UPDATE, AuditTarget.EVENT, "현장 점검"),
            (AuditAction.DELETE, AuditTarget.EVENT, "현장 점검"),
        ]

    def test_audit_event_carries_actor(self, sync):
        sync.delete_log("l4")
        event = sync.audit_events[0]
        assert event.user_id == "admin-01"
        assert event.user_name == "김관리 (System)"
        assert event.timestamp > 0

    def test_no_audit_without_session_user(self, sync, acting_user):
        acting_user["user"] = None
        sync.update_course("c2", {"area": "121만평"})
        assert sync.audit_events == []

    def test_failed_write_is_not_audited(self, sync):
        with pytest.raises(DocumentValidationError):
            sync.add_course({"name": "필드 누락"})
        assert sync.audit_events == []

    def test_financial_records_are_labelled_by_course_and_year(self, sync):
        record_id = sync.add_financial({"courseId": "c1", "year": 2023, "revenue": 12000, "profit": 1800})
        sync.update_financial(record_id, {"revenue": 12500})
        assert audit_entries(sync) == [
            (AuditAction.CREATE, AuditTarget.FINANCE, "스카이뷰 CC 2023"),
            (AuditAction.UPDATE, AuditTarget.FINANCE, "스카이뷰 CC 2023"),
        ]
        assert sync.financials[0].revenue == 12500

    def test_material_triad(self, sync):
        mat_id = sync.add_material({
            "courseId": "c2", "category": "비료", "name": "완효성 복합비료", "quantity": 40,
            "unit": "포", "lastUpdated": "2024-06-01", "supplier": "그린케미칼",
        })
        sync.update_material(mat_id, {"quantity": 35})
        sync.delete_material(mat_id)
        assert [a for a, _, _ in audit_entries(sync)] == [
            AuditAction.CREATE, AuditAction.UPDATE, AuditAction.DELETE,
        ]
        assert sync.materials == []

    def test_user_status_change_maps_to_approve(self, sync):
        sync.update_user_status("admin-01", UserStatus.APPROVED)
        sync.update_user_role("admin-01", UserRole.ADMIN)
        actions = [a for a, _, _ in audit_entries(sync)]
        assert actions == [AuditAction.APPROVE, AuditAction.UPDATE]
        assert sync.users[0].role == UserRole.ADMIN

    def test_audit_logger_returns_none_without_user(self, local_store):
        logger = AuditLogger(local_store, current_user=lambda: None)
        assert logger.record(AuditAction.CREATE, AuditTarget.LOG, "x") is None


class TestTodoBoard:
    """Admin to-do items: add, newest first, toggle, edit, delete"""

    def test_add_lists_newest_first(self, sync):
        sync.add_todo("  잔디 샘플 발송  ", "관리자")
        sync.add_todo("견적서 검토", "관리자")
        assert [t.text for t in sync.todos] == ["견적서 검토", "잔디 샘플 발송"]
        assert all(not t.is_completed for t in sync.todos)
        assert sync.todos[0].author == "관리자"

    def test_toggle_flips_completion(self, sync):
        todo_id = sync.add_todo("견적서 검토", "관리자")
        sync.toggle_todo(todo_id)
        assert sync.todos[0].is_completed
        sync.toggle_todo(todo_id)
        assert not sync.todos[0].is_completed

    def test_edit_and_delete_are_audited(self, sync):
        todo_id = sync.add_todo("견적서 검토", "관리자")
        sync.update_todo(todo_id, {"text": "견적서 최종 검토"})
        sync.toggle_todo(todo_id)
        sync.delete_todo(todo_id)

        assert sync.todos == []
        assert audit_entries(sync) == [
            (AuditAction.CREATE, AuditTarget.TODO, "견적서 검토"),
            (AuditAction.UPDATE, AuditTarget.TODO, "견적서 최종 검토"),
            (AuditAction.UPDATE, AuditTarget.TODO, "견적서 최종 검토"),
            (AuditAction.DELETE, AuditTarget.TODO, "견적서 최종 검토"),
        ]

    def test_toggle_of_unknown_item_is_ignored(self, sync):
        sync.toggle_todo("todo-missing")
        assert sync.todos == []
        assert sync.audit_events == []


class TestPeopleMergeOnCreate:
    """Submitting a person whose normalized name already exists merges instead"""

    def test_same_name_with_spacing_and_case_merges(self, sync):
        person_id = sync.add_person({
            "name": " 김 철수 ",
            "phone": "010-0000-1111",
            "currentRole": "코스관리 이사",
            "currentCourseId": "c2",
            "careers": [],
            "affinity": AffinityLevel.FRIENDLY,
            "notes": "레이크사이드로 이직",
        })

        assert person_id == "p1"
        assert len(sync.people) == 2
        person = next(p for p in sync.people if p.id == "p1")
        assert person.current_course_id == "c2"
        assert person.phone == "010-0000-1111"
        assert person.affinity == AffinityLevel.FRIENDLY
        archived = person.careers[-1]
        assert archived.course_id == "c1"
        assert archived.course_name == "스카이뷰 CC"
        assert archived.end_date is not None
        assert "[Merged Info]: 레이크사이드로 이직" in person.notes

    def test_merge_is_audited_as_update(self, sync):
        sync.add_person({
            "name": "이영희", "phone": "", "currentRole": "", "careers": [],
            "affinity": 0, "notes": "",
        })
        assert audit_entries(sync) == [(AuditAction.UPDATE, AuditTarget.PERSON, "이영희")]
        assert sync.audit_events[0].details == "Merged duplicate entry"

    def test_new_name_creates_person(self, sync):
        sync.add_person({
            "name": "박신규", "phone": "010-2222-3333", "currentRole": "경기팀장",
            "careers": [], "affinity": 0, "notes": "",
        })
        assert len(sync.people) == 3
        assert audit_entries(sync) == [(AuditAction.CREATE, AuditTarget.PERSON, "박신규")]
