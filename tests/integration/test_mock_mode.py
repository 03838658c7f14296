# =============================================================================
# tests/integration/test_mock_mode.py
# End-to-end scenarios over the local document store (no network)
# =============================================================================

import pytest

from greenmaster_core.config import AppSettings
from greenmaster_core.context import build_app_context
from greenmaster_core.models import AuditAction, AuditTarget, Department, UserRole, UserStatus
from greenmaster_core.store import KeyValueStorage

pytestmark = pytest.mark.integration


class TestMockModeScenario:
    """Fresh install -> seed -> login -> edit -> audit"""

    def test_course_edit_produces_one_audit_event(self, app_context):
        assert app_context.mock_mode
        assert {c.id for c in app_context.sync.courses} == {"c1", "c2"}

        app_context.session.login("admin@greenmaster.com")
        app_context.sync.update_course("c1", {"description": "그린 스피드 개선 완료"})

        updates = [e for e in app_context.sync.audit_events if e.action_type == AuditAction.UPDATE]
        assert len(updates) == 1
        assert updates[0].target_type == AuditTarget.COURSE
        assert updates[0].target_name == "스카이뷰 CC"
        assert updates[0].user_id == "admin-01"

    def test_registration_approval_and_live_role_change(self, app_context):
        session = app_context.session
        session.login("admin@greenmaster.com")
        new_id = session.register("오신입", "oh@greenmaster.com", Department.CONSTRUCTION)

        app_context.sync.update_user_status(new_id, UserStatus.APPROVED)
        approvals = [e for e in app_context.sync.audit_events if e.action_type == AuditAction.APPROVE]
        assert [e.target_name for e in approvals] == ["오신입"]

        session.logout()
        user = session.login("oh@greenmaster.com")
        assert user.role == UserRole.INTERMEDIATE
        assert not app_context.capabilities.can_use_ai

        app_context.sync.update_user_role(new_id, UserRole.SENIOR)
        assert app_context.capabilities.can_use_ai

    def test_state_survives_restart(self, tmp_path):
        settings = AppSettings(db_path=tmp_path / "restart.db")

        first = build_app_context(settings=settings).start()
        first.session.login("admin@greenmaster.com")
        first.sync.add_course({
            "name": "신규 골프장", "holes": 18, "type": "대중제", "openYear": "2024",
            "address": "", "grassType": "혼합", "area": "", "description": "",
        })
        first.close()
        first.storage.close()

        second = build_app_context(settings=settings, storage=KeyValueStorage(settings.db_path)).start()
        assert second.user is not None and second.user.id == "admin-01"
        assert "신규 골프장" in {c.name for c in second.sync.courses}
        assert len(second.sync.courses) == 3
        second.close()
        second.storage.close()

    def test_sessions_share_one_store(self, settings, storage):
        """Two contexts over the same store see each other's writes"""
        from greenmaster_core.store import create_document_store

        store = create_document_store(settings, storage)
        a = build_app_context(settings=settings, storage=storage, store=store).start()
        b = build_app_context(settings=settings, storage=storage, store=store).start()

        a.sync.delete_log("l3")
        assert "l3" not in {log.id for log in b.sync.logs}
        a.close()
        b.close()
