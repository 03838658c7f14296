# =============================================================================
# tests/unit/test_session.py
# Unit Tests for the Session/Identity Manager and role capabilities
# =============================================================================

import gc

import pytest

from greenmaster_core.auth import (
    SESSION_SLOT,
    Capabilities,
    SessionManager,
    capabilities_for,
    require_capability,
    session_slot,
)
from greenmaster_core.errors import (
    AccountRejectedError,
    AlreadyRegisteredError,
    ApprovalPendingError,
    PermissionDeniedError,
    UnregisteredEmailError,
)
from greenmaster_core.models import AuditAction, Department, UserRole, UserStatus

ADMIN_EMAIL = "admin@greenmaster.com"


class TestLogin:
    """Email login gated on approval status"""

    def test_login_is_case_and_space_insensitive(self, app_context):
        user = app_context.session.login("  Admin@GreenMaster.com ")
        assert user.id == "admin-01"
        assert app_context.session.is_authenticated

    def test_login_is_audited_with_the_new_user(self, app_context):
        app_context.session.login(ADMIN_EMAIL)
        events = app_context.sync.audit_events
        assert len(events) == 1
        assert events[0].action_type == AuditAction.LOGIN
        assert events[0].user_id == "admin-01"

    def test_unknown_email_is_refused(self, app_context):
        with pytest.raises(UnregisteredEmailError):
            app_context.session.login("nobody@greenmaster.com")
        assert app_context.user is None

    def test_pending_then_approved(self, app_context):
        session = app_context.session
        user_id = session.register("정신입", "new@greenmaster.com", Department.RESEARCH)

        with pytest.raises(ApprovalPendingError):
            session.login("new@greenmaster.com")

        app_context.sync.update_user_status(user_id, UserStatus.APPROVED)
        user = session.login("new@greenmaster.com")
        assert user.role == UserRole.INTERMEDIATE
        assert user.department == Department.RESEARCH

    def test_rejected_account_is_refused(self, app_context):
        user_id = app_context.session.register("거절됨", "no@greenmaster.com", Department.SALES)
        app_context.sync.update_user_status(user_id, UserStatus.REJECTED)
        with pytest.raises(AccountRejectedError):
            app_context.session.login("no@greenmaster.com")

    def test_register_does_not_log_in(self, app_context):
        app_context.session.register("대기자", "wait@greenmaster.com", Department.SALES)
        assert not app_context.session.is_authenticated

    def test_duplicate_registration_is_refused(self, app_context):
        with pytest.raises(AlreadyRegisteredError):
            app_context.session.register("중복", " ADMIN@greenmaster.com", Department.SALES)

    def test_error_codes(self):
        assert UnregisteredEmailError("x").code == "AUTH_001"
        assert ApprovalPendingError("x").code == "AUTH_002"
        assert AccountRejectedError("x").code == "AUTH_003"


class TestSessionPersistence:
    """The session user survives a restart and logout clears it"""

    def test_session_is_restored_from_storage(self, app_context, storage):
        app_context.session.login(ADMIN_EMAIL)
        restored = SessionManager(app_context.sync, storage, app_context.audit)
        assert restored.user.id == "admin-01"

    def test_logout_clears_slot_and_notifies(self, app_context, storage):
        seen = []
        app_context.session.add_listener(seen.append)
        app_context.session.login(ADMIN_EMAIL)
        app_context.session.logout()

        assert app_context.user is None
        assert storage.get(SESSION_SLOT) is None
        assert seen[-1] is None

    def test_unreadable_saved_session_is_discarded(self, app_context, storage):
        storage.set(SESSION_SLOT, {"id": "x"})
        restored = SessionManager(app_context.sync, storage, app_context.audit)
        assert restored.user is None
        assert storage.get(SESSION_SLOT) is None


KEY_A = "a" * 32
KEY_B = "b" * 32


class TestBrowserSessions:
    """Browsers sharing one process and one storage keep separate logins"""

    def test_new_browser_does_not_inherit_a_login(self, app_context):
        first = app_context.for_session(KEY_A).start()
        first.session.login(ADMIN_EMAIL)

        second = app_context.for_session(KEY_B).start()

        assert second.user is None
        assert second.capabilities == Capabilities()
        assert first.user.id == "admin-01"

    def test_reload_restores_only_the_same_browser(self, app_context, storage):
        app_context.for_session(KEY_A).start().session.login(ADMIN_EMAIL)

        again = app_context.for_session(KEY_A).start()

        assert again.user.id == "admin-01"
        assert storage.get(session_slot(KEY_A))["id"] == "admin-01"
        assert storage.get(SESSION_SLOT) is None

    def test_logout_only_affects_its_own_browser(self, app_context, storage):
        first = app_context.for_session(KEY_A).start()
        second = app_context.for_session(KEY_B).start()
        first.session.login(ADMIN_EMAIL)
        second.session.login(ADMIN_EMAIL)

        first.session.logout()

        assert first.user is None
        assert second.user.id == "admin-01"
        assert storage.get(session_slot(KEY_B)) is not None
        assert app_context.for_session(KEY_B).user.id == "admin-01"

    def test_mutations_are_audited_as_the_browser_user(self, app_context):
        anonymous = app_context.for_session(KEY_B).start()
        admin = app_context.for_session(KEY_A).start()
        admin.session.login(ADMIN_EMAIL)
        before = len(app_context.sync.audit_events)

        anonymous.sync.update_course("c1", {"description": "비로그인 수정"})
        assert len(app_context.sync.audit_events) == before

        admin.sync.update_course("c1", {"description": "관리자 수정"})
        events = app_context.sync.audit_events
        assert len(events) == before + 1
        assert events[-1].user_id == "admin-01"

    def test_closing_a_browser_context_keeps_shared_state_running(self, app_context):
        browser = app_context.for_session(KEY_A).start()
        browser.close()

        app_context.sync.update_course("c1", {"description": "계속 동기화"})
        course = next(c for c in app_context.sync.courses if c.id == "c1")
        assert course.description == "계속 동기화"


class TestLiveReresolution:
    """Changes to the logged-in user's record apply without a new login"""

    def test_role_change_updates_capabilities(self, app_context):
        app_context.session.login(ADMIN_EMAIL)
        assert app_context.capabilities.can_use_ai

        app_context.sync.update_user_role("admin-01", UserRole.JUNIOR)

        assert app_context.user.role == UserRole.JUNIOR
        assert app_context.capabilities == Capabilities()

    def test_persisted_copy_follows_the_change(self, app_context, storage):
        app_context.session.login(ADMIN_EMAIL)
        app_context.sync.update_user_department("admin-01", Department.CONSULTING)
        assert storage.get(SESSION_SLOT)["department"] == "컨설팅"

    def test_removed_record_keeps_session(self, app_context):
        app_context.session.login(ADMIN_EMAIL)
        app_context.store.delete("users", "admin-01")
        assert app_context.user is not None
        assert app_context.user.id == "admin-01"


class TestCapabilities:
    """Role -> capability table"""

    @pytest.mark.parametrize("role, ai, full, admin", [
        (UserRole.SENIOR, True, True, True),
        (UserRole.ADMIN, True, True, True),
        (UserRole.INTERMEDIATE, False, True, False),
        (UserRole.JUNIOR, False, False, False),
    ])
    def test_table(self, make_user, role, ai, full, admin):
        caps = capabilities_for(make_user(role=role.value))
        assert (caps.can_use_ai, caps.can_view_full_data, caps.is_admin) == (ai, full, admin)

    def test_nobody_has_nothing(self):
        assert capabilities_for(None) == Capabilities()

    def test_require_capability(self, make_user):
        require_capability(make_user(role=UserRole.SENIOR.value), "can_use_ai")
        with pytest.raises(PermissionDeniedError):
            require_capability(make_user(role=UserRole.JUNIOR.value), "can_use_ai")


class TestBrowserContextLifetime:
    """Abandoned browser contexts do not keep receiving snapshots"""

    def test_discarded_browser_context_is_unsubscribed(self, app_context):
        users_channel = app_context.sync._channels["users"]
        baseline = users_channel.subscriber_count

        browser = app_context.for_session(KEY_A).start()
        assert users_channel.subscriber_count == baseline + 1

        del browser
        gc.collect()
        app_context.sync.update_user_department("admin-01", Department.CONSULTING)

        assert users_channel.subscriber_count == baseline

    def test_live_context_keeps_following_role_changes(self, app_context):
        browser = app_context.for_session(KEY_A).start()
        browser.session.login(ADMIN_EMAIL)
        gc.collect()

        app_context.sync.update_user_role("admin-01", UserRole.INTERMEDIATE)

        assert browser.user.role == UserRole.INTERMEDIATE
