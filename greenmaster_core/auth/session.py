# =============================================================================
# greenmaster_core/auth/session.py
# Session/Identity Manager
# =============================================================================
"""
SessionManager - who is logged in, kept in sync with the users collection.

The session user is persisted to a ``greenmaster_user`` slot so it survives
a restart. Each browser gets its own slot (``greenmaster_user_<key>``, see
``session_slot``) so sessions sharing one storage never see each other.

While a user is logged in, every new users snapshot is checked for that
user's record; a changed record (role, status, department...) replaces the
session user without a new login.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from greenmaster_core.auth.permissions import Capabilities, capabilities_for
from greenmaster_core.errors import (
    AccountRejectedError,
    AlreadyRegisteredError,
    ApprovalPendingError,
    DocumentValidationError,
    UnregisteredEmailError,
)
from greenmaster_core.models import (
    COLLECTION_USERS,
    AuditAction,
    AuditTarget,
    Department,
    UserProfile,
    UserRole,
    UserStatus,
)
from greenmaster_core.state import AuditLogger, CollectionSynchronizer
from greenmaster_core.store import KeyValueStorage, Snapshot

logger = logging.getLogger(__name__)

SESSION_SLOT = "greenmaster_user"


def session_slot(browser_key: Optional[str] = None) -> str:
    """Slot holding the session user of one browser (the shared slot without a key)."""
    return f"{SESSION_SLOT}_{browser_key}" if browser_key else SESSION_SLOT


MSG_UNREGISTERED = "등록된 이메일이 아닙니다. 회원가입을 진행해주세요."
MSG_PENDING = "계정이 승인 대기 중입니다. 관리자 승인 후 로그인 가능합니다."
MSG_REJECTED = "승인이 거절된 계정입니다. 관리자에게 문의하세요."
MSG_ALREADY_REGISTERED = "이미 등록된 이메일입니다."


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().casefold()


class SessionManager:
    """Unauthenticated <-> Authenticated, with live re-resolution."""

    def __init__(
        self,
        sync: CollectionSynchronizer,
        storage: KeyValueStorage,
        audit: AuditLogger,
        slot: str = SESSION_SLOT,
    ):
        self.sync = sync
        self.storage = storage
        self.audit = audit
        self.slot = slot
        self._user: Optional[UserProfile] = self._restore()
        self._listeners: List[Callable[[Optional[UserProfile]], None]] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def user(self) -> Optional[UserProfile]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def capabilities(self) -> Capabilities:
        return capabilities_for(self._user)

    def add_listener(self, callback: Callable[[Optional[UserProfile]], None]) -> None:
        """Called with the new session user whenever it changes."""
        self._listeners.append(callback)

    def start(self) -> None:
        """Follow the users collection for live role/status changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.sync.subscribe(COLLECTION_USERS, self._on_users, weak=True)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def login(self, email: str) -> UserProfile:
        """Authenticate by email; raises an AuthenticationError subclass on refusal."""
        profile = self._find_by_email(email)
        if profile is None:
            raise UnregisteredEmailError(MSG_UNREGISTERED, email=email)
        if profile.status == UserStatus.PENDING:
            raise ApprovalPendingError(MSG_PENDING, email=email)
        if profile.status != UserStatus.APPROVED:
            raise AccountRejectedError(MSG_REJECTED, email=email)

        self._set_user(profile)
        self.audit.record(AuditAction.LOGIN, AuditTarget.USER, profile.name, actor=profile)
        logger.info(f"User logged in: {profile.id}")
        return profile

    def register(self, name: str, email: str, department: Department) -> str:
        """Create a pending profile. Does not log in; returns the new user id."""
        if self._find_by_email(email) is not None:
            raise AlreadyRegisteredError(MSG_ALREADY_REGISTERED, email=email)

        profile = UserProfile(
            id=self.sync.store.new_id(COLLECTION_USERS),
            name=name.strip(),
            email=email.strip(),
            role=UserRole.INTERMEDIATE,
            department=department,
            status=UserStatus.PENDING,
            avatar=f"https://ui-avatars.com/api/?name={name.strip()}&background=random",
        )
        user_id = self.sync.store.save(COLLECTION_USERS, profile.to_document())
        logger.info(f"Registered pending user {user_id}")
        return user_id

    def logout(self) -> None:
        if self._user is not None:
            logger.info(f"User logged out: {self._user.id}")
        self._user = None
        self.storage.delete(self.slot)
        self._notify()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _find_by_email(self, email: str) -> Optional[UserProfile]:
        target = normalize_email(email)
        if not target:
            return None
        for profile in self.sync.users:
            if normalize_email(profile.email) == target:
                return profile
        return None

    def _set_user(self, profile: UserProfile) -> None:
        self._user = profile
        self.storage.set(self.slot, profile.to_document())
        self._notify()

    def _on_users(self, snapshot: Snapshot) -> None:
        if self._user is None:
            return
        record = next((doc for doc in snapshot if doc.get("id") == self._user.id), None)
        if record is None:
            # Kept until explicit logout
            logger.warning(f"Session user {self._user.id} is no longer in the users collection")
            return
        try:
            latest = UserProfile.from_document(record)
        except DocumentValidationError as e:
            logger.warning(f"Ignoring malformed record for session user: {e}")
            return
        if latest != self._user:
            logger.info(f"Session user {latest.id} updated (role={latest.role.name}, status={latest.status.value})")
            self._set_user(latest)

    def _restore(self) -> Optional[UserProfile]:
        saved = self.storage.get(self.slot)
        if not saved:
            return None
        try:
            return UserProfile.from_document(saved)
        except DocumentValidationError as e:
            logger.warning(f"Discarding unreadable saved session: {e}")
            self.storage.delete(self.slot)
            return None

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self._user)
