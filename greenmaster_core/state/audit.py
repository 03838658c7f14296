# =============================================================================
# greenmaster_core/state/audit.py
# Audit Logger (append-only system log)
# =============================================================================

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from greenmaster_core.models import (
    COLLECTION_SYSTEM_LOGS,
    AuditAction,
    AuditTarget,
    UserProfile,
)
from greenmaster_core.store import DocumentStore

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class AuditLogger:
    """
    Appends one AuditEvent per mutating action.

    Actions taken with no session user are not recorded. Events are only ever
    created; nothing here updates or deletes them.
    """

    def __init__(
        self,
        store: DocumentStore,
        current_user: Callable[[], Optional[UserProfile]],
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.current_user = current_user
        self.clock = clock

    def record(
        self,
        action: AuditAction,
        target: AuditTarget,
        target_name: str,
        details: Optional[str] = None,
        actor: Optional[UserProfile] = None,
    ) -> Optional[str]:
        """Write the event; returns its id, or None when nobody is logged in."""
        actor = actor or self.current_user()
        if actor is None:
            logger.debug(f"Unaudited {action.value} {target.value} {target_name}: no session user")
            return None

        event = {
            "timestamp": self.clock(),
            "userId": actor.id,
            "userName": actor.name,
            "actionType": action.value,
            "targetType": target.value,
            "targetName": target_name or "",
        }
        if details:
            event["details"] = details
        return self.store.save(COLLECTION_SYSTEM_LOGS, event)
