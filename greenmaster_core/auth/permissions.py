# =============================================================================
# greenmaster_core/auth/permissions.py
# Role -> capability table
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from greenmaster_core.errors import PermissionDeniedError
from greenmaster_core.models import UserProfile, UserRole


@dataclass(frozen=True)
class Capabilities:
    """Feature areas a role may see."""
    can_use_ai: bool = False
    can_view_full_data: bool = False  # False means the issues-only view
    is_admin: bool = False


NO_CAPABILITIES = Capabilities()

CAPABILITY_TABLE = {
    UserRole.SENIOR: Capabilities(can_use_ai=True, can_view_full_data=True, is_admin=True),
    UserRole.ADMIN: Capabilities(can_use_ai=True, can_view_full_data=True, is_admin=True),
    UserRole.INTERMEDIATE: Capabilities(can_view_full_data=True),
    UserRole.JUNIOR: NO_CAPABILITIES,
}


def capabilities_for(user: Optional[UserProfile]) -> Capabilities:
    if user is None:
        return NO_CAPABILITIES
    return CAPABILITY_TABLE.get(user.role, NO_CAPABILITIES)


def require_capability(user: Optional[UserProfile], capability: str) -> None:
    """Raise PermissionDeniedError unless ``user`` has ``capability``."""
    if not getattr(capabilities_for(user), capability):
        raise PermissionDeniedError(
            f"Permission denied: {capability}",
            email=user.email if user else None,
            details={"capability": capability},
        )
