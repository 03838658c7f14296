"""
Auth Module

Session/Identity Manager and the role -> capability table.
"""

from greenmaster_core.auth.permissions import (
    CAPABILITY_TABLE,
    NO_CAPABILITIES,
    Capabilities,
    capabilities_for,
    require_capability,
)
from greenmaster_core.auth.session import (
    SESSION_SLOT,
    SessionManager,
    normalize_email,
    session_slot,
)

__all__ = [
    "CAPABILITY_TABLE",
    "NO_CAPABILITIES",
    "Capabilities",
    "capabilities_for",
    "require_capability",
    "SESSION_SLOT",
    "SessionManager",
    "normalize_email",
    "session_slot",
]
