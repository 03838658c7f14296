# =============================================================================
# greenmaster_core/errors/exceptions.py
# Custom Exception Hierarchy for GreenMaster
# =============================================================================

from typing import Optional, Dict, Any


class GreenMasterError(Exception):
    """
    Base exception for all GreenMaster errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "STORE_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "GM_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# STORE EXCEPTIONS
# =============================================================================

class DocumentStoreError(GreenMasterError):
    """Raised when the backing document store rejects a read or write"""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        document_id: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if collection:
            details["collection"] = collection
        if document_id:
            details["document_id"] = document_id
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            code="STORE_001",
            details=details,
            **kwargs,
        )


class DocumentValidationError(GreenMasterError):
    """Raised when a document does not carry the fields its collection requires"""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        missing: Optional[list] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if collection:
            details["collection"] = collection
        if missing:
            details["missing"] = missing

        super().__init__(
            message=message,
            code="STORE_002",
            details=details,
            **kwargs,
        )


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthenticationError(GreenMasterError):
    """Base class for login/registration failures"""

    code = "AUTH_000"

    def __init__(self, message: str, email: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if email:
            details["email"] = email
        super().__init__(
            message=message,
            code=self.code,
            details=details,
            **kwargs,
        )


class UnregisteredEmailError(AuthenticationError):
    """No user profile carries this email"""

    code = "AUTH_001"


class ApprovalPendingError(AuthenticationError):
    """The profile exists but an administrator has not approved it yet"""

    code = "AUTH_002"


class AccountRejectedError(AuthenticationError):
    """The profile was rejected or blocked by an administrator"""

    code = "AUTH_003"


class AlreadyRegisteredError(AuthenticationError):
    """Registration attempted with an email that is already on file"""

    code = "AUTH_004"


class PermissionDeniedError(AuthenticationError):
    """The session user's role does not grant the requested capability"""

    code = "AUTH_005"


# =============================================================================
# AI GATEWAY EXCEPTIONS
# =============================================================================

class AIGatewayError(GreenMasterError):
    """Base class for generative-text failures"""

    code = "AI_000"

    def __init__(self, message: str, model: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if model:
            details["model"] = model
        super().__init__(
            message=message,
            code=self.code,
            details=details,
            **kwargs,
        )


class AINotConfiguredError(AIGatewayError):
    """No API key is configured for the AI provider"""

    code = "AI_001"


class AIServiceUnavailableError(AIGatewayError):
    """Transient provider failure that persisted through every retry"""

    code = "AI_002"


class AIRequestError(AIGatewayError):
    """Permanent provider failure (auth, malformed request, quota policy)"""

    code = "AI_003"


class AIContentBlockedError(AIGatewayError):
    """The provider refused to answer because of its content-safety policy"""

    code = "AI_004"


class AIResponseFormatError(AIGatewayError):
    """Structured response could not be parsed or lacks required fields"""

    code = "AI_005"


class AIInputError(AIGatewayError):
    """Input rejected before calling the provider (file type, size, empty)"""

    code = "AI_006"


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(GreenMasterError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
