# =============================================================================
# greenmaster_core/errors/__init__.py
# Centralized Error Handling for GreenMaster
# =============================================================================

from .exceptions import (
    GreenMasterError,
    DocumentStoreError,
    DocumentValidationError,
    AuthenticationError,
    UnregisteredEmailError,
    ApprovalPendingError,
    AccountRejectedError,
    AlreadyRegisteredError,
    PermissionDeniedError,
    AIGatewayError,
    AINotConfiguredError,
    AIServiceUnavailableError,
    AIRequestError,
    AIContentBlockedError,
    AIResponseFormatError,
    AIInputError,
    ConfigurationError,
)

__all__ = [
    # Exceptions
    "GreenMasterError",
    "DocumentStoreError",
    "DocumentValidationError",
    "AuthenticationError",
    "UnregisteredEmailError",
    "ApprovalPendingError",
    "AccountRejectedError",
    "AlreadyRegisteredError",
    "PermissionDeniedError",
    "AIGatewayError",
    "AINotConfiguredError",
    "AIServiceUnavailableError",
    "AIRequestError",
    "AIContentBlockedError",
    "AIResponseFormatError",
    "AIInputError",
    "ConfigurationError",
]
