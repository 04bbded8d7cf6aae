# =============================================================================
# daycare_core/errors/__init__.py
# Centralized Error Handling for the Daycare App
# =============================================================================

from .exceptions import (
    DaycareError,
    LocalStorageError,
    CloudMirrorError,
    RecordNotFoundError,
    DataValidationError,
    LifecycleError,
    ConfirmationRequiredError,
    EmailRelayError,
    ReportDispatchError,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    safe_execute,
    ErrorContext,
)

__all__ = [
    # Exceptions
    "DaycareError",
    "LocalStorageError",
    "CloudMirrorError",
    "RecordNotFoundError",
    "DataValidationError",
    "LifecycleError",
    "ConfirmationRequiredError",
    "EmailRelayError",
    "ReportDispatchError",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "safe_execute",
    "ErrorContext",
]
