# =============================================================================
# daycare_core/errors/exceptions.py
# Custom Exception Hierarchy for the Daycare App
# =============================================================================

from typing import Optional, Dict, Any


class DaycareError(Exception):
    """
    Base exception for all daycare app errors.

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
        self.code = code or "DC_000"
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
# STORAGE LAYER EXCEPTIONS
# =============================================================================

class LocalStorageError(DaycareError):
    """Raised when a local collection cannot be read or written"""

    def __init__(self, message: str, collection: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if collection:
            details["collection"] = collection

        super().__init__(message=message, code="STORE_001", details=details, **kwargs)


class CloudMirrorError(DaycareError):
    """Raised when the cloud mirror cannot be reached or rejects a call"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        if operation:
            details["operation"] = operation

        super().__init__(message=message, code="CLOUD_001", details=details, **kwargs)


class RecordNotFoundError(DaycareError):
    """Raised when a requested record does not exist in any store"""

    def __init__(self, message: str, collection: Optional[str] = None,
                 record_id: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if collection:
            details["collection"] = collection
        if record_id:
            details["record_id"] = record_id

        super().__init__(message=message, code="STORE_404", details=details, **kwargs)


class DataValidationError(DaycareError):
    """Raised when user input fails validation (e.g. a malformed form field)"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if expected:
            details["expected"] = expected
        if actual:
            details["actual"] = actual

        super().__init__(message=message, code="DATA_001", details=details, **kwargs)


# =============================================================================
# DAILY LOG LIFECYCLE EXCEPTIONS
# =============================================================================

class LifecycleError(DaycareError):
    """Raised when a daily-log transition is not allowed from the current status"""

    def __init__(
        self,
        message: str,
        action: Optional[str] = None,
        status: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if action:
            details["action"] = action
        if status:
            details["status"] = status

        super().__init__(message=message, code="LOG_001", details=details, **kwargs)


class ConfirmationRequiredError(DaycareError):
    """Raised when a destructive action is invoked without explicit confirmation"""

    def __init__(self, message: str, action: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if action:
            details["action"] = action

        super().__init__(message=message, code="LOG_002", details=details, **kwargs)


# =============================================================================
# REPORT DISPATCH EXCEPTIONS
# =============================================================================

class EmailRelayError(DaycareError):
    """Raised when the outbound email relay is unconfigured or rejects a send"""

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(message=message, code="MAIL_001", details=details, **kwargs)


class ReportDispatchError(DaycareError):
    """Raised when a report cannot be dispatched by any path"""

    def __init__(self, message: str, child_id: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if child_id:
            details["child_id"] = child_id

        super().__init__(message=message, code="MAIL_002", details=details, **kwargs)


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(DaycareError):
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
