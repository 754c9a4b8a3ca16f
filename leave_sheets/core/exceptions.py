from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class ConfigurationError(AppException):
    """Required credentials or the spreadsheet id are missing. Never retried."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="CONFIGURATION_ERROR",
            details=details
        )

class TransientBackendError(AppException):
    """A call to the spreadsheet backend failed. Retried with backoff by the store."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=503,
            error_code="BACKEND_UNAVAILABLE",
            details=details
        )

class NotFoundError(AppException):
    def __init__(self, entity: str, key: str):
        super().__init__(
            message=f"{entity} with id {key} not found",
            status_code=404,
            error_code="NOT_FOUND",
            details={"entity": entity, "key": key}
        )

class ConflictError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT",
            details=details
        )

class ConcurrentModificationError(ConflictError):
    """The table changed between reading it and rewriting it in full."""
    def __init__(self, table: str, expected_rows: int, actual_rows: int):
        super().__init__(
            message=f"Sheet {table} changed during rewrite (expected {expected_rows} rows, found {actual_rows})",
            details={"table": table, "expected_rows": expected_rows, "actual_rows": actual_rows}
        )
        self.error_code = "CONCURRENT_MODIFICATION"

class ValidationError(AppException):
    """Malformed input caught at the service boundary, before any backend call."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details
        )

class AuthenticationError(AppException):
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )

class SchemaError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="SCHEMA_ERROR",
            details=details
        )

class SetupError(AppException):
    def __init__(self, message: str = "Failed to initialize Google Sheets", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="SETUP_FAILED",
            details=details
        )
