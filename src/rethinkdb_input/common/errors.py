from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    """Broad failure classes for a connector run."""
    CONFIGURATION = "CONFIGURATION"
    TRANSPORT = "TRANSPORT"
    DATA = "DATA"


class ErrorCode(str, Enum):
    """Standardized error codes for the connector."""
    INVALID_CONFIG = "INVALID_CONFIG"
    CONFIG_FILE_INVALID = "CONFIG_FILE_INVALID"
    SECRET_NOT_FOUND = "SECRET_NOT_FOUND"
    UNSUPPORTED_AUTH = "UNSUPPORTED_AUTH"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
    QUERY_SOURCE_CONFLICT = "QUERY_SOURCE_CONFLICT"
    MISSING_QUERY_SOURCE = "MISSING_QUERY_SOURCE"
    QUERY_COMPILE_ERROR = "QUERY_COMPILE_ERROR"
    CERT_FILE_UNREADABLE = "CERT_FILE_UNREADABLE"
    UNKNOWN_DOCUMENT_TYPE = "UNKNOWN_DOCUMENT_TYPE"
    INTEGER_OVERFLOW = "INTEGER_OVERFLOW"
    DUPLICATE_MAP_KEY = "DUPLICATE_MAP_KEY"


class RethinkdbInputError(Exception):
    """Base class for errors raised by the connector itself.

    Transport failures are not wrapped: the driver's own exceptions propagate
    unchanged to the caller.

    Attributes:
        error_code (ErrorCode): The standardized error code.
        category (ErrorCategory): The failure class used for exit codes and reporting.
    """

    category: ErrorCategory = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, error_code: ErrorCode, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(RethinkdbInputError):
    """Invalid or unsupported configuration, including query compilation failures."""

    category = ErrorCategory.CONFIGURATION

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_CONFIG,
        details: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)


class DataError(RethinkdbInputError):
    """A document value that cannot be converted into a canonical value."""

    category = ErrorCategory.DATA

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_DOCUMENT_TYPE,
        details: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
