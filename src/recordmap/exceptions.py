"""Exceptions raised by the record/map conversion layer."""

from typing import Any, Dict, Optional


class RecordMapError(Exception):
    """Base exception for all conversion errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}'"
            f")"
        )


class NotARecordError(RecordMapError):
    """Raised when a record type is required but something else was given."""

    def __init__(
        self,
        message: str = "Value is not a record",
        error_code: str = "NOT_A_RECORD",
        details: Optional[Dict[str, Any]] = None,
        type_name: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if type_name:
            self.details["type_name"] = type_name


class StrictConversionError(RecordMapError):
    """Raised in strict mode when a conversion skipped one or more fields."""

    def __init__(
        self,
        message: str = "Conversion skipped fields",
        error_code: str = "STRICT_CONVERSION_ERROR",
        details: Optional[Dict[str, Any]] = None,
        report: Any = None,
    ):
        super().__init__(message, error_code, details)
        self.report = report
        if report is not None:
            self.details["skipped"] = [skip.to_dict() for skip in report.skipped]


class ConfigurationError(RecordMapError):
    """Raised for unreadable or invalid configuration."""

    def __init__(
        self,
        message: str = "Configuration error",
        error_code: str = "CONFIGURATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
        config_path: Optional[str] = None,
    ):
        super().__init__(message, error_code, details)
        if config_path:
            self.details["config_path"] = config_path
