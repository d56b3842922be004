"""Tests for the conversion exception hierarchy."""

from recordmap.diagnostics import ConversionReport, SkipReason
from recordmap.exceptions import (
    ConfigurationError,
    NotARecordError,
    RecordMapError,
    StrictConversionError,
)


def test_base_error_defaults_code_to_class_name():
    """Test that a missing error code falls back to the class name."""
    error = RecordMapError("boom")

    assert error.error_code == "RECORDMAPERROR"
    assert str(error) == "RECORDMAPERROR: boom"
    assert error.to_dict() == {"error_code": "RECORDMAPERROR", "message": "boom", "details": {}}


def test_subclasses_share_the_base():
    """Test that every error is a RecordMapError."""
    assert issubclass(NotARecordError, RecordMapError)
    assert issubclass(StrictConversionError, RecordMapError)
    assert issubclass(ConfigurationError, RecordMapError)


def test_not_a_record_details():
    """Test that the offending type name is recorded."""
    error = NotARecordError(type_name="int")

    assert error.error_code == "NOT_A_RECORD"
    assert error.details == {"type_name": "int"}


def test_strict_error_serializes_report():
    """Test that skipped fields are exposed in details."""
    report = ConversionReport()
    report.skip(SkipReason.UNMATCHED_KEY, key="extra", actual_type="int")

    error = StrictConversionError(report=report)

    assert error.report is report
    assert error.to_dict()["details"]["skipped"] == [
        {
            "reason": "unmatched_key",
            "name": None,
            "key": "extra",
            "path": "",
            "declared_type": None,
            "actual_type": "int",
        }
    ]
