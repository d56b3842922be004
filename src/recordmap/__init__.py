"""
recordmap: convert between typed records and flat string-keyed maps.

Records are dataclass instances or pydantic models. Nested records are
flattened into ``<parent>_<child>`` keys and rebuilt from them, with per-field
name overrides, case-insensitive key matching and cached field metadata.
"""

__version__ = "0.1.0"

from .catalog import PREFIX_SEPARATOR, FieldCatalog, FieldDescriptor
from .config import LoggingConfig, Settings, load_settings
from .converter import Converter
from .diagnostics import ConversionReport, SkippedField, SkipReason
from .exceptions import (
    ConfigurationError,
    NotARecordError,
    RecordMapError,
    StrictConversionError,
)
from .logging import get_logger, setup_logging, setup_logging_from_settings

__all__ = [
    "PREFIX_SEPARATOR",
    "ConfigurationError",
    "ConversionReport",
    "Converter",
    "FieldCatalog",
    "FieldDescriptor",
    "LoggingConfig",
    "NotARecordError",
    "RecordMapError",
    "Settings",
    "SkipReason",
    "SkippedField",
    "StrictConversionError",
    "get_logger",
    "load_settings",
    "setup_logging",
    "setup_logging_from_settings",
]
