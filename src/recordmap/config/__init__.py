"""Configuration management for recordmap."""

from .loader import load_settings
from .settings import LoggingConfig, Settings

__all__ = ["LoggingConfig", "Settings", "load_settings"]
