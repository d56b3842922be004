"""Converter settings and configuration models."""

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingConfig(BaseModel):
    """Logging configuration settings."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="console", pattern="^(json|console)$", description="Log format (json, console)"
    )
    redact_values: bool = Field(
        default=True, description="Strip record field values from log events"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}")
        return level


class Settings(BaseSettings):
    """Conversion behaviour switches."""

    strict: bool = Field(
        default=False,
        description="Raise StrictConversionError when a conversion skips anything",
    )
    exclusive_exact_match: bool = Field(
        default=False,
        description="Skip the case-insensitive scan for keys that matched exactly",
    )
    materialize_optionals: bool = Field(
        default=True,
        description="Allocate None nested records while reading them into a map",
    )
    flatten_nested: bool = Field(
        default=True,
        description="Flatten nested record fields that carry no flatten marker",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="RECORDMAP_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )
