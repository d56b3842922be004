"""Load settings from an optional YAML file layered over the environment."""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .settings import Settings


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Build settings from defaults, ``RECORDMAP_*`` environment variables and,
    when given, a YAML file whose top-level keys override both.

    Raises:
        ConfigurationError: The file is missing, unparsable, or holds invalid values.
    """
    overrides = {}
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}", config_path=str(path)
            )
        try:
            with open(path, "r", encoding="utf-8") as f:
                overrides = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}", config_path=str(path)
            ) from e
        if not isinstance(overrides, dict):
            raise ConfigurationError(
                "Configuration file must contain a mapping", config_path=str(path)
            )

    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            config_path=str(config_path) if config_path else None,
        ) from e
