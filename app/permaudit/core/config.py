"""Settings file loading.

Default filters and flags can be stored in a TOML file so that
recurring audits do not need to repeat them on the command line.
Values given on the command line take precedence.
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from permaudit.core.paths import get_config_path

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base exception for settings file errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested settings file does not exist."""


class ConfigParseError(ConfigError):
    """Raised when the settings file is not valid TOML."""


class ConfigValidationError(ConfigError):
    """Raised when the settings file content does not match the schema."""


class AuditSettings(BaseModel):
    """Audit defaults read from ``config.toml``.

    Attributes:
        file_filter: Comma-joined filter list for files and symlinks.
        directory_filter: Comma-joined filter list for directories.
        ignore_symlinks: Skip symlinks during the walk.
        silent: Omit the header from the report.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    file_filter: Annotated[str | None, Field(description="Allowed file configurations")] = None
    directory_filter: Annotated[
        str | None,
        Field(description="Allowed directory configurations"),
    ] = None
    ignore_symlinks: Annotated[bool, Field(description="Skip symlinks")] = False
    silent: Annotated[bool, Field(description="Omit the report header")] = False


def load_settings(path: Path | None = None) -> AuditSettings:
    """Load and validate audit settings.

    Args:
        path: Explicit settings file. If None, the default path is used
            and a missing file simply yields default settings.

    Returns:
        Validated AuditSettings.

    Raises:
        ConfigNotFoundError: If an explicit path does not exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    settings_path = path or get_config_path()

    if not settings_path.exists():
        if path is not None:
            raise ConfigNotFoundError(f"Settings file not found: {settings_path}")
        logger.debug("No settings file at %s, using defaults", settings_path)
        return AuditSettings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read settings file {settings_path}: {e}") from e

    try:
        settings = AuditSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid settings in {settings_path}: {e}") from e

    logger.debug("Loaded settings from %s", settings_path)
    return settings
