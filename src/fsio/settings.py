"""Library settings: loading, validation, and the active settings object."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from .constants import (
    ARCHIVE_BACKUP_SUFFIX,
    CONFIG_ENV_VAR,
    DEFAULT_CREATE_FILE_MODE,
    DEFAULT_ENCODING,
    DEFAULT_FILE_MODE,
    DEFAULT_FOLDER_MODE,
    SHELL_FALLBACK_ENV_VAR,
    SINGLE_FILE_ZIP_COMMENT,
    UNZIP_BACKUP_SUFFIX,
)
from .errors import ConfigError

_TRUE_TEXTS = {"1", "true", "yes", "on"}
_FALSE_TEXTS = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    shell_fallback: bool = True
    file_mode: int = DEFAULT_FILE_MODE
    create_file_mode: int = DEFAULT_CREATE_FILE_MODE
    folder_mode: int = DEFAULT_FOLDER_MODE
    encoding: str = DEFAULT_ENCODING
    archive_backup_suffix: str = ARCHIVE_BACKUP_SUFFIX
    unzip_backup_suffix: str = UNZIP_BACKUP_SUFFIX
    single_file_zip_comment: str = SINGLE_FILE_ZIP_COMMENT


_BOOL_FIELDS = {"shell_fallback"}
_MODE_FIELDS = {"file_mode", "create_file_mode", "folder_mode"}
_NON_EMPTY_STRING_FIELDS = {"encoding", "archive_backup_suffix", "unzip_backup_suffix"}
_STRING_FIELDS = _NON_EMPTY_STRING_FIELDS | {"single_file_zip_comment"}

_active_settings: Settings | None = None


def _parse_mode(field_name: str, value: Any) -> int:
    """Accept an int or an octal string such as ``"0755"`` / ``"0o755"``."""
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be an integer or octal string")
    if isinstance(value, int):
        mode = value
    elif isinstance(value, str):
        text = value.strip().lower().removeprefix("0o")
        try:
            mode = int(text, 8)
        except ValueError as exc:
            raise ConfigError(f"{field_name} is not a valid octal mode: {value}") from exc
    else:
        raise ConfigError(f"{field_name} must be an integer or octal string")

    if not 0 <= mode <= 0o7777:
        raise ConfigError(f"{field_name} is out of range: {oct(mode)}")
    return mode


def _parse_bool_text(field_name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_TEXTS:
        return True
    if lowered in _FALSE_TEXTS:
        return False
    raise ConfigError(f"{field_name} must be a boolean, got: {value}")


def settings_from_mapping(payload: Mapping[str, Any], base: Settings | None = None) -> Settings:
    """Validate ``payload`` and return it layered over ``base``."""
    known = {field.name for field in fields(Settings)}
    unknown = set(payload) - known
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")

    values: dict[str, Any] = {}
    for field_name, value in payload.items():
        if field_name in _BOOL_FIELDS:
            if not isinstance(value, bool):
                raise ConfigError(f"{field_name} must be a boolean")
            values[field_name] = value
        elif field_name in _MODE_FIELDS:
            values[field_name] = _parse_mode(field_name, value)
        elif field_name in _STRING_FIELDS:
            if not isinstance(value, str):
                raise ConfigError(f"{field_name} must be a string")
            if field_name in _NON_EMPTY_STRING_FIELDS and not value:
                raise ConfigError(f"{field_name} must be a non-empty string")
            values[field_name] = value

    return replace(base or Settings(), **values)


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON file."""
    settings_path = Path(path)
    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Settings file not found: {settings_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in settings file {settings_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read settings file: {settings_path}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"Settings file must contain a JSON object: {settings_path}")
    return settings_from_mapping(payload)


def settings_from_env(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``FSIO_CONFIG`` and ``FSIO_SHELL_FALLBACK``."""
    env = os.environ if environ is None else environ

    config_path = env.get(CONFIG_ENV_VAR, "").strip()
    settings = load_settings(config_path) if config_path else Settings()

    shell_fallback_text = env.get(SHELL_FALLBACK_ENV_VAR)
    if shell_fallback_text is not None and shell_fallback_text.strip():
        settings = replace(
            settings,
            shell_fallback=_parse_bool_text(SHELL_FALLBACK_ENV_VAR, shell_fallback_text),
        )
    return settings


def get_settings() -> Settings:
    """Return the active settings, reading the environment on first use."""
    global _active_settings
    if _active_settings is None:
        _active_settings = settings_from_env()
    return _active_settings


def apply_settings(settings: Settings | None) -> None:
    """Replace the active settings. ``None`` re-reads the environment on next use."""
    global _active_settings
    _active_settings = settings
