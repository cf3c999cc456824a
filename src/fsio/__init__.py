"""Object-oriented filesystem helpers: paths, files, folders and zip archives."""

import logging

from . import archive_service, file_ops, folder_ops, mime_types, paths
from .constants import LOGGER_NAME
from .errors import (
    ConfigError,
    FileAccessError,
    FileAlreadyExistsError,
    FileFormatError,
    FolderAccessError,
    FsioError,
    MissingFileError,
    MissingFolderError,
    PathIOError,
)
from .file_handle import FileHandle, create_new, open_for_append, open_read, open_read_write
from .logging_utils import StructuredTextFormatter, log_event, setup_logging
from .models import AccessKind, AccessMode, PathInfo, ZipEntry
from .settings import (
    Settings,
    apply_settings,
    get_settings,
    load_settings,
    settings_from_env,
    settings_from_mapping,
)

__version__ = "0.5.0"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

__all__ = [
    "AccessKind",
    "AccessMode",
    "ConfigError",
    "FileAccessError",
    "FileAlreadyExistsError",
    "FileFormatError",
    "FileHandle",
    "FolderAccessError",
    "FsioError",
    "MissingFileError",
    "MissingFolderError",
    "PathIOError",
    "PathInfo",
    "Settings",
    "StructuredTextFormatter",
    "ZipEntry",
    "apply_settings",
    "archive_service",
    "create_new",
    "file_ops",
    "folder_ops",
    "get_settings",
    "load_settings",
    "log_event",
    "mime_types",
    "open_for_append",
    "open_read",
    "open_read_write",
    "paths",
    "settings_from_env",
    "settings_from_mapping",
    "setup_logging",
]
