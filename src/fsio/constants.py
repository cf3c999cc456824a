"""Literal constants used by fsio."""

DEFAULT_FILE_MODE = 0o755
DEFAULT_CREATE_FILE_MODE = 0o750
DEFAULT_FOLDER_MODE = 0o700
DEFAULT_ENCODING = "utf-8"

DEFAULT_MIME_TYPE = "application/octet-stream"
IMAGE_MIME_PREFIX = "image/"

ARCHIVE_BACKUP_SUFFIX = ".old"
UNZIP_BACKUP_SUFFIX = "-tmp"
SINGLE_FILE_ZIP_COMMENT = "Archived Single-File"

# Characters stripped from path segment boundaries before joining.
PATH_TRIM_CHARS = "\r\n\t /\\"
LINE_END_CHARS = "\r\n"

CONFIG_ENV_VAR = "FSIO_CONFIG"
SHELL_FALLBACK_ENV_VAR = "FSIO_SHELL_FALLBACK"

LOGGER_NAME = "fsio"
