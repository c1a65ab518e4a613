"""
Constants and configuration values for sofacheck.

This module contains the feed URL, cache locations, status labels, timeouts
and logging settings used throughout the application.
"""

# SOFA feed
SOFA_FEED_URL = "https://sofafeed.macadmins.io/v1/macos_data_feed.json"
SOFA_USER_AGENT = "SOFA-osquery-macOSCompatibilityCheck/1.0"

# Network timeouts (in seconds)
FEED_REQUEST_TIMEOUT = 30

# Cache locations
APP_NAME = "sofacheck"
MACOS_CACHE_DIR = "/private/var/tmp/sofa"
FEED_CACHE_FILE = "macos_data_feed.json"
ETAG_CACHE_FILE = "macos_data_feed_etag.txt"
CACHE_DIR_PERMISSIONS = 0o755
CACHE_FILE_PERMISSIONS = 0o644

# Feed document keys
FEED_OS_VERSIONS_KEY = "OSVersions"
FEED_OS_VERSION_KEY = "OSVersion"
FEED_MODELS_KEY = "Models"
FEED_SUPPORTED_OS_KEY = "SupportedOS"

# Virtual machines report a synthetic model that the feed does not list,
# so an Apple silicon Mac mini stands in for them.
VIRTUAL_MODEL_MARKER = "VirtualMac"
VIRTUAL_REFERENCE_MODEL = "Macmini9,1"

# Placeholder labels for version columns
LABEL_UNKNOWN = "Unknown"
LABEL_UNSUPPORTED = "Unsupported"
LABEL_ERROR = "Error"

# Status labels
STATUS_PASS = "Pass"
STATUS_FAIL = "Fail"
STATUS_UNSUPPORTED_HARDWARE = "Unsupported Hardware"
STATUS_NO_DATA = "Could not obtain data"
STATUS_PARSE_ERROR_PREFIX = "Error parsing data: "

# Output columns, in table order
RESULT_COLUMNS = (
    "system_version",
    "system_os_major",
    "model_identifier",
    "latest_macos",
    "latest_compatible_macos",
    "is_compatible",
    "status",
)

# CLI exit codes
EXIT_PASS = 0
EXIT_ERROR = 1
EXIT_NOT_COMPATIBLE = 2
EXIT_UNKNOWN = 3

# Configuration file
CONFIG_FILE_NAME = "sofacheck.yaml"

# Logging configuration
LOGGER_NAME = "sofacheck"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_NAME = "sofacheck.log"
LOG_FILE_MAX_BYTES = 1 * 1024 * 1024  # 1 MB
LOG_FILE_BACKUP_COUNT = 3
DEFAULT_LOG_LEVEL = "WARNING"

# Environment variable names
LOG_LEVEL_ENV_VAR = "SOFACHECK_LOG_LEVEL"
FEED_URL_ENV_VAR = "SOFACHECK_FEED_URL"
CACHE_DIR_ENV_VAR = "SOFACHECK_CACHE_DIR"
