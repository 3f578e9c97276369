"""
Application configuration and constants for the Distribution API Server.

This module centralizes environment-based configuration, code formats,
regular expressions, mutex timeouts and other constants.

Configuration values can be overridden via environment variables.
"""

from os import environ


# ---------------------------------------------------------------------------
# Application metadata
# ---------------------------------------------------------------------------
API_TITLE = "Distribution API Server"
API_VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# PostgreSQL configuration
# ---------------------------------------------------------------------------
PSQL_DB_DRIVER = environ.get("PSQL_DB_DRIVER", "postgresql")
PSQL_DB_USERNAME = environ.get("PSQL_DB_USERNAME", "postgres")
PSQL_DB_PORT = environ.get("PSQL_DB_PORT", "5432")
PSQL_DB_PASSWORD = environ.get("PSQL_DB_PASSWORD", "password")
PSQL_DB_HOST = environ.get("PSQL_DB_HOST", "localhost")
PSQL_DB_NAME = environ.get("PSQL_DB_NAME", "postgres")


# ---------------------------------------------------------------------------
# OpenObserve configuration
# ---------------------------------------------------------------------------
OPENOBSERVE_PROTOCOL = environ.get("OPENOBSERVE_PROTOCOL", "http")
OPENOBSERVE_HOST = environ.get("OPENOBSERVE_HOST", "localhost")
OPENOBSERVE_PORT = environ.get("OPENOBSERVE_PORT", "5080")
OPENOBSERVE_USERNAME = environ.get("OPENOBSERVE_USERNAME", "admin@distribution.com")
OPENOBSERVE_PASSWORD = environ.get("OPENOBSERVE_PASSWORD", "password")
OPENOBSERVE_ORG = environ.get("OPENOBSERVE_ORG", "default")
OPENOBSERVE_STREAM = environ.get("OPENOBSERVE_STREAM", "distribution-core-server")


# ---------------------------------------------------------------------------
# Redis configuration
# ---------------------------------------------------------------------------
REDIS_HOST = environ.get("REDIS_HOST", "localhost")
REDIS_PORT = environ.get("REDIS_PORT", "6379")
REDIS_PASSWORD = environ.get("REDIS_PASSWORD", "password")


# ---------------------------------------------------------------------------
# Redis mutex lock constants
# ---------------------------------------------------------------------------
MUTEX_LOCK_TIMEOUT = 10  # Lock timeout (in seconds)
MUTEX_LOCK_MAX_WAIT_TIME = 60  # Max blocking wait time (in seconds)

# Serialize the "find last code -> compute next -> save" sequence per table
SERIALIZE_CODE_GENERATION = environ.get(
    "SERIALIZE_CODE_GENERATION", "false"
).lower() in ("1", "true", "yes")


# ---------------------------------------------------------------------------
# Sequential code constants
# ---------------------------------------------------------------------------
PROGRAM_PREFIX = "PROG"
ROUTE_PREFIX = "RUT"
SCHEDULE_PREFIX = "HOR"
FARE_PREFIX = "TAR"
CODE_DIGITS = 3  # Minimum width of the numeric suffix
MAX_CODE_NUMBER = 2**31 - 1  # Larger suffixes are treated as unparseable


# ---------------------------------------------------------------------------
# Regex constants (input validation)
# ---------------------------------------------------------------------------
REGEX_DATE = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"
REGEX_CODE_NUMBER = r"^[0-9]+$"


# ---------------------------------------------------------------------------
# Date format constants
# ---------------------------------------------------------------------------
DATE_FORMAT = "%Y-%m-%d"


# ---------------------------------------------------------------------------
# Identifier constants
# ---------------------------------------------------------------------------
ID_BYTES = 12  # 24 hexadecimal characters
