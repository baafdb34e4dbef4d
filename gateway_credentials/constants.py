"""
Constants for the gateway credentials package.

This module centralizes the lookup tables used when reconciling legacy
gateway rows with scoped provider accounts, plus the environment variable
and log level names shared by configuration and logging.
"""

from enum import Enum
from typing import Dict, Tuple


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Environment variables read by the configuration layer."""

    AZURE_STORAGE_CONNECTION = "AzureWebJobsStorage"
    DATABASE_URL = "DATABASE_URL"
    LOG_LEVEL = "LOG_LEVEL"
    ENABLE_LOGS_QUEUE = "ENABLE_LOGS_QUEUE"
    RESOLVER_MAX_WORKERS = "RESOLVER_MAX_WORKERS"


# Masked legacy keys starting with one of these are production keys.
# Anything else is treated as sandbox, never as an error.
PRODUCTION_KEY_PREFIXES: Tuple[str, ...] = (
    "$aact_prod_",  # asaas
    "sk_live_",  # stripe secret key
    "pk_live_",  # stripe publishable key
)

# A scoped payload value must be longer than this to count as a real credential.
SCOPED_CREDENTIAL_MIN_LENGTH = 5

# A legacy masked key must be longer than this to count as a real credential.
LEGACY_CREDENTIAL_MIN_LENGTH = 10

# Payload key that receives the single legacy value when it is promoted.
LEGACY_PAYLOAD_KEYS: Dict[str, str] = {
    "asaas": "api_key",
    "stripe": "secret_key",
}
DEFAULT_LEGACY_PAYLOAD_KEY = "api_key"

# Integration type written on accounts created by promotion.
INTEGRATION_TYPES: Dict[str, str] = {
    "stone": "stone_online",
}
DEFAULT_INTEGRATION_TYPE = "online"

# Legacy preview shape: first N characters, "...", last M characters.
PREVIEW_PREFIX_LENGTH = 12
PREVIEW_SUFFIX_LENGTH = 4

LEGACY_SCOPE = "legacy"
