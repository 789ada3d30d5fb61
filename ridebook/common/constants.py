# ridebook/common/constants.py
"""
Shared constants and enumerations.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Log message types."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Name of the root application logger
APP_LOGGER_NAME = "ridebook"

# Placeholder shown instead of raw exception text in production responses
GENERIC_SERVER_ERROR_MESSAGE = "An internal server error occurred"
