# ridebook/common/__init__.py
"""
Shared utilities, constants and the logger.
"""

from ridebook.common.logger import get_logger, log_info, log_error, log_warning, log_debug
from ridebook.common.constants import TypeMsg

__all__ = [
    "get_logger",
    "log_info",
    "log_error",
    "log_warning",
    "log_debug",
    "TypeMsg",
]
