"""
核心模块

提供配置、异常和日志等库内公共功能。
"""

from utilkit.core.config import Settings, get_settings, load_settings, set_settings
from utilkit.core.exceptions import (
    AppException,
    ClockRegressionError,
    ConfigurationError,
    ConflictError,
    FileUploadError,
    IdGeneratorError,
    InvalidMachineIdError,
    NotFoundError,
    ServerError,
    TimestampOverflowError,
    ValidationError,
)
from utilkit.core.logging import get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "set_settings",
    "AppException",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "ServerError",
    "ConfigurationError",
    "FileUploadError",
    "IdGeneratorError",
    "InvalidMachineIdError",
    "ClockRegressionError",
    "TimestampOverflowError",
    "get_logger",
    "setup_logging",
]
