"""Core utilities package"""

from .config import get_settings, Settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    LinearAlgebraError,
    DimensionMismatchError,
    InvalidArgumentError,
    NotRegularError,
    ZeroVectorError,
    OperationNotDefinedError,
    describe_error,
)

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "LinearAlgebraError",
    "DimensionMismatchError",
    "InvalidArgumentError",
    "NotRegularError",
    "ZeroVectorError",
    "OperationNotDefinedError",
    "describe_error",
]
