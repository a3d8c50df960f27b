"""Apatite - dense linear algebra on plain Python numbers"""

from .core import (
    DimensionMismatchError,
    InvalidArgumentError,
    LinearAlgebraError,
    NotRegularError,
    OperationNotDefinedError,
    ZeroVectorError,
    setup_logging,
)
from .linalg import I, J, K, Matrix, Selector, Vector

__version__ = "0.1.0"

__all__ = [
    "Vector",
    "Matrix",
    "Selector",
    "I",
    "J",
    "K",
    "LinearAlgebraError",
    "DimensionMismatchError",
    "InvalidArgumentError",
    "NotRegularError",
    "ZeroVectorError",
    "OperationNotDefinedError",
    "setup_logging",
]
