"""
Library exceptions.

Every failure is raised synchronously at the offending operation. Each error
also derives from the built-in exception callers would naturally catch.
"""

from typing import Any, Dict, Optional

from .logging import get_logger

logger = get_logger(__name__)


class LinearAlgebraError(Exception):
    """Base exception for linear algebra errors"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DimensionMismatchError(LinearAlgebraError, ValueError):
    """Raised when operand shapes are incompatible for an operation"""

    def __init__(
        self,
        message: str = "Dimension mismatch",
        expected: Any = None,
        actual: Any = None,
    ):
        details = {}
        if expected is not None:
            details["expected"] = expected
        if actual is not None:
            details["actual"] = actual
        super().__init__(message=message, details=details)


class InvalidArgumentError(LinearAlgebraError, ValueError):
    """Raised for malformed parameters"""

    def __init__(self, message: str, argument: Optional[str] = None):
        details = {"argument": argument} if argument else {}
        super().__init__(message=message, details=details)


class NotRegularError(LinearAlgebraError, ValueError):
    """Raised when inverting a singular matrix"""

    def __init__(self, message: str = "Matrix is not regular (singular)", pivot_column: Optional[int] = None):
        details = {"pivot_column": pivot_column} if pivot_column is not None else {}
        super().__init__(message=message, details=details)


class ZeroVectorError(LinearAlgebraError, ValueError):
    """Raised when an operation needs a vector with nonzero magnitude"""

    def __init__(self, message: str = "Operation not defined on a zero vector"):
        super().__init__(message=message)


class OperationNotDefinedError(LinearAlgebraError, ValueError):
    """Raised when an operation has no meaning for the receiver"""

    def __init__(self, message: str, operation: Optional[str] = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message=message, details=details)


def describe_error(error: Exception, include_details: bool = True) -> Dict[str, Any]:
    """Render an error as a plain dict and log it"""

    error_data: Dict[str, Any] = {
        "type": error.__class__.__name__,
        "message": str(error),
    }

    if isinstance(error, LinearAlgebraError) and include_details:
        error_data["details"] = error.details

    logger.error(
        f"Error occurred: {error}",
        extra={"extra_data": {
            "error_type": error.__class__.__name__,
            **(error.details if isinstance(error, LinearAlgebraError) else {})
        }},
    )

    return error_data
