"""
Base class for the linear algebra value types.

Provides the shared contract of Vector and Matrix:
- Immutable value semantics (every operation returns a new instance)
- Operator overloading
- Fuzzy comparison with tolerances
- Multiple output formats (string, TeX, Python, JSON)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationInfo

# Validation context key for data that __init__ has already normalized
NORMALIZED = "apatite_normalized"


class LinearValue(ABC):
    """
    Abstract base for Vector and Matrix.

    Concrete subclasses inherit from both BaseModel and LinearValue,
    e.g. ``class Vector(BaseModel, LinearValue):``. LinearValue itself does not
    inherit from BaseModel to avoid MRO conflicts.
    """

    @abstractmethod
    def compare(self, other: Any, tolerance: float | None = None, mode: str = "relative") -> bool:
        """
        Fuzzy comparison with tolerance.

        Args:
            other: Value to compare against
            tolerance: Tolerance for comparison (None = configured default)
            mode: Tolerance mode (relative, absolute)

        Returns:
            True if values are equal within tolerance
        """

    # String representations

    @abstractmethod
    def to_string(self) -> str:
        """Convert to the bracketed literal form."""

    @abstractmethod
    def to_tex(self) -> str:
        """Convert to LaTeX representation."""

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to Python native containers."""

    # Interchange

    def to_json(self) -> str:
        """Serialize to JSON (array for Vector, array of arrays for Matrix)."""
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str | bytes):
        """Rebuild an instance from :meth:`to_json` output."""
        return cls.model_validate_json(data)

    def _init_normalized(self, **data: Any) -> None:
        """Initialize the model from fields that are already normalized."""
        self.__pydantic_validator__.validate_python(
            data, self_instance=self, context={NORMALIZED: True}
        )

    @staticmethod
    def _is_normalized(info: ValidationInfo) -> bool:
        return bool(info.context and info.context.get(NORMALIZED))

    # Operator overloading

    @abstractmethod
    def __add__(self, other: Any) -> LinearValue:
        """Addition: self + other"""

    @abstractmethod
    def __sub__(self, other: Any) -> LinearValue:
        """Subtraction: self - other"""

    @abstractmethod
    def __mul__(self, other: Any) -> Any:
        """Multiplication: self * other"""

    @abstractmethod
    def __rmul__(self, other: Any) -> LinearValue:
        """Right multiplication: other * self"""

    @abstractmethod
    def __truediv__(self, other: Any) -> LinearValue:
        """Division: self / other"""

    @abstractmethod
    def __neg__(self) -> LinearValue:
        """Unary negation: -self"""

    def __pos__(self) -> LinearValue:
        """Unary positive: +self"""
        return self.clone()

    @abstractmethod
    def clone(self) -> LinearValue:
        """Return an equal but distinct instance."""
