"""
Vector value type.

A fixed-length, ordered, homogeneous sequence of numbers. Vectors are
immutable: arithmetic, map and coercion always produce new instances.
Vectors also constitute the rows and columns of a Matrix.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Callable, Iterable, Iterator

import numpy as np
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    ValidationInfo,
    model_serializer,
    model_validator,
)

from ..core.config import resolve_approx_precision, resolve_precision
from ..core.errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    OperationNotDefinedError,
    ZeroVectorError,
)
from ..core.logging import get_logger
from .scalars import (
    ToleranceMode,
    coercer,
    common_type,
    decode_scalar,
    encode_scalar,
    fuzzy_compare,
    is_complex,
    to_scalar,
    unify,
)
from .value import LinearValue

logger = get_logger(__name__)


def is_scalar(value: Any) -> bool:
    """Return True for a plain number operand (broadcast in arithmetic)."""
    return isinstance(value, (numbers.Number, np.generic)) and not isinstance(value, LinearValue)


class Vector(BaseModel, LinearValue):
    """
    Vector in n-dimensional space.

    Supports element-wise and broadcast arithmetic, geometric queries
    (magnitude, angle, parallelism), cross products and coercion.

    Examples:
        >>> Vector(3, 4).magnitude()
        5.0
        >>> Vector.basis(3, 1)
        Vector{0, 1, 0}
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    elements: tuple[Any, ...] = Field(default_factory=tuple)

    def __init__(self, *args: Any, elements: Iterable[Any] | None = None, **kwargs: Any) -> None:
        """Initialize a Vector from positional elements or a single sequence."""
        if elements is not None and args:
            raise InvalidArgumentError(
                "Vector accepts either elements or positional arguments, not both"
            )
        if elements is None:
            elements = self._parse_arguments(args)
        self._init_normalized(elements=Vector._normalize_elements(elements), **kwargs)

    @staticmethod
    def _parse_arguments(args: tuple[Any, ...]) -> Iterable[Any]:
        """Parse positional constructor arguments."""
        if len(args) == 1 and not is_scalar(args[0]):
            single = args[0]
            if isinstance(single, Vector):
                return single.elements
            if isinstance(single, Iterable):
                return single
        return args

    @model_validator(mode="before")
    @classmethod
    def _validate(cls, data: Any, info: ValidationInfo) -> Any:
        if cls._is_normalized(info):
            return data
        if isinstance(data, Vector):
            return {"elements": data.elements}
        if isinstance(data, (list, tuple, np.ndarray)):
            data = {"elements": data}
        if isinstance(data, dict):
            return {**data, "elements": cls._normalize_elements(data.get("elements"))}
        return data

    @staticmethod
    def _normalize_elements(raw: Any) -> tuple[Any, ...]:
        if raw is None:
            return ()
        if isinstance(raw, Vector):
            return raw.elements
        if isinstance(raw, np.ndarray):
            if raw.ndim > 1:
                raise DimensionMismatchError(
                    f"Vector needs a one-dimensional array, got shape {raw.shape}"
                )
            raw = raw.tolist()
        return unify(decode_scalar(e) for e in raw)

    @model_serializer(mode="plain")
    def _serialize(self, info: SerializationInfo) -> list[Any]:
        return [encode_scalar(e, info.mode_is_json()) for e in self.elements]

    # Construction

    @classmethod
    def from_elements(cls, elements: Iterable[Any]) -> Vector:
        """Create a vector from any iterable of numbers (the input is copied)."""
        return cls(elements=list(elements))

    @classmethod
    def basis(cls, size: int, index: int) -> Vector:
        """
        Return a standard basis ``size``-vector with 1 at ``index``.

        Raises:
            InvalidArgumentError: If ``size < 1`` or ``index`` is outside ``[0, size)``
        """
        if size < 1:
            raise InvalidArgumentError(f"invalid size ({size} for 1..)", argument="size")
        if not 0 <= index < size:
            raise InvalidArgumentError(f"invalid index ({index} for 0...{size})", argument="index")
        elements = [0] * size
        elements[index] = 1
        return cls(elements=elements)

    @classmethod
    def zero(cls, size: int) -> Vector:
        """Return a zero vector of length ``size``."""
        return cls.full(size, 0)

    @classmethod
    def ones(cls, size: int) -> Vector:
        """Return a vector of ``size`` ones."""
        return cls.full(size, 1)

    @classmethod
    def full(cls, size: int, value: Any) -> Vector:
        """Return a vector of length ``size`` filled with ``value``."""
        if size < 0:
            raise InvalidArgumentError(f"invalid size ({size} for 0..)", argument="size")
        return cls(elements=[value] * size)

    @classmethod
    def are_independent(cls, *vectors: Vector) -> bool:
        """
        Return True if all of ``vectors`` are linearly independent.

        Raises:
            InvalidArgumentError: If an argument is not a Vector
            DimensionMismatchError: If the vectors differ in size
        """
        from .matrix import Matrix

        for v in vectors:
            if not isinstance(v, Vector):
                raise InvalidArgumentError(f"expected Vector, but got {type(v).__name__}")
            if v.size != vectors[0].size:
                raise DimensionMismatchError(
                    "Vectors not all the same size", expected=vectors[0].size, actual=v.size
                )
        if not vectors:
            return True
        if len(vectors) > vectors[0].size:
            return False
        return Matrix.from_rows(vectors).rank() == len(vectors)

    def is_independent(self, *others: Vector) -> bool:
        """Return True if ``self`` and ``others`` are linearly independent."""
        return Vector.are_independent(self, *others)

    # Comparison and conversion

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Vector):
            return self.elements == other.elements
        if isinstance(other, (list, tuple)):
            return self.elements == tuple(other)
        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash((Vector, self.elements))

    def _ordering_key(self, other: Any) -> tuple[Any, ...] | None:
        if isinstance(other, Vector):
            return other.elements
        if isinstance(other, (list, tuple)):
            return tuple(other)
        return None

    def __lt__(self, other: Any) -> bool:
        key = self._ordering_key(other)
        return NotImplemented if key is None else self.elements < key

    def __le__(self, other: Any) -> bool:
        key = self._ordering_key(other)
        return NotImplemented if key is None else self.elements <= key

    def __gt__(self, other: Any) -> bool:
        key = self._ordering_key(other)
        return NotImplemented if key is None else self.elements > key

    def __ge__(self, other: Any) -> bool:
        key = self._ordering_key(other)
        return NotImplemented if key is None else self.elements >= key

    def compare(
        self, other: Any, tolerance: float | None = None, mode: str = ToleranceMode.RELATIVE
    ) -> bool:
        """Compare vectors element-wise within ``tolerance``."""
        if not isinstance(other, Vector) or self.size != other.size:
            return False
        tolerance = resolve_approx_precision(tolerance)
        return all(fuzzy_compare(a, b, tolerance, mode) for a, b in zip(self.elements, other.elements))

    def to_string(self) -> str:
        return "Vector{" + ", ".join(str(e) for e in self.elements) + "}"

    def to_tex(self) -> str:
        return f"\\left\\langle {', '.join(str(e) for e in self.elements)} \\right\\rangle"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()

    def to_list(self) -> list[Any]:
        """Return the elements as a new list."""
        return list(self.elements)

    def to_python(self) -> list[Any]:
        return self.to_list()

    def to_numpy(self) -> np.ndarray:
        """Convert to NumPy array."""
        return np.array(self.elements)

    def to_matrix(self):
        """Return a single-column matrix from this vector."""
        from .matrix import Matrix

        return Matrix.column_vector(self)

    def covector(self):
        """Return a single-row matrix from this vector."""
        from .matrix import Matrix

        return Matrix.row_vector(self)

    def to_diagonal_matrix(self):
        """Return a diagonal matrix with this vector's elements on the diagonal."""
        from .matrix import Matrix

        return Matrix.diagonal(self.elements)

    def clone(self) -> Vector:
        """Return an equal, distinct copy of the vector."""
        return Vector(elements=self.elements)

    def coerce(self, target: Any, *args: Any) -> Vector:
        """
        Convert every element to ``target``.

        ``complex`` needs the imaginary part and ``Fraction`` the denominator
        as extra arguments.

        Raises:
            InvalidArgumentError: If a required extra argument is missing
        """
        convert = coercer(target, *args)
        return Vector(elements=[convert(e) for e in self.elements])

    # Sequence protocol

    @property
    def size(self) -> int:
        """Number of elements."""
        return len(self.elements)

    @property
    def element_type(self) -> type | None:
        """Concrete element type, or None for an empty vector."""
        return common_type(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.elements)

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return Vector(elements=self.elements[index])
        return self.elements[index]

    def is_zero(self) -> bool:
        """Return True if all elements are zero."""
        return all(e == 0 for e in self.elements)

    def is_real(self) -> bool:
        """Return True unless the elements are complex numbers."""
        return not any(is_complex(e) for e in self.elements)

    # Iteration / transforms

    def map(self, fn: Callable[[Any], Any]) -> Vector:
        """Return a new vector with ``fn`` applied to each element."""
        return Vector(elements=[fn(e) for e in self.elements])

    def map_with_index(self, fn: Callable[[Any, int], Any]) -> Vector:
        """Return a new vector of ``fn(element, index)``."""
        return Vector(elements=[fn(e, i) for i, e in enumerate(self.elements)])

    def each_pair(self, other: Vector | Iterable[Any]) -> Iterator[tuple[Any, Any]]:
        """
        Iterate over this vector and ``other`` in conjunction.

        Raises:
            DimensionMismatchError: If the sizes differ
        """
        other = self._check_same_size(other)
        return zip(self.elements, other.elements)

    def combine(self, other: Vector | Iterable[Any], fn: Callable[[Any, Any], Any]) -> Vector:
        """Map over this vector and ``other`` pairwise."""
        return Vector(elements=[fn(a, b) for a, b in self.each_pair(other)])

    def round(self, ndigits: int = 0) -> Vector:
        """Return a vector with entries rounded to ``ndigits``."""
        return self.map(lambda e: round(e, ndigits))

    def sum(self) -> Any:
        """Sum of all elements."""
        return sum(self.elements, 0)

    def product(self) -> Any:
        """Product of all elements (1 for an empty vector)."""
        return math.prod(self.elements)

    def log(self) -> Vector:
        """Natural logarithm of every element."""
        return self.map(math.log)

    def chomp(self, n: int) -> Vector:
        """Return a new vector with the first ``n`` elements removed."""
        if n < 0:
            raise InvalidArgumentError(f"Negative count: {n}", argument="n")
        return Vector(elements=self.elements[n:])

    def top(self, n: int) -> Vector:
        """Return a vector containing only the first ``n`` elements."""
        if n < 0:
            raise InvalidArgumentError(f"Negative count: {n}", argument="n")
        return Vector(elements=self.elements[:n])

    def augment(self, other: Vector | Iterable[Any]) -> Vector:
        """Return a new vector with ``other``'s elements appended."""
        if not isinstance(other, Vector):
            other = Vector(elements=list(other))
        return Vector(elements=self.elements + other.elements)

    concat = augment

    def snap_to(self, value: Any, precision: float | None = None) -> Vector:
        """Replace elements within ``precision`` of ``value`` by ``value``."""
        precision = resolve_precision(precision)
        return self.map(lambda e: value if abs(e - value) <= precision else e)

    # Geometry

    def magnitude(self) -> float:
        """Euclidean norm: sqrt of the sum of squared magnitudes."""
        return math.sqrt(sum(abs(e) ** 2 for e in self.elements))

    norm = magnitude
    r = magnitude

    def normalize(self) -> Vector:
        """
        Return a vector with the same direction and magnitude 1.

        Raises:
            ZeroVectorError: If the magnitude is 0
        """
        n = self.magnitude()
        if n == 0:
            raise ZeroVectorError("Zero vectors can not be normalized")
        base = self if not self.is_real() else self.coerce(float)
        return base / n

    def dot(self, other: Vector | Iterable[Any]) -> Any:
        """
        Inner product with ``other``.

        Raises:
            DimensionMismatchError: If the sizes differ
        """
        return sum((a * b for a, b in self.each_pair(other)), 0)

    inner_product = dot

    def angle_from(self, other: Vector | Iterable[Any]) -> float:
        """
        Angle between this vector and ``other`` in radians, within [0, pi].

        Returns 0 when either vector has zero magnitude.
        """
        other = self._check_same_size(other)
        dot = 0
        mod1 = 0
        mod2 = 0
        for x, y in zip(self.elements, other.elements):
            dot += x * y
            mod1 += x * x
            mod2 += y * y

        if mod1 == 0 or mod2 == 0:
            return 0.0

        theta = float(dot) / (math.sqrt(mod1) * math.sqrt(mod2))
        return math.acos(min(1.0, max(-1.0, theta)))

    def angle_with(self, other: Vector | Iterable[Any]) -> float:
        """
        Angle between this vector and ``other`` in radians.

        Raises:
            ZeroVectorError: If either vector has zero magnitude
        """
        other = self._check_same_size(other)
        prod = self.magnitude() * other.magnitude()
        if prod == 0:
            raise ZeroVectorError("Can't get angle of zero vector")
        return math.acos(min(1.0, max(-1.0, float(self.dot(other)) / prod)))

    def is_parallel_to(self, other: Vector | Iterable[Any], precision: float | None = None) -> bool:
        """Return True if the angle to ``other`` is within ``precision`` of 0."""
        return self.angle_from(other) <= resolve_precision(precision)

    def is_antiparallel_to(self, other: Vector | Iterable[Any], precision: float | None = None) -> bool:
        """Return True if the angle to ``other`` is within ``precision`` of pi."""
        return abs(self.angle_from(other) - math.pi) <= resolve_precision(precision)

    def is_perpendicular_to(self, other: Vector | Iterable[Any], precision: float | None = None) -> bool:
        """Return True if the dot product with ``other`` is within ``precision`` of 0."""
        return abs(self.dot(other)) <= resolve_precision(precision)

    def distance_from(self, other: Vector | Iterable[Any]) -> float:
        """Distance to ``other`` when both are considered points in space."""
        return math.sqrt(sum(abs(a - b) ** 2 for a, b in self.each_pair(other)))

    def cross_product(self, *others: Vector | Iterable[Any]) -> Vector:
        """
        Cross product of this vector with ``size - 2`` others.

        2D returns the perpendicular ``[-y, x]``; higher dimensions expand the
        determinant whose last row holds the standard basis vectors.

        Raises:
            OperationNotDefinedError: If ``size < 2``
            InvalidArgumentError: If not exactly ``size - 2`` vectors are given
            DimensionMismatchError: If any vector has a different size
        """
        size = self.size
        if size < 2:
            raise OperationNotDefinedError(
                f"cross product is not defined on vectors of dimension {size}",
                operation="cross_product",
            )
        if len(others) != size - 2:
            raise InvalidArgumentError(
                f"wrong number of arguments ({len(others)} for {size - 2})"
            )
        vectors = [self._check_same_size(v) for v in others]

        e = self.elements
        if size == 2:
            return Vector(-e[1], e[0])
        if size == 3:
            v = vectors[0]
            return Vector(
                v[2] * e[1] - v[1] * e[2],
                v[0] * e[2] - v[2] * e[0],
                v[1] * e[0] - v[0] * e[1],
            )

        from .matrix import Matrix

        logger.debug("cross product of dimension %d via Laplace expansion", size)
        # The basis row only contributes its position, so zeros stand in for it.
        rows = [e, *(v.elements for v in vectors), [0] * size]
        m = Matrix.from_rows(rows)
        return Vector(elements=[m.cofactor(size - 1, k) for k in range(size)])

    def cross(self, other: Vector | Iterable[Any]) -> Vector:
        """Cross product of two 3D vectors."""
        return self.cross_product(other)

    # Arithmetic

    def _check_same_size(self, other: Any) -> Vector:
        if not isinstance(other, Vector):
            other = Vector(elements=list(other))
        if other.size != self.size:
            raise DimensionMismatchError(
                f"Cannot operate on vectors of different dimensions ({self.size} and {other.size})",
                expected=self.size,
                actual=other.size,
            )
        return other

    def _broadcast(self, other: Any, op: Callable[[Any, Any], Any]) -> Vector:
        scalar = to_scalar(other)
        return Vector(elements=[op(e, scalar) for e in self.elements])

    def _elementwise(self, other: Any, op: Callable[[Any, Any], Any]) -> Vector:
        other = self._check_same_size(other)
        return Vector(elements=[op(a, b) for a, b in zip(self.elements, other.elements)])

    def _apply(self, other: Any, op: Callable[[Any, Any], Any], matrix_op: str) -> Any:
        from .matrix import Matrix

        if is_scalar(other):
            return self._broadcast(other, op)
        if isinstance(other, Matrix):
            return getattr(Matrix.column_vector(self), matrix_op)(other)
        if isinstance(other, (Vector, list, tuple, np.ndarray)):
            return self._elementwise(other, op)
        return NotImplemented

    def __add__(self, other: Any) -> Any:
        """Vector addition (element-wise, or broadcast for a number)."""
        return self._apply(other, lambda a, b: a + b, "__add__")

    def __radd__(self, other: Any) -> Vector:
        if is_scalar(other):
            return self._broadcast(other, lambda a, b: b + a)
        return NotImplemented

    def __sub__(self, other: Any) -> Any:
        """Vector subtraction (element-wise, or broadcast for a number)."""
        return self._apply(other, lambda a, b: a - b, "__sub__")

    def __rsub__(self, other: Any) -> Vector:
        if is_scalar(other):
            return self._broadcast(other, lambda a, b: b - a)
        return NotImplemented

    def __mul__(self, other: Any) -> Any:
        """Element-wise product, scalar product, or column-matrix product."""
        return self._apply(other, lambda a, b: a * b, "__mul__")

    def __rmul__(self, other: Any) -> Vector:
        if is_scalar(other):
            return self._broadcast(other, lambda a, b: b * a)
        return NotImplemented

    def __truediv__(self, other: Any) -> Any:
        """Element-wise division, or division of every element by a number."""
        return self._apply(other, lambda a, b: a / b, "__truediv__")

    def __neg__(self) -> Vector:
        return self.map(lambda e: -e)

    def __abs__(self) -> float:
        """Magnitude (norm)."""
        return self.magnitude()


# Cartesian unit vectors
I = Vector(1, 0, 0)  # noqa: E741
J = Vector(0, 1, 0)
K = Vector(0, 0, 1)
