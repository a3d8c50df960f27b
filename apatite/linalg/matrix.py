"""
Matrix value type.

Dense, immutable, rectangular matrices of numbers with construction helpers,
selector-driven iteration, structural predicates, arithmetic and the classic
algorithms (determinant, rank, inverse, minors, cofactors, adjugate).
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Iterable, Iterator

import numpy as np
from pydantic import (
    BaseModel,
    ConfigDict,
    SerializationInfo,
    ValidationInfo,
    model_serializer,
    model_validator,
)

from ..core.config import resolve_approx_precision
from ..core.errors import (
    DimensionMismatchError,
    InvalidArgumentError,
    NotRegularError,
    OperationNotDefinedError,
)
from ..core.logging import get_context_logger, get_logger
from .scalars import (
    ToleranceMode,
    coercer,
    conjugate,
    decode_scalar,
    encode_scalar,
    exact_div,
    fuzzy_compare,
    is_complex,
    to_scalar,
    unify,
)
from .selectors import Selector, cells
from .value import LinearValue
from .vector import Vector, is_scalar

logger = get_logger(__name__)


def _close(a: Any, b: Any, precision: float | None) -> bool:
    if precision is None:
        return a == b
    return abs(a - b) <= precision


class Matrix(BaseModel, LinearValue):
    """
    Matrix (2D array of numbers).

    A matrix with no rows still records its column count, and a matrix with
    rows may have zero columns.

    Examples:
        >>> Matrix([[1, 2], [3, 4]]).determinant()
        -2
        >>> Matrix.identity(2)
        Matrix[[1, 0], [0, 1]]
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    rows: tuple[tuple[Any, ...], ...] = ()
    column_count: int = 0

    def __init__(self, rows: Any = (), column_count: int | None = None, **kwargs: Any) -> None:
        """
        Initialize a Matrix.

        Args:
            rows: 2D nested sequence, NumPy array, Matrix or iterable of Vectors
            column_count: Required only to size a matrix without rows
        """
        rows, column_count = Matrix._normalize_rows(rows, column_count)
        self._init_normalized(rows=rows, column_count=column_count, **kwargs)

    @model_validator(mode="before")
    @classmethod
    def _validate(cls, data: Any, info: ValidationInfo) -> Any:
        if cls._is_normalized(info):
            return data
        if not isinstance(data, dict):
            data = {"rows": data}
        rows, column_count = cls._normalize_rows(data.get("rows", ()), data.get("column_count"))
        return {**data, "rows": rows, "column_count": column_count}

    @staticmethod
    def _normalize_rows(raw: Any, column_count: int | None) -> tuple[tuple[tuple[Any, ...], ...], int]:
        if isinstance(raw, Matrix):
            return raw.rows, raw.column_count
        if isinstance(raw, np.ndarray):
            if raw.ndim != 2:
                raise DimensionMismatchError(f"Matrix needs a 2D array, got shape {raw.shape}")
            if column_count is None:
                column_count = raw.shape[1]
            raw = raw.tolist()
        if raw is None:
            raw = ()
        if column_count is not None and column_count < 0:
            raise InvalidArgumentError(f"Negative column count: {column_count}", argument="column_count")

        rows = []
        for row in raw:
            if isinstance(row, Vector):
                rows.append(row.elements)
            elif isinstance(row, np.ndarray):
                rows.append(tuple(row.tolist()))
            elif isinstance(row, Iterable) and not isinstance(row, (str, bytes)):
                rows.append(tuple(row))
            else:
                raise InvalidArgumentError(
                    f"Matrix rows must be sequences, got {type(row).__name__}", argument="rows"
                )

        if not rows:
            return (), column_count or 0

        width = len(rows[0])
        for index, row in enumerate(rows):
            if len(row) != width:
                raise DimensionMismatchError(
                    f"row size differs (row at index {index} should contain {width} elements, "
                    f"instead has {len(row)})",
                    expected=width,
                    actual=len(row),
                )
        if column_count is not None and column_count != width:
            raise DimensionMismatchError(
                "column_count does not match the rows", expected=column_count, actual=width
            )

        flat = unify(decode_scalar(e) for row in rows for e in row)
        return tuple(flat[i * width:(i + 1) * width] for i in range(len(rows))), width

    @model_serializer(mode="plain")
    def _serialize(self, info: SerializationInfo) -> Any:
        if not self.rows:
            return {"rows": [], "column_count": self.column_count}
        json_mode = info.mode_is_json()
        return [[encode_scalar(e, json_mode) for e in row] for row in self.rows]

    # Construction

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Any]]) -> Matrix:
        """Create a matrix from a sequence of rows (copied)."""
        return cls(list(rows))

    @classmethod
    def from_columns(cls, columns: Iterable[Iterable[Any]]) -> Matrix:
        """Create a matrix from a sequence of columns (copied)."""
        columns = [tuple(c) for c in columns]
        if not columns:
            return cls.empty(0, 0)
        return cls.from_rows(columns).transpose

    @classmethod
    def build(
        cls,
        row_count: int,
        column_count: int | None = None,
        fn: Callable[[int, int], Any] | None = None,
    ) -> Matrix:
        """
        Create a ``row_count`` by ``column_count`` matrix of ``fn(row, column)``.

        Raises:
            InvalidArgumentError: If a size is negative or ``fn`` is missing
        """
        if column_count is None:
            column_count = row_count
        if row_count < 0 or column_count < 0:
            raise InvalidArgumentError(
                f"Negative dimensions: {row_count}x{column_count}", argument="size"
            )
        if fn is None:
            raise InvalidArgumentError("build requires an element function", argument="fn")
        return cls(
            [[fn(i, j) for j in range(column_count)] for i in range(row_count)],
            column_count=column_count,
        )

    @classmethod
    def diagonal(cls, *values: Any) -> Matrix:
        """Square matrix with ``values`` on the diagonal and zeros elsewhere."""
        if len(values) == 1 and not is_scalar(values[0]):
            values = tuple(values[0])
        size = len(values)
        return cls.build(size, size, lambda i, j: values[i] if i == j else 0)

    @classmethod
    def scalar(cls, size: int, value: Any) -> Matrix:
        """
        ``size`` by ``size`` diagonal matrix with every diagonal entry ``value``.

        Raises:
            InvalidArgumentError: If ``size`` is negative
        """
        if size < 0:
            raise InvalidArgumentError(f"invalid size ({size} for 0..)", argument="size")
        return cls.diagonal([value] * size)

    @classmethod
    def identity(cls, size: int) -> Matrix:
        """``size`` by ``size`` identity matrix."""
        return cls.scalar(size, 1)

    unit = identity

    @classmethod
    def zero(cls, row_count: int, column_count: int | None = None) -> Matrix:
        """Zero matrix (square when ``column_count`` is omitted)."""
        return cls.build(row_count, column_count, lambda i, j: 0)

    @classmethod
    def row_vector(cls, values: Iterable[Any]) -> Matrix:
        """Single-row matrix."""
        return cls([list(values)])

    @classmethod
    def column_vector(cls, values: Iterable[Any]) -> Matrix:
        """Single-column matrix."""
        return cls([[v] for v in values], column_count=1)

    @classmethod
    def empty(cls, row_count: int = 0, column_count: int = 0) -> Matrix:
        """
        Matrix with zero rows or zero columns.

        Raises:
            InvalidArgumentError: If both sizes are non-zero or either is negative
        """
        if row_count < 0 or column_count < 0:
            raise InvalidArgumentError(
                f"Negative dimensions: {row_count}x{column_count}", argument="size"
            )
        if row_count != 0 and column_count != 0:
            raise InvalidArgumentError(
                "One size must be 0", argument="size"
            )
        return cls([()] * row_count, column_count=column_count)

    def vstack(self, *others: Any) -> Matrix:
        """
        Stack matrices vertically.

        Raises:
            DimensionMismatchError: If the column counts differ
        """
        matrices = [self, *(self._as_matrix(m) for m in others)]
        for m in matrices:
            if m.column_count != self.column_count:
                raise DimensionMismatchError(
                    "The given matrices must have the same number of columns",
                    expected=self.column_count,
                    actual=m.column_count,
                )
        return Matrix(
            [row for m in matrices for row in m.rows], column_count=self.column_count
        )

    def hstack(self, *others: Any) -> Matrix:
        """
        Stack matrices horizontally.

        Raises:
            DimensionMismatchError: If the row counts differ
        """
        matrices = [self, *(self._as_matrix(m) for m in others)]
        for m in matrices:
            if m.row_count != self.row_count:
                raise DimensionMismatchError(
                    "The given matrices must have the same number of rows",
                    expected=self.row_count,
                    actual=m.row_count,
                )
        if self.row_count == 0:
            return Matrix.empty(0, sum(m.column_count for m in matrices))
        rows = [sum((m.rows[i] for m in matrices), ()) for i in range(self.row_count)]
        return Matrix(rows)

    def combine(self, *others: Any, fn: Callable[..., Any]) -> Matrix:
        """
        Element-wise ``fn`` over this matrix and ``others`` of the same shape.

        Raises:
            DimensionMismatchError: If the shapes differ
        """
        matrices = [self, *(self._as_matrix(m) for m in others)]
        for m in matrices:
            self._check_same_shape(m)
        return Matrix.build(
            self.row_count,
            self.column_count,
            lambda i, j: fn(*(m.rows[i][j] for m in matrices)),
        )

    def hadamard_product(self, other: Any) -> Matrix:
        """Element-wise product."""
        return self.combine(other, fn=operator.mul)

    entrywise_product = hadamard_product

    # Accessors

    @property
    def row_count(self) -> int:
        """Number of rows."""
        return len(self.rows)

    @property
    def shape(self) -> tuple[int, int]:
        """(rows, columns)."""
        return (self.row_count, self.column_count)

    @staticmethod
    def _check_index(index: int, count: int, what: str) -> int:
        if not -count <= index < count:
            raise IndexError(f"{what} index {index} out of range for size {count}")
        return index % count

    def element(self, i: int, j: int) -> Any:
        """
        Element at ``(i, j)``; negative indices count from the end.

        Raises:
            IndexError: If the position is out of range
        """
        i = self._check_index(i, self.row_count, "Row")
        j = self._check_index(j, self.column_count, "Column")
        return self.rows[i][j]

    def element_or_none(self, i: int, j: int) -> Any | None:
        """Element at ``(i, j)``, or None when out of range."""
        try:
            return self.element(i, j)
        except IndexError:
            return None

    def row(self, i: int) -> Vector:
        """
        Row ``i`` as a Vector.

        Raises:
            IndexError: If ``i`` is out of range
        """
        return Vector(elements=self.rows[self._check_index(i, self.row_count, "Row")])

    def row_or_none(self, i: int) -> Vector | None:
        try:
            return self.row(i)
        except IndexError:
            return None

    def column(self, j: int) -> Vector:
        """
        Column ``j`` as a Vector.

        Raises:
            IndexError: If ``j`` is out of range
        """
        j = self._check_index(j, self.column_count, "Column")
        return Vector(elements=[row[j] for row in self.rows])

    def column_or_none(self, j: int) -> Vector | None:
        try:
            return self.column(j)
        except IndexError:
            return None

    def row_vectors(self) -> list[Vector]:
        """All rows as Vectors."""
        return [Vector(elements=row) for row in self.rows]

    def column_vectors(self) -> list[Vector]:
        """All columns as Vectors."""
        return [self.column(j) for j in range(self.column_count)]

    def __len__(self) -> int:
        return self.row_count

    def __iter__(self) -> Iterator[Vector]:
        return iter(self.row_vectors())

    def __getitem__(self, key: Any) -> Any:
        """
        Index by ``m[i, j]`` (element), ``m[i]`` (row Vector) or
        ``m[r0:r1, c0:c1]`` (submatrix).
        """
        if isinstance(key, tuple):
            i, j = key
            if isinstance(i, slice) or isinstance(j, slice):
                rs = i if isinstance(i, slice) else slice(i, i + 1 or None)
                cs = j if isinstance(j, slice) else slice(j, j + 1 or None)
                width = len(range(*cs.indices(self.column_count)))
                return Matrix([row[cs] for row in self.rows[rs]], column_count=width)
            return self.element(i, j)
        if isinstance(key, slice):
            return Matrix(self.rows[key], column_count=self.column_count)
        return self.row(key)

    def minor(self, start_row: int, nrows: int, start_col: int, ncols: int) -> Matrix | None:
        """
        Submatrix of at most ``nrows`` by ``ncols`` starting at ``(start_row, start_col)``.

        Negative starts count from the end. Returns None when a count is
        negative or a start lies outside the matrix.
        """
        if nrows < 0 or ncols < 0:
            return None
        if start_row < 0:
            start_row += self.row_count
        if start_col < 0:
            start_col += self.column_count
        if not 0 <= start_row <= self.row_count or not 0 <= start_col <= self.column_count:
            return None
        rows = [row[start_col:start_col + ncols] for row in self.rows[start_row:start_row + nrows]]
        return Matrix(rows, column_count=min(self.column_count - start_col, ncols))

    def first_minor(self, row: int, column: int) -> Matrix:
        """
        Submatrix obtained by deleting ``row`` and ``column``.

        Raises:
            OperationNotDefinedError: If the matrix is empty
            InvalidArgumentError: If ``row`` or ``column`` is out of range
        """
        if self.is_empty():
            raise OperationNotDefinedError(
                "first_minor of empty matrix is not defined", operation="first_minor"
            )
        if not 0 <= row < self.row_count:
            raise InvalidArgumentError(
                f"invalid row ({row} for 0..{self.row_count - 1})", argument="row"
            )
        if not 0 <= column < self.column_count:
            raise InvalidArgumentError(
                f"invalid column ({column} for 0..{self.column_count - 1})", argument="column"
            )
        rows = [r[:column] + r[column + 1:] for k, r in enumerate(self.rows) if k != row]
        return Matrix(rows, column_count=self.column_count - 1)

    def cofactor(self, row: int, column: int) -> Any:
        """
        ``(row, column)`` cofactor: signed determinant of the first minor.

        Raises:
            OperationNotDefinedError: If the matrix is empty
            DimensionMismatchError: If the matrix is not square
        """
        if self.is_empty():
            raise OperationNotDefinedError(
                "cofactor of empty matrix is not defined", operation="cofactor"
            )
        self._check_square()
        det = self.first_minor(row, column).determinant()
        return det if (row + column) % 2 == 0 else -det

    def adjugate(self) -> Matrix:
        """
        Adjugate (classical adjoint): transpose of the cofactor matrix.

        Raises:
            DimensionMismatchError: If the matrix is not square
        """
        self._check_square()
        return Matrix.build(self.row_count, self.column_count, lambda r, c: self.cofactor(c, r))

    def laplace_expansion(self, *, row: int | None = None, column: int | None = None) -> Any:
        """
        Determinant by cofactor expansion along exactly one of ``row`` or ``column``.

        Raises:
            InvalidArgumentError: If not exactly one axis is given, or it is out of range
            OperationNotDefinedError: If the matrix is empty
            DimensionMismatchError: If the matrix is not square
        """
        if (row is None) == (column is None):
            raise InvalidArgumentError("exactly one of row or column must be given")
        self._check_square()
        if self.is_empty():
            raise OperationNotDefinedError(
                "laplace_expansion of empty matrix is not defined", operation="laplace_expansion"
            )
        if row is not None:
            if not 0 <= row < self.row_count:
                raise InvalidArgumentError(
                    f"invalid row ({row} for 0..{self.row_count - 1})", argument="row"
                )
            return sum(
                (e * self.cofactor(row, j) for j, e in enumerate(self.rows[row])), 0
            )
        if not 0 <= column < self.column_count:
            raise InvalidArgumentError(
                f"invalid column ({column} for 0..{self.column_count - 1})", argument="column"
            )
        return sum(
            (r[column] * self.cofactor(i, column) for i, r in enumerate(self.rows)), 0
        )

    cofactor_expansion = laplace_expansion

    def swap_rows(self, i: int, j: int) -> Matrix:
        """Return a copy with rows ``i`` and ``j`` exchanged."""
        i = self._check_index(i, self.row_count, "Row")
        j = self._check_index(j, self.row_count, "Row")
        rows = list(self.rows)
        rows[i], rows[j] = rows[j], rows[i]
        return Matrix(rows, column_count=self.column_count)

    def swap_columns(self, i: int, j: int) -> Matrix:
        """Return a copy with columns ``i`` and ``j`` exchanged."""
        i = self._check_index(i, self.column_count, "Column")
        j = self._check_index(j, self.column_count, "Column")
        rows = []
        for row in self.rows:
            row = list(row)
            row[i], row[j] = row[j], row[i]
            rows.append(row)
        return Matrix(rows, column_count=self.column_count)

    # Iteration

    def each(self, which: Selector | str = Selector.ALL) -> Iterator[Any]:
        """Iterate over the selected elements in row-major order."""
        return (self.rows[i][j] for i, j in cells(self.row_count, self.column_count, which))

    def each_with_index(self, which: Selector | str = Selector.ALL) -> Iterator[tuple[Any, int, int]]:
        """Iterate over ``(element, row, column)`` for the selected cells."""
        return (
            (self.rows[i][j], i, j) for i, j in cells(self.row_count, self.column_count, which)
        )

    def map(self, fn: Callable[[Any], Any], which: Selector | str = Selector.ALL) -> Matrix:
        """New matrix with ``fn`` applied to the selected elements; others are copied."""
        return self.map_with_index(lambda e, i, j: fn(e), which)

    def map_with_index(
        self, fn: Callable[[Any, int, int], Any], which: Selector | str = Selector.ALL
    ) -> Matrix:
        """New matrix with selected elements replaced by ``fn(element, row, column)``."""
        selected = set(cells(self.row_count, self.column_count, which))
        rows = [
            [fn(e, i, j) if (i, j) in selected else e for j, e in enumerate(row)]
            for i, row in enumerate(self.rows)
        ]
        return Matrix(rows, column_count=self.column_count)

    def index(
        self, target: Any, which: Selector | str = Selector.ALL
    ) -> tuple[int, int] | None:
        """
        Position of the first selected element equal to ``target``.

        ``target`` may also be a predicate. Returns None when nothing matches.
        """
        matches = target if callable(target) else (lambda e: e == target)
        for e, i, j in self.each_with_index(which):
            if matches(e):
                return (i, j)
        return None

    # Predicates

    def is_square(self) -> bool:
        return self.row_count == self.column_count

    def is_empty(self) -> bool:
        """True if the matrix has no rows or no columns."""
        return self.row_count == 0 or self.column_count == 0

    def is_zero(self) -> bool:
        return all(e == 0 for e in self.each())

    def is_real(self) -> bool:
        return not any(is_complex(e) for e in self.each())

    def is_diagonal(self) -> bool:
        return self.is_square() and all(e == 0 for e in self.each(Selector.OFF_DIAGONAL))

    def is_lower_triangular(self) -> bool:
        return all(e == 0 for e in self.each(Selector.STRICT_UPPER))

    def is_upper_triangular(self) -> bool:
        return all(e == 0 for e in self.each(Selector.STRICT_LOWER))

    def is_symmetric(self) -> bool:
        if not self.is_square():
            return False
        return all(e == self.rows[j][i] for e, i, j in self.each_with_index(Selector.STRICT_UPPER))

    def is_antisymmetric(self) -> bool:
        if not self.is_square():
            return False
        return all(e == -self.rows[j][i] for e, i, j in self.each_with_index(Selector.UPPER))

    def is_hermitian(self) -> bool:
        """True if the matrix equals its conjugate transpose."""
        if not self.is_square():
            return False
        return all(
            e == conjugate(self.rows[j][i]) for e, i, j in self.each_with_index(Selector.UPPER)
        )

    def _approx_equal(self, other: Matrix, precision: float | None) -> bool:
        return all(
            _close(a, b, precision)
            for row_a, row_b in zip(self.rows, other.rows)
            for a, b in zip(row_a, row_b)
        )

    def is_orthogonal(self, precision: float | None = None) -> bool:
        """
        True if ``A * A.T`` equals the identity.

        Comparisons are exact unless ``precision`` is given.
        """
        if not self.is_square():
            return False
        return (self * self.transpose)._approx_equal(Matrix.identity(self.row_count), precision)

    def is_unitary(self, precision: float | None = None) -> bool:
        """True if ``A * A^H`` equals the identity."""
        if not self.is_square():
            return False
        return (self * self.conjugate_transpose)._approx_equal(
            Matrix.identity(self.row_count), precision
        )

    def is_normal(self, precision: float | None = None) -> bool:
        """True if ``A`` commutes with its conjugate transpose."""
        if not self.is_square():
            return False
        adjoint = self.conjugate_transpose
        return (self * adjoint)._approx_equal(adjoint * self, precision)

    def is_permutation(self) -> bool:
        """True if every row and every column holds exactly one 1 and zeros elsewhere."""
        if not self.is_square():
            return False
        columns = [False] * self.column_count
        for row in self.rows:
            found = False
            for j, e in enumerate(row):
                if e == 1:
                    if found or columns[j]:
                        return False
                    found = columns[j] = True
                elif e != 0:
                    return False
            if not found:
                return False
        return True

    def is_singular(self) -> bool:
        """
        True if the determinant is zero.

        Raises:
            DimensionMismatchError: If the matrix is not square
        """
        return self.determinant() == 0

    def is_regular(self) -> bool:
        """Negation of :meth:`is_singular`."""
        return not self.is_singular()

    # Arithmetic

    @staticmethod
    def _as_matrix(other: Any) -> Matrix:
        if isinstance(other, Matrix):
            return other
        if isinstance(other, Vector):
            return Matrix.column_vector(other)
        return Matrix(other)

    def _check_square(self) -> None:
        if not self.is_square():
            raise DimensionMismatchError(
                f"Matrix must be square, got {self.row_count}x{self.column_count}",
                expected=(self.row_count, self.row_count),
                actual=self.shape,
            )

    def _check_same_shape(self, other: Matrix) -> None:
        if other.shape != self.shape:
            raise DimensionMismatchError(
                f"Cannot combine {self.row_count}x{self.column_count} and "
                f"{other.row_count}x{other.column_count} matrices",
                expected=self.shape,
                actual=other.shape,
            )

    def _elementwise(self, other: Any, op: Callable[[Any, Any], Any]) -> Any:
        if not isinstance(other, (Matrix, Vector, list, tuple, np.ndarray)):
            return NotImplemented
        return self.combine(self._as_matrix(other), fn=op)

    def __add__(self, other: Any) -> Matrix:
        """Matrix addition."""
        return self._elementwise(other, operator.add)

    def __sub__(self, other: Any) -> Matrix:
        """Matrix subtraction."""
        return self._elementwise(other, operator.sub)

    def _product(self, other: Matrix) -> Matrix:
        if self.column_count != other.row_count:
            raise DimensionMismatchError(
                f"Cannot multiply {self.row_count}x{self.column_count} by "
                f"{other.row_count}x{other.column_count}",
                expected=self.column_count,
                actual=other.row_count,
            )
        columns = list(zip(*other.rows)) if other.rows else [()] * other.column_count
        rows = [
            [sum((a * b for a, b in zip(row, column)), 0) for column in columns]
            for row in self.rows
        ]
        return Matrix(rows, column_count=other.column_count)

    def __mul__(self, other: Any) -> Any:
        """
        Matrix multiplication, matrix-vector product or scalar multiplication.

        A Vector operand is treated as a column vector and a Vector is returned.
        """
        if is_scalar(other):
            scalar = to_scalar(other)
            return self.map(lambda e: e * scalar)
        if isinstance(other, Vector):
            product = self._product(Matrix.column_vector(other))
            return Vector(elements=[row[0] for row in product.rows])
        if isinstance(other, (Matrix, list, tuple, np.ndarray)):
            return self._product(self._as_matrix(other))
        return NotImplemented

    def __rmul__(self, other: Any) -> Matrix:
        if is_scalar(other):
            scalar = to_scalar(other)
            return self.map(lambda e: scalar * e)
        return NotImplemented

    def __matmul__(self, other: Any) -> Any:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> Matrix:
        """Divide every element by a number, or multiply by the inverse of a matrix."""
        if is_scalar(other):
            scalar = to_scalar(other)
            return self.map(lambda e: e / scalar)
        if isinstance(other, (Matrix, list, tuple, np.ndarray)):
            return self * self._as_matrix(other).inverse()
        return NotImplemented

    def __rtruediv__(self, other: Any) -> Matrix:
        raise TypeError("Cannot divide by a matrix; multiply by its inverse")

    def __pow__(self, n: int) -> Matrix:
        """
        Integer power; negative exponents use the inverse.

        Raises:
            DimensionMismatchError: If the matrix is not square
        """
        if not isinstance(n, int):
            return NotImplemented
        self._check_square()
        if n < 0:
            return self.inverse() ** -n
        result = Matrix.identity(self.row_count)
        base = self
        while n:
            if n & 1:
                result = result * base
            base = base * base
            n >>= 1
        return result

    def __neg__(self) -> Matrix:
        return self.map(operator.neg)

    def __abs__(self) -> Any:
        raise TypeError("Absolute value of a matrix is not defined; use determinant()")

    # Algorithms

    def determinant(self) -> Any:
        """
        Determinant of a square matrix.

        Sizes up to 4 use closed-form expansions; larger matrices use Bareiss
        fraction-free elimination, which keeps integer input in the integers.

        Raises:
            DimensionMismatchError: If the matrix is not square
        """
        self._check_square()
        m = self.rows
        size = self.row_count
        if size == 0:
            return 1
        if size == 1:
            return m[0][0]
        if size == 2:
            return m[0][0] * m[1][1] - m[0][1] * m[1][0]
        if size == 3:
            (m0, m1, m2) = m
            return (
                m0[0] * m1[1] * m2[2] - m0[0] * m1[2] * m2[1]
                - m0[1] * m1[0] * m2[2] + m0[1] * m1[2] * m2[0]
                + m0[2] * m1[0] * m2[1] - m0[2] * m1[1] * m2[0]
            )
        if size == 4:
            (m0, m1, m2, m3) = m
            return (
                m0[0] * m1[1] * m2[2] * m3[3] - m0[0] * m1[1] * m2[3] * m3[2]
                - m0[0] * m1[2] * m2[1] * m3[3] + m0[0] * m1[2] * m2[3] * m3[1]
                + m0[0] * m1[3] * m2[1] * m3[2] - m0[0] * m1[3] * m2[2] * m3[1]
                - m0[1] * m1[0] * m2[2] * m3[3] + m0[1] * m1[0] * m2[3] * m3[2]
                + m0[1] * m1[2] * m2[0] * m3[3] - m0[1] * m1[2] * m2[3] * m3[0]
                - m0[1] * m1[3] * m2[0] * m3[2] + m0[1] * m1[3] * m2[2] * m3[0]
                + m0[2] * m1[0] * m2[1] * m3[3] - m0[2] * m1[0] * m2[3] * m3[1]
                - m0[2] * m1[1] * m2[0] * m3[3] + m0[2] * m1[1] * m2[3] * m3[0]
                + m0[2] * m1[3] * m2[0] * m3[1] - m0[2] * m1[3] * m2[1] * m3[0]
                - m0[3] * m1[0] * m2[1] * m3[2] + m0[3] * m1[0] * m2[2] * m3[1]
                + m0[3] * m1[1] * m2[0] * m3[2] - m0[3] * m1[1] * m2[2] * m3[0]
                - m0[3] * m1[2] * m2[0] * m3[1] + m0[3] * m1[2] * m2[1] * m3[0]
            )
        return self._determinant_bareiss()

    det = determinant

    def _determinant_bareiss(self) -> Any:
        size = self.row_count
        a = [list(row) for row in self.rows]
        sign = 1
        pivot = 1
        for k in range(size):
            previous_pivot = pivot
            pivot = a[k][k]
            if pivot == 0:
                switch = next((r for r in range(k + 1, size) if a[r][k] != 0), None)
                if switch is None:
                    logger.debug("no pivot in column %d, determinant is zero", k)
                    return pivot
                a[switch], a[k] = a[k], a[switch]
                pivot = a[k][k]
                sign = -sign
                logger.debug("swapped rows %d and %d for pivot", k, switch)
            for i in range(k + 1, size):
                ai = a[i]
                for j in range(k + 1, size):
                    ai[j] = exact_div(pivot * ai[j] - ai[k] * a[k][j], previous_pivot)
        return sign * pivot

    def rank(self) -> int:
        """
        Rank by Bareiss elimination.

        Float input may report a higher rank than expected because values
        are compared against exact zero.
        """
        a = [list(row) for row in self.rows]
        pivot_row = 0
        previous_pivot = 1
        for k in range(self.column_count):
            switch_row = next(
                (r for r in range(pivot_row, self.row_count) if a[r][k] != 0), None
            )
            if switch_row is None:
                continue
            if switch_row != pivot_row:
                logger.debug("rank: swapped rows %d and %d", pivot_row, switch_row)
                a[switch_row], a[pivot_row] = a[pivot_row], a[switch_row]
            pivot = a[pivot_row][k]
            for i in range(pivot_row + 1, self.row_count):
                ai = a[i]
                for j in range(k + 1, self.column_count):
                    ai[j] = exact_div(pivot * ai[j] - ai[k] * a[pivot_row][j], previous_pivot)
            pivot_row += 1
            previous_pivot = pivot
        return pivot_row

    def inverse(self) -> Matrix:
        """
        Inverse by Gauss-Jordan elimination with partial pivoting.

        The result has floating-point (or complex) elements.

        Raises:
            DimensionMismatchError: If the matrix is not square
            NotRegularError: If the matrix is singular
        """
        self._check_square()
        size = self.row_count
        log = get_context_logger(__name__, operation="inverse", size=size)
        convert = float if self.is_real() else complex
        a = [[convert(e) for e in row] for row in self.rows]
        m = [[1.0 if i == j else 0.0 for j in range(size)] for i in range(size)]

        for k in range(size):
            i = k
            akk = abs(a[k][k])
            for j in range(k + 1, size):
                v = abs(a[j][k])
                if v > akk:
                    i = j
                    akk = v
            if akk == 0:
                log.debug("singular matrix", extra_data={"pivot_column": k})
                raise NotRegularError(pivot_column=k)
            if i != k:
                log.debug("pivot row %d chosen for column %d", i, k)
                a[i], a[k] = a[k], a[i]
                m[i], m[k] = m[k], m[i]
            akk = a[k][k]

            for ii in range(size):
                if ii == k:
                    continue
                q = a[ii][k] / akk
                a[ii][k] = 0.0
                for j in range(k + 1, size):
                    a[ii][j] -= a[k][j] * q
                for j in range(size):
                    m[ii][j] -= m[k][j] * q

            for j in range(k + 1, size):
                a[k][j] /= akk
            for j in range(size):
                m[k][j] /= akk

        return Matrix(m, column_count=size)

    inv = inverse

    def trace(self) -> Any:
        """
        Sum of the diagonal elements.

        Raises:
            DimensionMismatchError: If the matrix is not square
        """
        self._check_square()
        return sum(self.each(Selector.DIAGONAL), 0)

    tr = trace

    @property
    def transpose(self) -> Matrix:
        """Transpose of the matrix."""
        if self.row_count == 0:
            return Matrix.empty(self.column_count, 0)
        return Matrix(list(zip(*self.rows)), column_count=self.row_count)

    T = transpose

    @property
    def conjugate_transpose(self) -> Matrix:
        """Conjugate transpose (Hermitian adjoint)."""
        return self.transpose.conj()

    # Conversions

    def round(self, ndigits: int = 0) -> Matrix:
        """Matrix with entries rounded to ``ndigits``."""
        return self.map(lambda e: round(e, ndigits))

    def conj(self) -> Matrix:
        """Element-wise complex conjugate."""
        return self.map(conjugate)

    def real(self) -> Matrix:
        """Real parts of the elements."""
        return self.map(lambda e: e.real)

    def imag(self) -> Matrix:
        """Imaginary parts of the elements."""
        return self.map(lambda e: e.imag)

    imaginary = imag

    def rect(self) -> tuple[Matrix, Matrix]:
        """(real part, imaginary part)."""
        return (self.real(), self.imag())

    def coerce(self, target: Any, *args: Any) -> Matrix:
        """
        Convert every element to ``target``.

        Raises:
            InvalidArgumentError: If a required extra argument is missing
        """
        return self.map(coercer(target, *args))

    def clone(self) -> Matrix:
        return Matrix(self.rows, column_count=self.column_count)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.column_count == other.column_count and self.rows == other.rows

    def __ne__(self, other: Any) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash((Matrix, self.rows, self.column_count))

    def compare(
        self, other: Any, tolerance: float | None = None, mode: str = ToleranceMode.RELATIVE
    ) -> bool:
        """Compare matrices element-wise within ``tolerance``."""
        if not isinstance(other, Matrix) or self.shape != other.shape:
            return False
        tolerance = resolve_approx_precision(tolerance)
        return all(
            fuzzy_compare(a, b, tolerance, mode)
            for row_a, row_b in zip(self.rows, other.rows)
            for a, b in zip(row_a, row_b)
        )

    def to_python(self) -> list[list[Any]]:
        """Rows as nested lists."""
        return [list(row) for row in self.rows]

    to_list = to_python

    def to_numpy(self) -> np.ndarray:
        """Convert to NumPy array of shape ``(row_count, column_count)``."""
        return np.array(self.to_python()).reshape(self.shape)

    def to_string(self) -> str:
        if self.is_empty():
            return f"Matrix.empty({self.row_count}, {self.column_count})"
        rows = ", ".join("[" + ", ".join(str(e) for e in row) + "]" for row in self.rows)
        return f"Matrix[{rows}]"

    def to_tex(self) -> str:
        rows_tex = [" & ".join(str(e) for e in row) for row in self.rows]
        return "\\begin{pmatrix} " + " \\\\ ".join(rows_tex) + " \\end{pmatrix}"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()
