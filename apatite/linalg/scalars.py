"""
Scalar helpers shared by Vector and Matrix.

Element values are plain Python numbers. A container holds a single element
type; mixed inputs are promoted along ``int -> Fraction -> float -> complex``.
"""

from __future__ import annotations

import numbers
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable, Iterable

import numpy as np

from ..core.config import get_settings
from ..core.errors import InvalidArgumentError
from ..core.logging import get_logger

logger = get_logger(__name__)

# Promotion order for the numeric tower. Decimal sits outside it.
_TOWER: tuple[type, ...] = (int, Fraction, float, complex)


class ToleranceMode:
    """Modes for fuzzy comparison."""

    RELATIVE = "relative"  # |a - b| / max(|a|, |b|) <= tol
    ABSOLUTE = "absolute"  # |a - b| <= tol


def to_scalar(value: Any) -> Any:
    """
    Normalize a single element.

    numpy scalars become Python scalars and ``bool`` becomes ``int``.

    Raises:
        InvalidArgumentError: If ``value`` is not a number
    """
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, bool):
        return int(value)
    if not isinstance(value, numbers.Number):
        raise InvalidArgumentError(
            f"Elements must be numbers, got {type(value).__name__}", argument="elements"
        )
    return value


def _tower_type(value: Any) -> type | None:
    if type(value) in _TOWER:
        return type(value)
    if isinstance(value, numbers.Integral):
        return int
    if isinstance(value, numbers.Rational):
        return Fraction
    if isinstance(value, numbers.Real) and not isinstance(value, Decimal):
        return float
    if isinstance(value, numbers.Complex) and not isinstance(value, Decimal):
        return complex
    return None


def common_type(values: Iterable[Any]) -> type | None:
    """
    Determine the element type a homogeneous container should use.

    Returns ``None`` for an empty input.

    Raises:
        InvalidArgumentError: If the types cannot be unified
    """
    samples: dict[type, Any] = {}
    for value in values:
        samples.setdefault(type(value), value)
    if not samples:
        return None
    if len(samples) == 1:
        return next(iter(samples))

    if Decimal in samples:
        others = [k for k in samples if k is not Decimal]
        if all(_tower_type(samples[k]) is int for k in others):
            return Decimal
        raise InvalidArgumentError(
            "Cannot mix Decimal elements with "
            + ", ".join(sorted(k.__name__ for k in others)),
            argument="elements",
        )

    rank = -1
    for kind, sample in samples.items():
        tower = _tower_type(sample)
        if tower is None:
            raise InvalidArgumentError(
                f"Unsupported element type {kind.__name__}", argument="elements"
            )
        rank = max(rank, _TOWER.index(tower))
    return _TOWER[rank]


def unify(values: Iterable[Any]) -> tuple[Any, ...]:
    """Normalize ``values`` and promote them to one common element type."""
    normalized = tuple(to_scalar(v) for v in values)
    kind = common_type(normalized)
    if kind is None:
        return normalized
    return tuple(v if type(v) is kind else kind(v) for v in normalized)


def encode_scalar(value: Any, json_mode: bool = False) -> Any:
    """
    Prepare an element for serialization.

    In JSON mode the types JSON cannot hold exactly become tagged mappings:
    ``{"real", "imag"}`` for complex, ``{"numerator", "denominator"}`` for
    Fraction and ``{"decimal": "<str>"}`` for Decimal.
    """
    if not json_mode or type(value) in (int, float):
        return value
    if isinstance(value, complex):
        return {"real": value.real, "imag": value.imag}
    if isinstance(value, Fraction):
        return {"numerator": value.numerator, "denominator": value.denominator}
    if isinstance(value, Decimal):
        return {"decimal": str(value)}
    return float(value)


def decode_scalar(value: Any) -> Any:
    """Inverse of :func:`encode_scalar` for the tagged mapping forms."""
    if not isinstance(value, dict):
        return value
    keys = set(value)
    if keys == {"real", "imag"}:
        return complex(value["real"], value["imag"])
    if keys == {"numerator", "denominator"}:
        return Fraction(value["numerator"], value["denominator"])
    if keys == {"decimal"}:
        return Decimal(value["decimal"])
    return value


def exact_div(numerator: Any, denominator: Any) -> Any:
    """
    Divide, staying in the integers when both operands are integral.

    Bareiss elimination only performs divisions that are exact, so floor
    division loses nothing for integer input.
    """
    if isinstance(numerator, numbers.Integral) and isinstance(denominator, numbers.Integral):
        return numerator // denominator
    return numerator / denominator


def is_complex(value: Any) -> bool:
    """Return True for genuinely complex (non-real) element types."""
    return isinstance(value, complex) or (
        isinstance(value, numbers.Complex) and not isinstance(value, numbers.Real)
        and not isinstance(value, Decimal)
    )


def conjugate(value: Any) -> Any:
    """Complex conjugate; the identity for real numbers."""
    if hasattr(value, "conjugate"):
        return value.conjugate()
    return value


def _to_fraction(value: Any, denominator: int) -> Fraction:
    return Fraction(value) / denominator


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _to_complex(value: Any, imag: Any) -> complex:
    return complex(value, imag)


# target -> (required auxiliary parameter names, converter)
_COERCIONS: dict[type, tuple[tuple[str, ...], Callable[..., Any]]] = {
    int: ((), int),
    float: ((), float),
    Decimal: ((), _to_decimal),
    complex: (("imag",), _to_complex),
    Fraction: (("denominator",), _to_fraction),
}


def coercer(target: Any, *args: Any) -> Callable[[Any], Any]:
    """
    Build a conversion function to ``target``.

    Targets needing auxiliary parameters are ``complex`` (the imaginary part)
    and ``Fraction`` (the denominator). Any other callable is invoked as
    ``target(value, *args)``.

    Raises:
        InvalidArgumentError: If a required auxiliary parameter is missing
            or ``target`` is not callable
    """
    if target in _COERCIONS:
        required, convert = _COERCIONS[target]
        if len(args) < len(required):
            missing = ", ".join(required[len(args):])
            raise InvalidArgumentError(
                f"Coercion to {target.__name__} requires: {missing}", argument=missing
            )
        if len(args) > len(required):
            raise InvalidArgumentError(
                f"Coercion to {target.__name__} takes {len(required)} extra argument(s), got {len(args)}"
            )
        logger.debug("coercing elements to %s", target.__name__)
        return lambda value: convert(value, *args)

    if not callable(target):
        raise InvalidArgumentError(f"Cannot coerce to {target!r}", argument="target")
    return lambda value: target(value, *args)


def fuzzy_compare(a: Any, b: Any, tolerance: float, mode: str = ToleranceMode.RELATIVE) -> bool:
    """
    Compare two numbers with tolerance.

    Args:
        a: First value
        b: Second value
        tolerance: Tolerance value
        mode: Comparison mode (relative, absolute)

    Returns:
        True if values are equal within tolerance
    """
    if a == b:
        return True

    diff = abs(a - b)

    if mode == ToleranceMode.ABSOLUTE:
        return diff <= tolerance

    if mode == ToleranceMode.RELATIVE:
        settings = get_settings()
        if min(abs(a), abs(b)) < settings.ZERO_LEVEL:
            return diff <= settings.ZERO_LEVEL_TOL
        return diff / max(abs(a), abs(b)) <= tolerance

    raise InvalidArgumentError(f"Unknown tolerance mode {mode!r}", argument="mode")
