"""Tests for scalar promotion, coercion and fuzzy comparison."""

from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from apatite.core.errors import InvalidArgumentError
from apatite.linalg.scalars import (
    ToleranceMode,
    coercer,
    common_type,
    conjugate,
    decode_scalar,
    encode_scalar,
    exact_div,
    fuzzy_compare,
    is_complex,
    to_scalar,
    unify,
)


class TestPromotion:
    """Test the single-element-type rule."""

    @pytest.mark.parametrize("values,expected", [
        ([1, 2], int),
        ([1, Fraction(1, 2)], Fraction),
        ([Fraction(1, 2), 0.5], float),
        ([1, 0.5, 2j], complex),
        ([Decimal("1"), 2], Decimal),
        ([], None),
    ])
    def test_common_type(self, values, expected):
        assert common_type(values) is expected

    def test_unify_converts_every_value(self):
        assert [type(v) for v in unify([1, 2.5, Fraction(1, 2)])] == [float, float, float]

    def test_decimal_does_not_mix_with_fractions(self):
        with pytest.raises(InvalidArgumentError):
            common_type([Decimal("1"), Fraction(1, 2)])

    def test_to_scalar(self):
        assert to_scalar(np.float64(1.5)) == 1.5
        assert type(to_scalar(np.float64(1.5))) is float
        assert type(to_scalar(True)) is int

    def test_to_scalar_rejects_non_numbers(self):
        with pytest.raises(InvalidArgumentError):
            to_scalar(None)


class TestExactDivision:
    """Test division as used by fraction-free elimination."""

    def test_integers_stay_integers(self):
        assert exact_div(12, 4) == 3
        assert isinstance(exact_div(12, 4), int)

    def test_other_types_use_true_division(self):
        assert exact_div(1.0, 4) == 0.25
        assert exact_div(Fraction(1, 2), 2) == Fraction(1, 4)


class TestComplexHelpers:
    """Test complex detection and conjugation."""

    def test_is_complex(self):
        assert is_complex(1j)
        assert not is_complex(1.0)
        assert not is_complex(Decimal("1"))

    def test_conjugate(self):
        assert conjugate(1 + 2j) == 1 - 2j
        assert conjugate(3) == 3


class TestSerializationHelpers:
    """Test the JSON forms of scalars."""

    def test_python_mode_keeps_values(self):
        assert encode_scalar(Fraction(1, 2)) == Fraction(1, 2)

    def test_json_mode(self):
        assert encode_scalar(3, json_mode=True) == 3
        assert encode_scalar(1 + 2j, json_mode=True) == {"real": 1.0, "imag": 2.0}

    def test_json_mode_keeps_exact_types(self):
        assert encode_scalar(Fraction(1, 3), json_mode=True) == {"numerator": 1, "denominator": 3}
        assert encode_scalar(Decimal("0.1"), json_mode=True) == {"decimal": "0.1"}

    def test_decode(self):
        assert decode_scalar({"real": 1.0, "imag": 2.0}) == 1 + 2j
        assert decode_scalar(4) == 4

    def test_decode_exact_types(self):
        assert decode_scalar({"numerator": 1, "denominator": 3}) == Fraction(1, 3)
        decimal = decode_scalar({"decimal": "0.1"})
        assert type(decimal) is Decimal
        assert decimal == Decimal("0.1")


class TestCoercion:
    """Test conversion functions and their auxiliary parameters."""

    def test_plain_targets(self):
        assert coercer(float)(1) == 1.0
        assert coercer(int)(2.7) == 2
        assert coercer(Decimal)(0.1) == Decimal("0.1")

    def test_complex_needs_imaginary_part(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            coercer(complex)
        assert exc_info.value.details == {"argument": "imag"}
        assert coercer(complex, 2)(1) == 1 + 2j

    def test_fraction_needs_denominator(self):
        with pytest.raises(InvalidArgumentError):
            coercer(Fraction)
        assert coercer(Fraction, 3)(2) == Fraction(2, 3)

    def test_too_many_arguments(self):
        with pytest.raises(InvalidArgumentError):
            coercer(float, 1)

    def test_arbitrary_callable(self):
        assert coercer(lambda v, k: v * k, 10)(2) == 20

    def test_non_callable_target(self):
        with pytest.raises(InvalidArgumentError):
            coercer("float")


class TestFuzzyCompare:
    """Test tolerance-based comparison."""

    def test_exact(self):
        assert fuzzy_compare(1, 1, 0.0)

    def test_relative(self):
        assert fuzzy_compare(1000.0, 1000.5, 1e-3)
        assert not fuzzy_compare(1.0, 1.5, 1e-3)

    def test_absolute(self):
        assert fuzzy_compare(1.0, 1.0005, 1e-3, ToleranceMode.ABSOLUTE)
        assert not fuzzy_compare(1000.0, 1000.5, 1e-3, ToleranceMode.ABSOLUTE)

    def test_near_zero(self):
        """Test that round-off next to an exact zero is accepted."""
        assert fuzzy_compare(1e-16, 0, 1e-5)
        assert not fuzzy_compare(1e-6, 0, 1e-5)

    def test_unknown_mode(self):
        with pytest.raises(InvalidArgumentError):
            fuzzy_compare(1.0, 2.0, 0.1, "sigfigs")
