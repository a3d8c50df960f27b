"""
apatite.linalg - dense vectors and matrices

Immutable numeric value types with:
- Element type promotion
- Operator overloading
- Fuzzy comparison
- Determinant, rank, inverse, minors and cofactors
"""

from .matrix import Matrix
from .scalars import ToleranceMode, fuzzy_compare
from .selectors import Selector, cells
from .value import LinearValue
from .vector import I, J, K, Vector

__all__ = [
    "LinearValue",
    "ToleranceMode",
    "fuzzy_compare",
    "Vector",
    "Matrix",
    "Selector",
    "cells",
    "I",
    "J",
    "K",
]
