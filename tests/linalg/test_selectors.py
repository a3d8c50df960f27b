"""Tests for matrix cell selectors."""

import pytest

from apatite.core.errors import InvalidArgumentError
from apatite.linalg.selectors import Selector, cells


class TestSelectorParsing:
    """Test resolving selectors by member or name."""

    def test_member_passes_through(self):
        assert Selector.parse(Selector.UPPER) is Selector.UPPER

    def test_name_is_case_insensitive(self):
        assert Selector.parse("Strict_Lower") is Selector.STRICT_LOWER

    def test_unknown_name(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Selector.parse("middle")
        assert "one of all, diagonal" in str(exc_info.value)


class TestCells:
    """Test cell positions on square and rectangular shapes."""

    def test_all_is_row_major(self):
        assert list(cells(2, 2)) == [(0, 0), (0, 1), (1, 0), (1, 1)]

    def test_diagonal_of_tall_matrix(self):
        assert list(cells(3, 2, Selector.DIAGONAL)) == [(0, 0), (1, 1)]

    def test_diagonal_of_wide_matrix(self):
        assert list(cells(2, 3, Selector.DIAGONAL)) == [(0, 0), (1, 1)]

    def test_lower_of_wide_matrix(self):
        assert list(cells(2, 3, Selector.LOWER)) == [(0, 0), (1, 0), (1, 1)]

    def test_lower_of_tall_matrix(self):
        assert list(cells(3, 2, Selector.LOWER)) == [(0, 0), (1, 0), (1, 1), (2, 0), (2, 1)]

    def test_strict_lower_of_tall_matrix(self):
        assert list(cells(3, 2, Selector.STRICT_LOWER)) == [(1, 0), (2, 0), (2, 1)]

    def test_upper_of_tall_matrix(self):
        assert list(cells(3, 2, Selector.UPPER)) == [(0, 0), (0, 1), (1, 1)]

    def test_strict_upper(self):
        assert list(cells(2, 3, "strict_upper")) == [(0, 1), (0, 2), (1, 2)]

    def test_off_diagonal(self):
        assert list(cells(2, 2, Selector.OFF_DIAGONAL)) == [(0, 1), (1, 0)]

    def test_empty_shapes(self):
        assert list(cells(0, 3, Selector.UPPER)) == []
        assert list(cells(2, 0, Selector.ALL)) == []
        assert list(cells(2, 0, Selector.DIAGONAL)) == []

    def test_selector_validated_eagerly(self):
        with pytest.raises(InvalidArgumentError):
            cells(2, 2, "bogus")
