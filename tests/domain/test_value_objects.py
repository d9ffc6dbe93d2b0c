"""Unit tests for the Measure and Coordinate value objects."""

from decimal import Decimal

import pytest

from wms.domain.exceptions import ValidationError
from wms.domain.model.value_objects import ZERO, Coordinate, Measure


class TestMeasure:

    def test_of_parses_strings_and_ints(self):
        assert Measure.of("2.5") == Measure(Decimal("2.5"))
        assert Measure.of(3) == Measure(Decimal("3"))

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Measure.of("-1")

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid quantity"):
            Measure.of("ten")

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError, match="finite"):
            Measure(Decimal("Infinity"))

    def test_positive_rejects_zero(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Measure.positive("0")

    def test_arithmetic(self):
        assert Measure.of("10") - Measure.of("2.5") == Measure.of("7.5")
        assert Measure.of("1.1") + Measure.of("2.2") == Measure.of("3.3")

    def test_subtraction_below_zero_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            Measure.of("1") - Measure.of("2")

    def test_repeated_cuts_do_not_drift(self):
        remaining = Measure.of("1")
        for _ in range(10):
            remaining = remaining - Measure.of("0.1")
        assert remaining.is_zero

    def test_str_is_normalized(self):
        assert str(Measure.of("2.50")) == "2.5"
        assert str(Measure.of("100")) == "100"
        assert str(ZERO) == "0"

    def test_ordering(self):
        assert Measure.of("2") > Measure.of("1.99")


class TestCoordinate:

    def test_parts_are_normalized(self):
        c = Coordinate(" a ", "3", "b", "12")
        assert str(c) == "A-3-B-12"

    def test_equal_by_value(self):
        assert Coordinate("A", "1", "1", "1") == Coordinate("a", "1", "1", "1")

    def test_blank_part_rejected(self):
        with pytest.raises(ValidationError, match="rack is required"):
            Coordinate("A", " ", "1", "1")
