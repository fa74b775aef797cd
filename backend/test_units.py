"""
Unit tests for Souls

Tests cover:
- Integral arithmetic and truncating division
- Ordering and hashing
- Tiered display formatting
"""

import pytest
from units import Souls


class TestSoulsArithmetic:
    """Arithmetic stays integral and never clamps"""

    def test_add_and_subtract(self):
        assert Souls(10) + Souls(5) == Souls(15)
        assert Souls(10) - Souls(15) == Souls(-5)  # Negative intermediates are allowed

    def test_scalar_multiplication_both_sides(self):
        assert Souls(7) * 3 == Souls(21)
        assert 3 * Souls(7) == Souls(21)
        assert Souls.K.times(5) == Souls(5_000)

    def test_division_truncates_toward_zero(self):
        assert Souls(7) / 2 == Souls(3)
        assert Souls(-7) / 2 == Souls(-3)
        assert Souls(7) / -2 == Souls(-3)

    def test_division_by_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            Souls(1) / 0

    def test_scale_rounds_down(self):
        assert Souls(3).scale(1.5) == Souls(4)
        assert Souls(1001).scale(0.9) == Souls(900)

    def test_rejects_non_integer_values(self):
        with pytest.raises(TypeError):
            Souls(1.5)
        with pytest.raises(TypeError):
            Souls(True)

    def test_ordering_and_clamping(self):
        assert Souls(1) < Souls(2)
        assert max(Souls.ZERO, Souls(-4)) == Souls.ZERO
        assert min(Souls(9), Souls(3)) == Souls(3)

    def test_hash_by_value(self):
        assert len({Souls(5), Souls(5), Souls(6)}) == 2

    def test_conversions(self):
        assert int(Souls(42)) == 42
        assert float(Souls(42)) == 42.0
        assert not Souls.ZERO
        assert Souls(1)


class TestSoulsDisplay:
    """Thousands separators below a million, suffixed units above"""

    def test_small_values_use_separators(self):
        assert str(Souls(0)) == "0"
        assert str(Souls(1_234)) == "1,234"
        assert str(Souls(999_999)) == "999,999"
        assert str(Souls(-5_000)) == "-5,000"

    def test_millions(self):
        assert str(Souls.M) == "1.00 M"
        assert str(Souls(1_500_000)) == "1.50 M"

    def test_billions_and_trillions(self):
        assert str(Souls(2_340_000_000)) == "2.34 B"
        assert str(Souls.T) == "1.00 T"
        assert str(Souls.T.times(12)) == "12.00 T"
