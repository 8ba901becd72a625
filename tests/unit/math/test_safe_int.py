"""Tests for SafeInt checked arithmetic."""

import pytest

from pool_engine.constants import UINT256_MAX
from pool_engine.safe_int import (
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint256Overflow,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        assert SafeInt(SafeInt(42)).value == 42

    def test_negative_held_until_conversion(self):
        """Negative values are allowed in flight and rejected by to_uint256."""
        s = SafeInt(-10)
        assert s.value == -10
        with pytest.raises(Uint256Overflow):
            s.to_uint256()

    @pytest.mark.parametrize("value", [True, 1.0, "1", None])
    def test_rejects_non_int(self, value):
        with pytest.raises(TypeError):
            SafeInt(value)


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add_mul(self):
        assert S(3) + S(4) == 7
        assert S(3) * 4 == 12

    def test_sub(self):
        assert S(10) - S(3) == 7
        assert S(3) - 3 == 0

    def test_sub_underflow(self):
        with pytest.raises(Underflow):
            S(3) - S(4)

    def test_floordiv(self):
        assert S(10) // S(3) == 3

    def test_floordiv_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(10) // S(0)

    def test_ceiling_div(self):
        assert S(10).ceiling_div(3) == 4
        assert S(9).ceiling_div(3) == 3
        assert S(0).ceiling_div(3) == 0

    def test_ceiling_div_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(1).ceiling_div(0)

    def test_min(self):
        assert S(5).min(3) == 3
        assert S(2).min(S(3)) == 2

    @pytest.mark.parametrize("value,root", [(0, 0), (1, 1), (15, 3), (16, 4), (10**36, 10**18)])
    def test_isqrt(self, value, root):
        assert S(value).isqrt() == root

    def test_comparisons(self):
        assert S(1) < S(2)
        assert S(2) <= 2
        assert S(3) > 2
        assert S(3) >= S(3)
        assert not S(0)
        assert int(S(7)) == 7

    def test_errors_are_arithmetic_errors(self):
        """Ledger code can catch every SafeInt failure as ArithmeticError."""
        assert issubclass(SafeIntError, ArithmeticError)
        for err in (DivisionByZero, Underflow, Uint256Overflow):
            assert issubclass(err, SafeIntError)


class TestToUint256:
    """Tests for uint256 bounds checking."""

    def test_max_accepted(self):
        assert S(UINT256_MAX).to_uint256() == UINT256_MAX

    def test_overflow(self):
        with pytest.raises(Uint256Overflow):
            (S(UINT256_MAX) + 1).to_uint256()
