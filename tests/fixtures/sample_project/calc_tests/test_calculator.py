"""Sample pytest suite run by the engine bridge integration tests."""
from __future__ import annotations

import pytest

from calc_pkg import Calculator


class CalculatorChecks:
    def test_starts_at_zero(self) -> None:
        assert Calculator().is_zero


class TestCalculator(CalculatorChecks):
    @pytest.mark.fast
    def test_add(self) -> None:
        calc = Calculator()
        assert calc.add(2.5) == 2.5

    @pytest.mark.slow
    def test_divide(self) -> None:
        calc = Calculator()
        calc.add(9)
        assert calc.divide(3) == 3.0


@pytest.mark.fast
def test_module_level_reset() -> None:
    calc = Calculator()
    calc.add(1)
    calc.reset()
    assert calc.is_zero
