from decimal import Decimal

import pytest

from token_launch.core.utils.units import format_base_units, to_base_units, to_wei_eth


def test_to_base_units():
    assert to_base_units("1.5") == 1_500_000_000_000_000_000
    assert to_base_units(2, 6) == 2_000_000
    assert to_base_units(Decimal("0.0000001"), 6) == 0
    assert to_wei_eth("0.01") == 10**16


def test_to_base_units_rejects_bad_input():
    with pytest.raises(ValueError):
        to_base_units("abc")
    with pytest.raises(ValueError):
        to_base_units(-1)
    with pytest.raises(ValueError):
        to_base_units("inf")


def test_format_base_units():
    assert format_base_units(1_500_000_000_000_000_000) == "1.5"
    assert format_base_units(100 * 10**18) == "100"
    assert format_base_units(1, 6) == "0.000001"
    assert format_base_units(0) == "0"
