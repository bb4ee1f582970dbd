from __future__ import annotations

from exchange.locator import get_grid, is_valid_grid_square


def test_get_grid_starts_at_first_letter():
    assert get_grid("73 JO65XY") == "JO65"
    assert get_grid("JN") == "JN"
    assert get_grid("") == ""


def test_is_valid_grid_square():
    assert is_valid_grid_square("JO65")
    assert is_valid_grid_square("jo65xx")
    assert not is_valid_grid_square("ZZ65")
    assert not is_valid_grid_square("JO6")
    assert not is_valid_grid_square("JO65YZ")
    assert not is_valid_grid_square("JO65XY")
