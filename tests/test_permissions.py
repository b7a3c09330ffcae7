import pytest

from client.authz.permissions import has_permission, toggle_permission

def test_empty_grant_and_requirement_is_denied():
    assert has_permission(0, set()) is False
    assert has_permission(0, None) is False
    assert has_permission(None, None) is False

def test_no_granted_bits_is_denied():
    assert has_permission(0b0, {0b1}) is False

def test_any_matching_bit_is_enough():
    assert has_permission(0b0101, {0b0001}) is True
    assert has_permission(0b0100, {0b0001, 0b0100}) is True

def test_empty_requirement_is_denied_even_with_grants():
    assert has_permission(0b1111, set()) is False

def test_unrelated_bits_are_denied():
    assert has_permission(0b1010, {0b0001, 0b0100}) is False

def test_toggle_sets_and_clears_a_bit():
    assert toggle_permission(0b000, 0b010) == 0b010
    assert toggle_permission(0b010, 0b010) == 0b000

def test_toggle_leaves_other_bits_untouched():
    assert toggle_permission(0b1001, 0b0100) == 0b1101
    assert toggle_permission(0b1101, 0b0100) == 0b1001

@pytest.mark.parametrize('bit', [0, -1, 0b011, 0b110])
def test_toggle_rejects_non_single_bits(bit):
    with pytest.raises(ValueError):
        toggle_permission(0b1000, bit)
