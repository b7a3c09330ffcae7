'''Bitmask permission evaluation'''
from typing import Iterable, Optional

__all__ = ('has_permission', 'toggle_permission')

def has_permission(granted_bits: Optional[int], required_any: Optional[Iterable[int]]) -> bool:
    '''Check whether any one of the required bits is set in the granted bitmask.

    A missing bitmask together with a missing requirement is denied, an empty
    requirement never matches. Callers wanting a superuser bypass must list the
    bypass bit in `required_any` themselves.
    '''
    if not granted_bits and not required_any:
        return False

    for required_bit in required_any or ():
        if (granted_bits or 0) & required_bit:
            return True
    return False

def toggle_permission(current_bits: int, bit: int) -> int:
    '''Flip exactly `bit` in `current_bits`, leaving every other bit untouched'''
    if bit <= 0 or bit & (bit - 1):
        raise ValueError(f'Expected a single capability bit, got {bit:#b}')
    return current_bits ^ bit
