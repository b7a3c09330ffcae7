'''Runtime capability catalogs, built from enumerations served by the backend'''
from types import MappingProxyType
from typing import Annotated, Iterable, Iterator, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

__all__ = ('CatalogEntry', 'CapabilityCatalog')

class CatalogEntry(BaseModel):
    '''Single `{name, value}` pair of a served enumeration. The value is one bit, or 0 for an entry that grants nothing'''
    name: Annotated[str, Field(frozen=True, min_length=1)]
    value: Annotated[int, Field(frozen=True, ge=0)]

    @field_validator('value', mode='after')
    @classmethod
    def ensure_single_bit(cls, value: int) -> int:
        if value & (value - 1):
            raise ValueError(f'Catalog value {value} ({value:#b}) must have at most one bit set')
        return value

class CapabilityCatalog(Mapping[str, int]):
    '''Immutable mapping of capability (or attendance type) names to their bits.

    Built once per session from the backend's enumeration. Lookups for names the
    backend did not publish resolve to `None` through `resolve()`, while a
    published 0-valued entry resolves to 0 and never matches a granted bitmask.
    At most one entry may hold 0, as with any other shared value.
    '''
    __slots__ = ('_bits', '_names')

    def __init__(self, entries: Iterable[CatalogEntry]):
        bits: dict[str, int] = {}
        names: dict[int, str] = {}
        for entry in entries:
            if entry.name in bits:
                raise ValueError(f'Duplicate catalog name {entry.name}')
            if entry.value in names:
                raise ValueError(f'Catalog names {names[entry.value]} and {entry.name} share bit {entry.value:#b}')
            bits[entry.name] = entry.value
            names[entry.value] = entry.name

        self._bits: MappingProxyType[str, int] = MappingProxyType(bits)
        self._names: MappingProxyType[int, str] = MappingProxyType(names)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, int]) -> 'CapabilityCatalog':
        return cls(CatalogEntry(name=name, value=value) for name, value in mapping.items())

    def __getitem__(self, name: str) -> int:
        return self._bits[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._bits)

    def __len__(self) -> int:
        return len(self._bits)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}({dict(self._bits)})>'

    def resolve(self, name: str) -> Optional[int]:
        return self._bits.get(name)

    def bits_for(self, *names: str) -> frozenset[int]:
        '''Bits of all published names, unknown names are left out'''
        return frozenset(bit for name in names if (bit := self._bits.get(name)) is not None)

    def name_of(self, bit: int) -> Optional[str]:
        return self._names.get(bit)

    def granted_names(self, bits: int) -> tuple[str, ...]:
        return tuple(name for name, bit in self._bits.items() if bits & bit)

