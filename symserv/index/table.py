from __future__ import annotations
from bisect import bisect_left
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

from symserv.config.env import MAIN_BASE

_U64_MASK = (1 << 64) - 1


@dataclass(frozen=True)
class SymbolEntry:
    address: int  # relative to the module base
    label: str


@dataclass(frozen=True)
class Exact:
    entry: SymbolEntry


@dataclass(frozen=True)
class Nearest:
    entry: SymbolEntry
    offset: int  # always > 0


@dataclass(frozen=True)
class NotFound:
    pass


Resolution = Union[Exact, Nearest, NotFound]


def to_absolute(relative: int, base: int = MAIN_BASE) -> int:
    return base + relative


def to_relative(absolute: int, base: int = MAIN_BASE) -> int:
    return absolute - base


def format_hex(value: int) -> str:
    """Lowercase hex without prefix; negatives print as 64-bit two's complement."""
    return format(value & _U64_MASK, "x")


class SymbolIndex:
    """Immutable table of symbols ordered by relative address.

    Entries are sorted stably, so entries sharing an address keep the order
    they were given in. Lookups always return the first entry of an address
    group.
    """

    def __init__(self, entries: Iterable[SymbolEntry]):
        ordered = sorted(entries, key=lambda e: e.address)
        self._entries: Tuple[SymbolEntry, ...] = tuple(ordered)
        self._addrs: Tuple[int, ...] = tuple(e.address for e in ordered)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SymbolEntry]:
        return iter(self._entries)

    @property
    def entries(self) -> Tuple[SymbolEntry, ...]:
        return self._entries

    def resolve(self, relative_address: int) -> Resolution:
        """Floor lookup: exact entry, else nearest entry below plus offset.

        Returns NotFound when nothing lies at or below `relative_address`.
        """
        i = bisect_left(self._addrs, relative_address)
        if i < len(self._addrs) and self._addrs[i] == relative_address:
            return Exact(self._entries[i])
        if i == 0:
            return NotFound()
        below = self._addrs[i - 1]
        # first entry of the group sharing that address
        j = bisect_left(self._addrs, below, 0, i)
        return Nearest(self._entries[j], relative_address - below)
