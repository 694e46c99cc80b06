# graph_grouper/bitset.py
"""
Fixed-width dense bit-vector used for per-node dominator sets.

A ``BitSet`` holds membership for the integers ``0 .. size-1`` in a single
Python ``int`` mask.  Intersection and union work on whole masks at once.
"""

from __future__ import annotations

from typing import Iterable, Iterator


class BitSet:
    """Set of small non-negative integers backed by an ``int`` bit mask.

    ``add``, ``discard`` and ``test`` raise ``IndexError`` for indices outside
    ``[0, size)``; ``in`` just answers False.
    """

    __slots__ = ("_size", "_bits")

    def __init__(self, size: int, fill: bool = False):
        if size < 0:
            raise ValueError(f"BitSet size must be non-negative, got {size}")
        self._size = size
        self._bits = self._all_ones(size) if fill else 0

    # ---- constructors ------------------------------------------------

    @classmethod
    def full(cls, size: int) -> "BitSet":
        return cls(size, fill=True)

    @classmethod
    def empty(cls, size: int) -> "BitSet":
        return cls(size)

    @classmethod
    def of(cls, size: int, *members: int) -> "BitSet":
        bs = cls(size)
        for m in members:
            bs.add(m)
        return bs

    @classmethod
    def from_iterable(cls, size: int, members: Iterable[int]) -> "BitSet":
        return cls.of(size, *members)

    @staticmethod
    def _all_ones(size: int) -> int:
        return (1 << size) - 1

    # ---- element access ----------------------------------------------

    def _check(self, i: int) -> None:
        if not 0 <= i < self._size:
            raise IndexError(f"bit {i} out of range for BitSet of size {self._size}")

    def add(self, i: int) -> "BitSet":
        self._check(i)
        self._bits |= 1 << i
        return self

    def discard(self, i: int) -> "BitSet":
        self._check(i)
        self._bits &= ~(1 << i)
        return self

    def test(self, i: int) -> bool:
        self._check(i)
        return bool(self._bits >> i & 1)

    def __contains__(self, i: object) -> bool:
        if not isinstance(i, int) or not 0 <= i < self._size:
            return False
        return bool(self._bits >> i & 1)

    def clear(self) -> "BitSet":
        self._bits = 0
        return self

    def fill(self) -> "BitSet":
        self._bits = self._all_ones(self._size)
        return self

    # ---- set algebra -------------------------------------------------

    def _same_width(self, other: "BitSet") -> None:
        if self._size != other._size:
            raise ValueError(
                f"BitSet size mismatch: {self._size} vs {other._size}"
            )

    def __iand__(self, other: "BitSet") -> "BitSet":
        self._same_width(other)
        self._bits &= other._bits
        return self

    def __ior__(self, other: "BitSet") -> "BitSet":
        self._same_width(other)
        self._bits |= other._bits
        return self

    def __and__(self, other: "BitSet") -> "BitSet":
        return self.copy().__iand__(other)

    def __or__(self, other: "BitSet") -> "BitSet":
        return self.copy().__ior__(other)

    def issubset(self, other: "BitSet") -> bool:
        self._same_width(other)
        return self._bits & ~other._bits == 0

    def copy(self) -> "BitSet":
        clone = BitSet(self._size)
        clone._bits = self._bits
        return clone

    # ---- dunder protocol ---------------------------------------------

    @property
    def size(self) -> int:
        """Width of the vector (not the number of members)."""
        return self._size

    def __len__(self) -> int:
        return bin(self._bits).count("1")

    def __iter__(self) -> Iterator[int]:
        bits = self._bits
        i = 0
        while bits:
            if bits & 1:
                yield i
            bits >>= 1
            i += 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitSet):
            return NotImplemented
        return self._size == other._size and self._bits == other._bits

    def __repr__(self) -> str:
        return f"BitSet({self._size}, {{{', '.join(map(str, self))}}})"
