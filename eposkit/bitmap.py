"""Fixed-size bit array with range queries and run searches."""

from __future__ import annotations

ELEM_BITS = 32
"""Number of bits stored in one storage element."""

ELEM_BYTES = ELEM_BITS // 8
"""Number of bytes in one storage element."""

HEADER_SIZE = 8
"""Bytes of bookkeeping that precede the bit storage in a bitmap buffer."""


def _elem_cnt(bit_cnt: int) -> int:
    return (bit_cnt + ELEM_BITS - 1) // ELEM_BITS


def _byte_cnt(bit_cnt: int) -> int:
    return ELEM_BYTES * _elem_cnt(bit_cnt)


def buf_size(bit_cnt: int) -> int:
    """Return the bytes needed to hold a bitmap of ``bit_cnt`` bits in a buffer."""
    if bit_cnt < 0:
        raise ValueError("bit count must not be negative")
    return HEADER_SIZE + _byte_cnt(bit_cnt)


class Bitmap:
    """An array of ``bit_cnt`` bits, all initially false."""

    __slots__ = ("_size", "_bits")

    def __init__(self, bit_cnt: int) -> None:
        if bit_cnt < 0:
            raise ValueError("bit count must not be negative")
        self._size = bit_cnt
        self._bits = 0

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        bits = "".join("1" if self.test(i) else "0" for i in range(self._size))
        return f"Bitmap({self._size}, {bits!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return self._size == other._size and self._bits == other._bits

    def _check_index(self, idx: int) -> None:
        if not 0 <= idx < self._size:
            raise IndexError(f"bit index {idx} out of range 0..{self._size - 1}")

    def _check_range(self, start: int, cnt: int) -> None:
        if start < 0 or cnt < 0 or start > self._size or start + cnt > self._size:
            raise IndexError(
                f"bit range [{start}, {start + cnt}) out of range 0..{self._size}"
            )

    @staticmethod
    def _mask(start: int, cnt: int) -> int:
        return ((1 << cnt) - 1) << start

    # Single bits.

    def set(self, idx: int, value: bool) -> None:
        """Set bit ``idx`` to ``value``."""
        if value:
            self.mark(idx)
        else:
            self.reset(idx)

    def mark(self, idx: int) -> None:
        """Set bit ``idx`` to true."""
        self._check_index(idx)
        self._bits |= 1 << idx

    def reset(self, idx: int) -> None:
        """Set bit ``idx`` to false."""
        self._check_index(idx)
        self._bits &= ~(1 << idx)

    def flip(self, idx: int) -> None:
        """Toggle bit ``idx``."""
        self._check_index(idx)
        self._bits ^= 1 << idx

    def test(self, idx: int) -> bool:
        """Return the value of bit ``idx``."""
        self._check_index(idx)
        return bool((self._bits >> idx) & 1)

    # Ranges of bits.

    def set_all(self, value: bool) -> None:
        """Set every bit to ``value``."""
        self.set_multiple(0, self._size, value)

    def set_multiple(self, start: int, cnt: int, value: bool) -> None:
        """Set the ``cnt`` bits starting at ``start`` to ``value``."""
        self._check_range(start, cnt)
        mask = self._mask(start, cnt)
        if value:
            self._bits |= mask
        else:
            self._bits &= ~mask

    def count(self, start: int, cnt: int, value: bool) -> int:
        """Return how many of the ``cnt`` bits from ``start`` equal ``value``."""
        self._check_range(start, cnt)
        ones = bin(self._bits & self._mask(start, cnt)).count("1")
        return ones if value else cnt - ones

    def contains(self, start: int, cnt: int, value: bool) -> bool:
        """Return whether any of the ``cnt`` bits from ``start`` equals ``value``."""
        self._check_range(start, cnt)
        mask = self._mask(start, cnt)
        selected = self._bits & mask
        return selected != 0 if value else selected != mask

    def any(self, start: int, cnt: int) -> bool:
        """Return whether any bit in the range is true."""
        return self.contains(start, cnt, True)

    def none(self, start: int, cnt: int) -> bool:
        """Return whether no bit in the range is true."""
        return not self.contains(start, cnt, True)

    def all(self, start: int, cnt: int) -> bool:
        """Return whether every bit in the range is true."""
        return not self.contains(start, cnt, False)

    # Searching.

    def scan(self, start: int, cnt: int, value: bool) -> int | None:
        """Return the first index at or after ``start`` of ``cnt`` bits all equal
        to ``value``, or None if there is no such run."""
        if start < 0 or start > self._size:
            raise IndexError(f"start {start} out of range 0..{self._size}")
        if cnt < 0:
            raise ValueError("count must not be negative")
        if cnt > self._size:
            return None
        for idx in range(start, self._size - cnt + 1):
            if not self.contains(idx, cnt, not value):
                return idx
        return None

    def scan_and_flip(self, start: int, cnt: int, value: bool) -> int | None:
        """Like :meth:`scan`, and also set the run found to ``not value``."""
        idx = self.scan(start, cnt, value)
        if idx is not None:
            self.set_multiple(idx, cnt, not value)
        return idx

    # Serialisation.

    def to_bytes(self) -> bytes:
        """Return the bit storage as little-endian 32-bit elements."""
        return self._bits.to_bytes(_byte_cnt(self._size), "little")

    @classmethod
    def from_bytes(cls, bit_cnt: int, data: bytes) -> Bitmap:
        """Build a bitmap of ``bit_cnt`` bits from storage made by :meth:`to_bytes`.

        Bits beyond ``bit_cnt`` in the last element are cleared.
        """
        bitmap = cls(bit_cnt)
        size = _byte_cnt(bit_cnt)
        if len(data) < size:
            raise ValueError(f"need {size} bytes for {bit_cnt} bits, got {len(data)}")
        value = int.from_bytes(bytes(data[:size]), "little")
        bitmap._bits = value & ((1 << bit_cnt) - 1)
        return bitmap