"""Physical frame allocator over zones of RAM, one bitmap per zone."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable

from .bitmap import Bitmap, buf_size


class FrameAllocationError(Exception):
    """Raised when frames cannot be allocated."""


@dataclass
class FrameZone:
    """A usable range of physical memory and the bitmap tracking its frames."""

    base: int
    limit: int
    bitmap: Bitmap

    def contains(self, paddr: int) -> bool:
        return self.base <= paddr < self.base + self.limit


def _round_up(value: int, step: int) -> int:
    return (value + step - 1) // step * step


class FrameAllocator:
    """Allocate contiguous physical frames from a list of RAM zones.

    ``ram_zones`` yields ``(start, end)`` address pairs; the first empty
    zone ends the list. The start of each zone is given over to the zone's
    bitmap storage, and zones left with no space are skipped.
    """

    def __init__(self, ram_zones: Iterable[tuple[int, int]], page_size: int) -> None:
        if page_size <= 0:
            raise ValueError("page size must be positive")
        self.page_size = page_size
        self.reserved_bytes = 0
        self._lock = threading.Lock()
        zones = []
        for start, end in ram_zones:
            if end - start == 0:
                break
            limit = end - start
            bit_cnt = limit // page_size
            size = _round_up(buf_size(bit_cnt), page_size)
            base = start + size
            limit -= size
            if limit <= 0:
                continue
            zones.append(FrameZone(base, limit, Bitmap(bit_cnt)))
            self.reserved_bytes += size
        self.zones: tuple[FrameZone, ...] = tuple(zones)

    def alloc(self, nframes: int) -> int:
        """Allocate ``nframes`` contiguous frames and return their start address."""
        if nframes < 0:
            raise ValueError("frame count must not be negative")
        with self._lock:
            for zone in self.zones:
                idx = zone.bitmap.scan(0, nframes, False)
                if idx is not None:
                    zone.bitmap.set_multiple(idx, nframes, True)
                    return zone.base + idx * self.page_size
        raise FrameAllocationError(f"no run of {nframes} free frames")

    def alloc_in_addr(self, pa: int, nframes: int) -> int:
        """Allocate ``nframes`` contiguous frames starting at address ``pa``."""
        if nframes < 0:
            raise ValueError("frame count must not be negative")
        with self._lock:
            for zone in self.zones:
                if not zone.contains(pa):
                    continue
                idx = (pa - zone.base) // self.page_size
                bitmap = zone.bitmap
                if idx + nframes <= len(bitmap) and bitmap.none(idx, nframes):
                    bitmap.set_multiple(idx, nframes, True)
                    return pa
        raise FrameAllocationError(
            f"cannot allocate {nframes} frames at {pa:#010x}"
        )

    def free(self, paddr: int, nframes: int) -> None:
        """Release ``nframes`` frames starting at ``paddr``.

        Addresses outside every zone are ignored.
        """
        with self._lock:
            for zone in self.zones:
                if zone.contains(paddr):
                    idx = (paddr - zone.base) // self.page_size
                    zone.bitmap.set_multiple(idx, nframes, False)
                    return

    def free_frames(self) -> int:
        """Return the number of frames marked free across all zones."""
        with self._lock:
            return sum(
                zone.bitmap.count(0, len(zone.bitmap), False) for zone in self.zones
            )