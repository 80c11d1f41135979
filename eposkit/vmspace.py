"""Virtual address space bookkeeping: sorted zones of user and kernel pages."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass


class Protection(enum.IntFlag):
    """Access rights of a zone of virtual memory."""

    NONE = 0
    READ = 1
    WRITE = 2
    EXEC = 4
    ALL = READ | WRITE | EXEC


@dataclass(frozen=True)
class VmZone:
    """A range of allocated virtual addresses."""

    base: int
    limit: int
    protect: Protection

    @property
    def end(self) -> int:
        return self.base + self.limit

    def contains(self, va: int) -> bool:
        return self.base <= va < self.end


class AddressSpaceError(Exception):
    """Raised when pages cannot be allocated or freed."""


class AddressSpace:
    """Zones of virtual memory, kept sorted, in a user and a kernel list.

    User addresses run from ``user_min`` to ``user_max``, kernel addresses
    from ``user_max`` to ``kern_max``. The kernel list starts with one zone
    covering ``[user_max, brk)``, which cannot be freed.
    """

    def __init__(
        self, user_min: int, user_max: int, kern_max: int, brk: int, page_size: int
    ) -> None:
        if page_size <= 0 or page_size & (page_size - 1):
            raise ValueError("page size must be a positive power of two")
        if not user_min <= user_max <= brk <= kern_max:
            raise ValueError("need user_min <= user_max <= brk <= kern_max")
        self.user_min = user_min
        self.user_max = user_max
        self.kern_max = kern_max
        self.page_size = page_size
        self._lock = threading.Lock()
        self._kernel: list[VmZone] = [VmZone(user_max, brk - user_max, Protection.ALL)]
        self._user: list[VmZone] = []

    def _list_for(self, va: int) -> list[VmZone]:
        return self._user if va < self.user_max else self._kernel

    def alloc_in_addr(self, va: int, npages: int, prot: int) -> int:
        """Allocate ``npages`` pages at exactly ``va`` and return ``va``."""
        size = npages * self.page_size
        if npages <= 0:
            raise AddressSpaceError("page count must be positive")
        if va & (self.page_size - 1):
            raise AddressSpaceError(f"address {va:#x} is not page aligned")
        if va < self.user_min or va >= self.kern_max or va + size > self.kern_max:
            raise AddressSpaceError(f"address range at {va:#x} is out of bounds")
        with self._lock:
            if va < self.user_max and va + size > self.user_max:
                raise AddressSpaceError("range crosses the user/kernel boundary")
            zones = self._list_for(va)
            position = len(zones)
            for index, zone in enumerate(zones):
                if zone.contains(va):
                    raise AddressSpaceError(f"address {va:#x} is already in use")
                if va < zone.base:
                    if va + size > zone.base:
                        raise AddressSpaceError(f"range at {va:#x} overlaps a zone")
                    position = index
                    break
            zones.insert(position, VmZone(va, size, Protection(prot)))
        return va

    def alloc(self, npages: int, prot: int, user: bool = True) -> int:
        """Allocate ``npages`` contiguous pages and return their start address.

        The search begins at the end of the first zone of the chosen list,
        or at ``user_min`` when the list is empty.
        """
        size = npages * self.page_size
        if npages <= 0:
            raise AddressSpaceError("page count must be positive")
        with self._lock:
            zones = self._user if user else self._kernel
            if not zones:
                va = self.user_min
                position = 0
            else:
                va = zones[0].end
                position = 1
                for index, zone in enumerate(zones[1:], start=1):
                    if va + size <= zone.base:
                        break
                    va = zone.end
                    position = index + 1
            ceiling = self.user_max if user else self.kern_max
            if va >= ceiling or va + size > ceiling:
                raise AddressSpaceError(f"no room for {npages} pages")
            zones.insert(position, VmZone(va, size, Protection(prot)))
        return va

    def free(self, va: int, npages: int) -> None:
        """Release a zone made by :meth:`alloc` or :meth:`alloc_in_addr`.

        ``va`` and ``npages`` must match the zone exactly.
        """
        size = npages * self.page_size
        if npages <= 0:
            raise AddressSpaceError("page count must be positive")
        if va == self.user_max:
            raise AddressSpaceError("the initial kernel zone cannot be freed")
        with self._lock:
            zones = self._list_for(va)
            for index, zone in enumerate(zones):
                if zone.base == va and zone.limit == size:
                    del zones[index]
                    return
        raise AddressSpaceError(f"no zone of {npages} pages at {va:#x}")

    def prot(self, va: int) -> Protection | None:
        """Return the protection of the zone holding ``va``, or None."""
        with self._lock:
            for zone in self._list_for(va):
                if zone.contains(va):
                    return zone.protect
        return None

    def zones(self, user: bool = True) -> tuple[VmZone, ...]:
        """Return the zones of the user or kernel list, in address order."""
        with self._lock:
            return tuple(self._user if user else self._kernel)