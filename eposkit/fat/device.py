"""Sector-addressed storage that FAT volumes are read from and written to."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import BinaryIO

from .layout import SECTOR_SIZE, FatError


def _sector_data(data: bytes) -> bytes:
    chunk = bytes(data)
    if len(chunk) != SECTOR_SIZE:
        raise ValueError(f"a sector holds {SECTOR_SIZE} bytes, got {len(chunk)}")
    return chunk


def _sector_offset(sector: int) -> int:
    if sector < 0:
        raise FatError(f"sector {sector} is negative")
    return sector * SECTOR_SIZE


class BlockDevice(ABC):
    """Storage read and written one sector at a time."""

    @abstractmethod
    def read_sector(self, sector: int) -> bytes:
        """Return the :data:`SECTOR_SIZE` bytes of ``sector``."""

    @abstractmethod
    def write_sector(self, sector: int, data: bytes) -> None:
        """Replace the contents of ``sector`` with ``data``."""


class MemoryDevice(BlockDevice):
    """A device backed by a bytearray of fixed size.

    ``data`` is the initial image, or a byte count for a zero-filled one.
    """

    def __init__(self, data: bytes | int = b"") -> None:
        self._data = bytearray(data)

    def __len__(self) -> int:
        return len(self._data)

    def _span(self, sector: int) -> slice:
        start = _sector_offset(sector)
        end = start + SECTOR_SIZE
        if end > len(self._data):
            raise FatError(f"sector {sector} lies beyond the end of the device")
        return slice(start, end)

    def read_sector(self, sector: int) -> bytes:
        return bytes(self._data[self._span(sector)])

    def write_sector(self, sector: int, data: bytes) -> None:
        chunk = _sector_data(data)
        self._data[self._span(sector)] = chunk

    def getvalue(self) -> bytes:
        """Return the whole image."""
        return bytes(self._data)


class FileDevice(BlockDevice):
    """A device backed by a disk image file."""

    def __init__(self, path: str | os.PathLike[str], writable: bool = False) -> None:
        self.writable = writable
        self._file: BinaryIO = open(path, "r+b" if writable else "rb")

    @property
    def closed(self) -> bool:
        return self._file.closed

    def _require_open(self) -> None:
        if self._file.closed:
            raise FatError("device is closed")

    def read_sector(self, sector: int) -> bytes:
        self._require_open()
        self._file.seek(_sector_offset(sector))
        data = self._file.read(SECTOR_SIZE)
        if len(data) != SECTOR_SIZE:
            raise FatError(f"sector {sector} lies beyond the end of the image")
        return data

    def write_sector(self, sector: int, data: bytes) -> None:
        self._require_open()
        if not self.writable:
            raise FatError("device is write protected")
        chunk = _sector_data(data)
        self._file.seek(_sector_offset(sector))
        self._file.write(chunk)

    def close(self) -> None:
        """Flush and close the image file."""
        self._file.close()

    def __enter__(self) -> FileDevice:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()