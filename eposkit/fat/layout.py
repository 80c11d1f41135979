"""On-disk structures of FAT volumes: directory entries, partition entries, names."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, replace

SECTOR_SIZE = 512
"""Bytes in one sector."""

MAX_PATH = 64
"""Longest path accepted, counting the terminator."""

DIR_SEPARATOR = "/"
"""Character separating directory components."""

DIRENT_SIZE = 32
"""Bytes in one directory entry."""

ENTRIES_PER_SECTOR = SECTOR_SIZE // DIRENT_SIZE
"""Directory entries held by one sector."""

PARTITION_TABLE_OFFSET = 0x1BE
"""Offset of the partition table within the master boot record."""

PARTITION_ENTRY_SIZE = 16
"""Bytes in one partition table entry."""

MAX_PARTITIONS = 4
"""Entries in the partition table."""

BAD_CLUSTER = 0x0FFFFFF7
"""FAT32 bad-cluster value, also used to report lookup failures."""

DELETED_MARK = 0xE5
"""First name byte of a deleted directory entry."""

KANJI_MARK = 0x05
"""First name byte standing for 0xE5 in a live entry."""

DEFAULT_TIME = 0x0820
"""Time stamp given to new entries: 01:01:00."""

DEFAULT_DATE = 0x3411
"""Date stamp given to new entries: 2006-01-17 in FAT encoding."""


class FatError(Exception):
    """A FAT volume operation failed."""


class FatNotFoundError(FatError):
    """A path or file does not exist."""


class PathTooLongError(FatError):
    """A path is longer than :data:`MAX_PATH` allows."""


class FatType(enum.IntEnum):
    """FAT variant, inferred from the cluster count of a volume."""

    FAT12 = 0
    FAT16 = 1
    FAT32 = 2

    @property
    def bad_cluster(self) -> int:
        """Smallest entry value that ends a chain or marks a bad cluster."""
        return (0xFF7, 0xFFF7, 0x0FFFFFF7)[self]

    @property
    def end_marker(self) -> int:
        """Value written to mark the end of a cluster chain."""
        return (0xFF8, 0xFFF8, 0x0FFFFFF8)[self]

    @property
    def entry_mask(self) -> int:
        """Bits significant in a FAT entry."""
        return (0xFFF, 0xFFFF, 0x0FFFFFFF)[self]


class Attr(enum.IntFlag):
    """Directory entry attribute bits."""

    READ_ONLY = 0x01
    HIDDEN = 0x02
    SYSTEM = 0x04
    VOLUME_ID = 0x08
    DIRECTORY = 0x10
    ARCHIVE = 0x20
    LONG_NAME = READ_ONLY | HIDDEN | SYSTEM | VOLUME_ID


def canonical_to_dir(name: str | bytes) -> bytes:
    """Convert one 8.3 path element to its 11-byte directory form.

    Conversion stops at the end of ``name`` or at the first separator.
    Lower-case ASCII letters are upper-cased, a dot moves to the extension
    and anything past eleven bytes is dropped.
    """
    raw = name.encode("latin-1") if isinstance(name, str) else bytes(name)
    dest = bytearray(b" " * 11)
    pos = 0
    separator = ord(DIR_SEPARATOR)
    for byte in raw:
        if byte == 0 or byte == separator or pos >= 11:
            break
        if ord("a") <= byte <= ord("z"):
            dest[pos] = byte - ord("a") + ord("A")
            pos += 1
        elif byte == ord("."):
            pos = 8
        else:
            dest[pos] = byte
            pos += 1
    return bytes(dest)


_DIRENT = struct.Struct("<11sBBBHHHHHHHI")
_PARTITION = struct.Struct("<BBHBBHII")


@dataclass(frozen=True)
class DirEntry:
    """A 32-byte short-name directory entry."""

    name: bytes
    attr: int = 0
    reserved: int = 0
    crttimetenth: int = 0
    crttime: int = 0
    crtdate: int = 0
    lstaccdate: int = 0
    startclus_high: int = 0
    wrttime: int = 0
    wrtdate: int = 0
    startclus_low: int = 0
    filesize: int = 0

    def __post_init__(self) -> None:
        if len(self.name) != 11:
            raise ValueError(f"entry name must be 11 bytes, got {len(self.name)}")

    @classmethod
    def from_bytes(cls, data: bytes) -> DirEntry:
        """Decode an entry from the first 32 bytes of ``data``."""
        if len(data) < DIRENT_SIZE:
            raise ValueError(f"need {DIRENT_SIZE} bytes for an entry, got {len(data)}")
        return cls(*_DIRENT.unpack_from(bytes(data[:DIRENT_SIZE])))

    def to_bytes(self) -> bytes:
        """Encode the entry as 32 bytes."""
        return _DIRENT.pack(
            self.name,
            self.attr,
            self.reserved,
            self.crttimetenth,
            self.crttime,
            self.crtdate,
            self.lstaccdate,
            self.startclus_high,
            self.wrttime,
            self.wrtdate,
            self.startclus_low,
            self.filesize,
        )

    def start_cluster(self, fat_type: FatType) -> int:
        """First cluster of the entry; the high word counts only on FAT32."""
        if fat_type == FatType.FAT32:
            return (self.startclus_high << 16) | self.startclus_low
        return self.startclus_low

    def with_start_cluster(self, cluster: int) -> DirEntry:
        """Return a copy of the entry starting at ``cluster``."""
        return replace(
            self,
            startclus_low=cluster & 0xFFFF,
            startclus_high=(cluster >> 16) & 0xFFFF,
        )

    @property
    def is_free(self) -> bool:
        """True when the entry holds no name."""
        return self.name[0] == 0

    @property
    def is_directory(self) -> bool:
        return bool(self.attr & Attr.DIRECTORY)

    @property
    def is_long_name(self) -> bool:
        return (self.attr & Attr.LONG_NAME) == Attr.LONG_NAME

    @property
    def display_name(self) -> str:
        """The name in ``NAME.EXT`` form, without padding."""
        base = self.name[:8].rstrip(b" ").decode("latin-1")
        ext = self.name[8:].rstrip(b" ").decode("latin-1")
        return f"{base}.{ext}" if ext else base


@dataclass(frozen=True)
class PartitionEntry:
    """One 16-byte entry of the master boot record's partition table."""

    active: int
    start_head: int
    start_cs: int
    type: int
    end_head: int
    end_cs: int
    start_sector: int
    size: int

    @classmethod
    def from_bytes(cls, data: bytes) -> PartitionEntry:
        """Decode an entry from the first 16 bytes of ``data``."""
        if len(data) < PARTITION_ENTRY_SIZE:
            raise ValueError(
                f"need {PARTITION_ENTRY_SIZE} bytes for a partition entry, got {len(data)}"
            )
        return cls(*_PARTITION.unpack_from(bytes(data[:PARTITION_ENTRY_SIZE])))

    @property
    def is_active(self) -> bool:
        return self.active == 0x80