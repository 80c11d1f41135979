"""FAT structures, sector devices, bitmaps, allocators and a keyboard decoder."""

__version__ = "0.1.0"