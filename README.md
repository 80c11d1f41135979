# eposkit

Pure-Python building blocks for the pieces of a small teaching kernel:

- **FAT on-disk structures** (`eposkit.fat.layout`): directory entries,
  partition table entries, 8.3 name conversion, FAT variants and attribute bits.
- **Sector devices** (`eposkit.fat.device`): disk images in memory or on file,
  read and written one 512-byte sector at a time.
- **Bitmaps and allocators**: `Bitmap`, a physical frame allocator
  (`FrameAllocator`) and a virtual address space manager (`AddressSpace`).
- **Keyboard**: a PC scan-code translator (`Keyboard`) that tracks shift,
  ctrl, alt and the lock keys.

Nothing here touches real hardware. There are no runtime dependencies;
Python 3.10 or later is required.

## Install

```
pip install .
```

## Bitmaps

```python
from eposkit.bitmap import Bitmap, buf_size

bits = Bitmap(64)
first = bits.scan_and_flip(0, 4, False)   # claim four consecutive free bits -> 0
bits.test(2)                              # True
bits.count(0, 64, True)                   # 4
data = bits.to_bytes()                    # little-endian 32-bit elements
assert Bitmap.from_bytes(64, data) == bits
```

`scan` and `scan_and_flip` return `None` when no run is found. Out-of-range
indices raise `IndexError`. `buf_size(n)` gives the bytes a bitmap of `n` bits
occupies in a buffer (an 8-byte header plus the bit storage).

## Frame allocator

```python
from eposkit.frame import FrameAllocator, FrameAllocationError

frames = FrameAllocator([(0x100000, 0x200000)], page_size=4096)
paddr = frames.alloc(1)
frames.free(paddr, 1)
```

Each zone gives up its first pages to hold its own bitmap; `frames.zones`
lists the usable `FrameZone`s and `reserved_bytes` the space given up.
`alloc_in_addr(pa, n)` claims frames at a fixed address, and `free_frames()`
counts what is left. A failed allocation raises `FrameAllocationError`.

## Address spaces

```python
from eposkit.vmspace import AddressSpace, Protection

space = AddressSpace(user_min=0x1000, user_max=0xC0000000,
                     kern_max=0xFFC00000, brk=0xC0400000, page_size=4096)
va = space.alloc(2, Protection.READ | Protection.WRITE, user=True)   # 0x1000
space.prot(va)          # Protection.READ|WRITE
space.free(va, 2)
```

User and kernel zones are kept in separate sorted lists (`zones(user)`).
`alloc_in_addr` places pages at an exact address; overlapping, misaligned or
out-of-bounds requests, and frees that match no zone, raise
`AddressSpaceError`. `prot` returns `None` for an unmapped address.

## FAT structures and devices

```python
from eposkit.fat.device import FileDevice
from eposkit.fat.layout import (PARTITION_TABLE_OFFSET, PARTITION_ENTRY_SIZE,
                                 PartitionEntry, DirEntry, canonical_to_dir)

with FileDevice("hd.img") as device:
    mbr = device.read_sector(0)
    for n in range(4):
        offset = PARTITION_TABLE_OFFSET + n * PARTITION_ENTRY_SIZE
        entry = PartitionEntry.from_bytes(mbr[offset:])
        print(n, entry.is_active, hex(entry.type), entry.start_sector, entry.size)

canonical_to_dir("readme.txt")              # b"README  TXT"
entry = DirEntry(canonical_to_dir("a.bin")).with_start_cluster(5)
entry.display_name                          # "A.BIN"
DirEntry.from_bytes(entry.to_bytes()) == entry
```

`MemoryDevice` holds an image in a bytearray (pass bytes, or a byte count for
a zero-filled image) and `getvalue()` returns it. `FileDevice` opens an image
read-only unless `writable=True`; writing to a read-only device, reading past
the end, or using a closed device raises `FatError`. `FatType` gives each
variant's end-of-chain marker, bad-cluster value and entry mask, and `Attr`
holds the directory attribute bits.

## Keyboard

```python
from eposkit.keyboard import Keyboard

kbd = Keyboard()
kbd.feed(0x1E)    # 0x1E61, 'a'
kbd.feed(0x2A)    # None: left shift pressed
kbd.feed(0x1E)    # 0x1E41, 'A'
kbd.feed(0x9E)    # 0x9E41, release of 'A' with KEY_UP set
```

The high byte of a key is the scan code and the low byte its ASCII value.
Modifier and lock codes update `kbd.state` and produce no key; the extended
prefixes 0xE0 and 0xE1 are dropped.

## What this package does not do

The FAT support stops at on-disk structures and sector devices: there is no
volume mounting, FAT chain walking, directory listing or file reading and
writing. There is no ELF loader and no date-to-timestamp conversion, and
there is no command-line tool.

## Running the tests

```
pip install .[test]
pytest
```