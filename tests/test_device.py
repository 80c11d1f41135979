import pytest

from eposkit.fat.device import BlockDevice, FileDevice, MemoryDevice
from eposkit.fat.layout import SECTOR_SIZE, FatError


def test_block_device_is_abstract():
    with pytest.raises(TypeError):
        BlockDevice()


def test_memory_device_round_trip():
    device = MemoryDevice(bytes(SECTOR_SIZE * 2))
    payload = bytes(range(256)) * 2
    device.write_sector(1, payload)
    assert device.read_sector(1) == payload
    assert device.read_sector(0) == bytes(SECTOR_SIZE)


def test_memory_device_getvalue_reflects_writes():
    device = MemoryDevice(bytes(SECTOR_SIZE * 2))
    payload = b"\xaa" * SECTOR_SIZE
    device.write_sector(1, payload)
    image = device.getvalue()
    assert len(image) == SECTOR_SIZE * 2
    assert image[SECTOR_SIZE:] == payload
    assert image[:SECTOR_SIZE] == bytes(SECTOR_SIZE)


def test_memory_device_from_size_is_zeroed():
    device = MemoryDevice(SECTOR_SIZE * 3)
    assert device.getvalue() == bytes(SECTOR_SIZE * 3)


def test_memory_device_out_of_range():
    device = MemoryDevice(bytes(SECTOR_SIZE))
    with pytest.raises(FatError):
        device.read_sector(1)
    with pytest.raises(FatError):
        device.read_sector(-1)
    with pytest.raises(FatError):
        device.write_sector(1, bytes(SECTOR_SIZE))


def test_memory_device_rejects_wrong_size():
    device = MemoryDevice(bytes(SECTOR_SIZE))
    with pytest.raises(ValueError):
        device.write_sector(0, b"short")
    assert device.getvalue() == bytes(SECTOR_SIZE)


def test_memory_device_partial_trailing_sector():
    device = MemoryDevice(bytes(SECTOR_SIZE + 10))
    with pytest.raises(FatError):
        device.read_sector(1)


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "disk.img"
    path.write_bytes(b"\x11" * SECTOR_SIZE + b"\x22" * SECTOR_SIZE)
    return path


def test_file_device_reads_sectors(image):
    with FileDevice(image) as device:
        assert device.read_sector(0) == b"\x11" * SECTOR_SIZE
        assert device.read_sector(1) == b"\x22" * SECTOR_SIZE
        with pytest.raises(FatError):
            device.read_sector(2)


def test_file_device_writes_when_writable(image):
    payload = b"\x33" * SECTOR_SIZE
    with FileDevice(image, writable=True) as device:
        device.write_sector(1, payload)
        assert device.read_sector(1) == payload
    assert image.read_bytes()[SECTOR_SIZE:] == payload
    assert image.read_bytes()[:SECTOR_SIZE] == b"\x11" * SECTOR_SIZE


def test_file_device_read_only_rejects_writes(image):
    with FileDevice(image) as device:
        with pytest.raises(FatError):
            device.write_sector(0, bytes(SECTOR_SIZE))
    assert image.read_bytes()[:SECTOR_SIZE] == b"\x11" * SECTOR_SIZE


def test_file_device_closes_on_exit(image):
    with FileDevice(image) as device:
        assert device.closed is False
    assert device.closed is True
    with pytest.raises(FatError):
        device.read_sector(0)