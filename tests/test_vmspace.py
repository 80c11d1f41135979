import pytest

from eposkit.vmspace import AddressSpace, AddressSpaceError, Protection, VmZone

PAGE = 4096
USER_MIN = 0x00100000
USER_MAX = 0x40000000
KERN_MAX = 0x80000000
BRK = USER_MAX + 16 * PAGE
RW = Protection.READ | Protection.WRITE


@pytest.fixture
def space():
    return AddressSpace(USER_MIN, USER_MAX, KERN_MAX, BRK, PAGE)


def test_initial_zones(space):
    assert space.zones(user=False) == (VmZone(USER_MAX, BRK - USER_MAX, Protection.ALL),)
    assert space.zones(user=True) == ()


def test_user_alloc_is_sequential(space):
    assert space.alloc(2, RW, True) == USER_MIN
    assert space.alloc(1, RW, True) == USER_MIN + 2 * PAGE


def test_kernel_alloc_starts_at_brk(space):
    assert space.alloc(3, Protection.ALL, False) == BRK
    assert space.alloc(1, Protection.ALL, False) == BRK + 3 * PAGE


def test_prot_lookup(space):
    va = space.alloc(2, RW, True)
    assert space.prot(va) == RW
    assert space.prot(va + 2 * PAGE - 1) == RW
    assert space.prot(va + 2 * PAGE) is None
    assert space.prot(USER_MAX) == Protection.ALL
    assert space.prot(BRK) is None


def test_alloc_begins_after_first_zone(space):
    fixed = USER_MIN + 10 * PAGE
    assert space.alloc_in_addr(fixed, 2, Protection.READ) == fixed
    assert space.alloc(1, RW, True) == fixed + 2 * PAGE


def test_alloc_fills_gap(space):
    space.alloc(1, RW, True)
    middle = space.alloc(1, RW, True)
    space.alloc(1, RW, True)
    space.free(middle, 1)
    assert space.alloc(1, RW, True) == middle


def test_kernel_alloc_fills_gap_before_fixed_zone(space):
    space.alloc_in_addr(BRK + 4 * PAGE, 1, Protection.READ)
    assert len(space.zones(user=False)) == 2
    assert space.alloc(1, Protection.ALL, False) == BRK


@pytest.mark.parametrize("offset, npages", [(0, 1), (PAGE, 1), (-PAGE, 2)])
def test_alloc_in_addr_overlap(space, offset, npages):
    base = USER_MIN + 8 * PAGE
    space.alloc_in_addr(base, 2, RW)
    with pytest.raises(AddressSpaceError):
        space.alloc_in_addr(base + offset, npages, RW)


@pytest.mark.parametrize(
    "va, npages",
    [
        (USER_MIN + 1, 1),
        (USER_MIN, 0),
        (USER_MIN - PAGE, 1),
        (USER_MAX - PAGE, 2),
        (KERN_MAX - PAGE, 2),
        (KERN_MAX, 1),
        (USER_MAX, 1),
    ],
)
def test_alloc_in_addr_rejects(space, va, npages):
    with pytest.raises(AddressSpaceError):
        space.alloc_in_addr(va, npages, RW)


def test_alloc_rejects_zero_pages(space):
    with pytest.raises(AddressSpaceError):
        space.alloc(0, RW, True)


def test_zones_stay_sorted(space):
    for n in (20, 5, 12, 1):
        space.alloc_in_addr(USER_MIN + n * PAGE, 1, RW)
    bases = [zone.base for zone in space.zones(user=True)]
    assert bases == sorted(bases)
    assert len(bases) == 4


def test_free_removes_zone(space):
    va = space.alloc(2, RW, True)
    space.free(va, 2)
    assert space.prot(va) is None
    assert space.zones(user=True) == ()


@pytest.mark.parametrize(
    "va, npages",
    [(USER_MIN, 1), (USER_MIN + PAGE, 2), (USER_MAX, 16), (USER_MIN, 0)],
)
def test_free_rejects(space, va, npages):
    space.alloc(2, RW, True)
    with pytest.raises(AddressSpaceError):
        space.free(va, npages)
    assert len(space.zones(user=True)) == 1


def test_user_space_exhausted():
    small = AddressSpace(USER_MIN, USER_MIN + 4 * PAGE, KERN_MAX, USER_MIN + 4 * PAGE, PAGE)
    assert small.alloc(4, RW, True) == USER_MIN
    with pytest.raises(AddressSpaceError):
        small.alloc(1, RW, True)


def test_bad_page_size():
    with pytest.raises(ValueError):
        AddressSpace(USER_MIN, USER_MAX, KERN_MAX, BRK, 3000)