import pytest

from eposkit.keyboard import KEY_UP, Keyboard


def test_plain_letter():
    kbd = Keyboard()
    assert kbd.translate(0x1E) == 0x1E61


def test_shift_held_and_released():
    kbd = Keyboard()
    assert kbd.update_state(0x2A) is True
    assert kbd.translate(0x1E) == 0x1E41
    assert kbd.update_state(0xAA) is True
    assert kbd.translate(0x1E) == 0x1E61


def test_right_shift():
    kbd = Keyboard()
    kbd.update_state(0x36)
    assert kbd.state.rshift
    assert kbd.translate(0x02) == 0x0221


def test_caps_lock_and_shift():
    kbd = Keyboard()
    kbd.update_state(0x3A)
    assert kbd.state.caps
    assert kbd.translate(0x1E) == 0x1E41
    kbd.update_state(0x2A)
    assert kbd.translate(0x1E) == 0x1E61
    kbd.update_state(0x3A)
    assert not kbd.state.caps


def test_lock_release_is_consumed_without_toggling():
    kbd = Keyboard()
    kbd.update_state(0x3A)
    assert kbd.update_state(0xBA) is True
    assert kbd.state.caps


def test_ctrl_and_alt():
    kbd = Keyboard()
    kbd.update_state(0x1D)
    assert kbd.translate(0x1E) == 0x1E01
    kbd.update_state(0x38)
    assert kbd.translate(0x1E) == 0x1E00
    kbd.update_state(0xB8)
    kbd.update_state(0x9D)
    assert kbd.translate(0x1E) == 0x1E61


def test_num_lock_on_keypad():
    kbd = Keyboard()
    assert kbd.translate(0x47) == 0x4700
    kbd.update_state(0x45)
    assert kbd.translate(0x47) == 0x4737
    kbd.update_state(0x2A)
    assert kbd.translate(0x47) == 0x4700


def test_caps_does_not_affect_keypad():
    kbd = Keyboard()
    kbd.update_state(0x3A)
    assert kbd.translate(0x48) == 0x4800


def test_release_code_sets_key_up_bit():
    kbd = Keyboard()
    assert kbd.translate(0x9E) == 0x1E61 | KEY_UP


@pytest.mark.parametrize("scan", [0xE0, 0xE1, 0x59, 0x7F])
def test_ignored_codes(scan):
    assert Keyboard().translate(scan) == 0


def test_non_modifier_not_consumed():
    kbd = Keyboard()
    assert kbd.update_state(0x1E) is False


def test_feed_returns_keys_and_swallows_modifiers():
    kbd = Keyboard()
    assert kbd.feed(0x2A) is None
    assert kbd.feed(0xE0) is None
    assert kbd.feed(0x1E) == 0x1E41
    assert kbd.last_key == 0x1E41
    assert kbd.feed(0x52) is None
    assert kbd.state.ins


def test_feed_unmapped_leaves_last_key():
    kbd = Keyboard()
    kbd.feed(0x1E)
    assert kbd.feed(0x54) is None
    assert kbd.last_key == 0x1E61