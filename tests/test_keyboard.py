"""Tests for the 16-key input device."""

import pytest

from chip8.keyboard import Keyboard


class KeyRecorder:

    def __init__(self):
        self.events = []

    def on_key_down(self, key):
        self.events.append(("down", key))

    def on_key_up(self, key):
        self.events.append(("up", key))


@pytest.fixture
def keyboard():
    return Keyboard()


@pytest.fixture
def recorder(keyboard):
    rec = KeyRecorder()
    keyboard.push_handlers(rec)
    return rec


def test_key_state(keyboard):
    assert not keyboard.is_key_pressed(0xA)
    keyboard.key_down(0xA)
    assert keyboard.is_key_pressed(0xA)
    keyboard.key_up(0xA)
    assert not keyboard.is_key_pressed(0xA)


def test_down_dispatched_once_per_press(keyboard, recorder):
    assert keyboard.key_down(3) is True
    assert keyboard.key_down(3) is False
    assert keyboard.key_up(3) is True
    assert keyboard.key_up(3) is False
    assert recorder.events == [("down", 3), ("up", 3)]


@pytest.mark.parametrize("key", [-1, 16, 0x20])
def test_out_of_range_keys_rejected(keyboard, key):
    with pytest.raises(ValueError):
        keyboard.key_down(key)
    with pytest.raises(ValueError):
        keyboard.key_up(key)


def test_update_releases_then_presses_in_key_order(keyboard, recorder):
    keyboard.key_down(5)
    recorder.events.clear()

    keyboard.update([0xF, 1, 8])
    assert recorder.events == [("up", 5), ("down", 1), ("down", 8), ("down", 0xF)]


def test_update_keeps_held_keys_quiet(keyboard, recorder):
    keyboard.update({2, 4})
    recorder.events.clear()
    keyboard.update({2, 4, 6})
    assert recorder.events == [("down", 6)]


def test_release_all(keyboard):
    keyboard.update(range(16))
    keyboard.release_all()
    assert not any(keyboard.is_key_pressed(k) for k in range(16))


@pytest.mark.parametrize("value", [0x10, 0x1F, 0xFF])
def test_values_above_keypad_read_as_released(keyboard, value):
    keyboard.update(range(16))
    assert not keyboard.is_key_pressed(value)
