# Input - store the state of the 16 CHIP-8 keys (0x0-0xF) and report new presses.
# Physical-key mapping lives with the window; this class only deals in logical keys.

import logging

import numpy as np
import pyglet

from .config import KEY_COUNT

logger = logging.getLogger(__name__)


class Keyboard(pyglet.event.EventDispatcher):
    """Key-state provider.

    Dispatches ``on_key_down(key)`` when a key goes from released to pressed
    and ``on_key_up(key)`` when it is released again. Holding a key does not
    repeat ``on_key_down``.
    """

    def __init__(self):
        self.keys = np.zeros(KEY_COUNT, dtype=np.uint8)

    def is_key_pressed(self, key):
        # V registers hold a full byte; anything above 0xF is not a key
        if not 0 <= key < KEY_COUNT:
            return False
        return bool(self.keys[key])

    def key_down(self, key):
        """Mark ``key`` pressed; returns True if this was a new press."""
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"CHIP-8 key out of range: {key}")
        if self.keys[key]:
            return False
        self.keys[key] = 1
        logger.debug("Key %X down", key)
        self.dispatch_event('on_key_down', key)
        return True

    def key_up(self, key):
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"CHIP-8 key out of range: {key}")
        if not self.keys[key]:
            return False
        self.keys[key] = 0
        logger.debug("Key %X up", key)
        self.dispatch_event('on_key_up', key)
        return True

    def update(self, pressed):
        """Apply a full set of pressed keys at once.

        Releases are applied first, then new presses in ascending key order,
        so the lowest key code is reported first when several keys arrive
        in the same batch.
        """
        pressed = set(pressed)
        for key in range(KEY_COUNT):
            if key not in pressed:
                self.key_up(key)
        for key in sorted(pressed):
            self.key_down(key)

    def release_all(self):
        self.update(())


Keyboard.register_event_type('on_key_down')
Keyboard.register_event_type('on_key_up')
