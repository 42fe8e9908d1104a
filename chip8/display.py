# Output - 64x32 display (array of pixels, each either on or off).
# Pixels are toggled with XOR; toggling a lit pixel off reports an erase so the
# interpreter can raise VF on sprite collision.

import logging

import numpy as np

from .config import width, height

logger = logging.getLogger(__name__)


class Display:

    def __init__(self, cols=width, rows=height):
        self.cols = cols
        self.rows = rows
        self.framebuffer = np.zeros((rows, cols), dtype=np.uint8)
        self.should_draw = True
        self.frame_count = 0

        # Pre-allocated small RGBA framebuffer, upscaled with numpy.repeat when presented
        self._small_framebuf = np.zeros((rows, cols, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255

    def clear(self):
        self.framebuffer.fill(0)
        self.should_draw = True
        logger.debug("Clear the display (all pixels turned off)")

    def set_pixel(self, x, y):
        """Toggle the pixel at (x, y), wrapping coordinates, and return True if it was erased."""
        x %= self.cols
        y %= self.rows
        self.framebuffer[y, x] ^= 1
        self.should_draw = True
        return not self.framebuffer[y, x]

    def get_pixel(self, x, y):
        return bool(self.framebuffer[y % self.rows, x % self.cols])

    def render(self):
        # The host consumes the framebuffer on its next draw
        self.should_draw = True
        self.frame_count += 1

    def lit_pixels(self):
        return int(np.count_nonzero(self.framebuffer))

    def to_rgba(self, scale=1, flip_vertical=False, color=(255, 255, 255)):
        """Return the framebuffer as an upscaled (rows*scale, cols*scale, 4) uint8 image."""
        frame = np.flipud(self.framebuffer) if flip_vertical else self.framebuffer
        lit = frame.astype(bool)
        self._small_framebuf[..., :3] = 0
        self._small_framebuf[lit, :3] = color

        if scale != 1:
            return np.repeat(np.repeat(self._small_framebuf, scale, axis=0), scale, axis=1)
        return self._small_framebuf.copy()
