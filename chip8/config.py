# CHIP-8 machine layout and host configuration.
# Memory - 4096 bytes: the interpreter area and fonts live below 0x200, the ROM starts at 0x200.
# Display - 64x32 monochrome pixels, each either on or off.
#----------------------------------------------------------------------------------------------

from dataclasses import dataclass

# ---- Machine layout ----
MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START
ADDRESS_MASK = 0xFFF        # only the low 12 bits of I / PC address memory
REGISTER_COUNT = 16
STACK_DEPTH = 16
KEY_COUNT = 16

width, height = 64, 32

# Standard CHIP-8 fontset (80 bytes), glyph for digit d lives at d * 5
FONT_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5
fontset = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes


@dataclass
class EmulatorConfig:
    """Runtime knobs for one emulation session."""
    scale: int = 10         # window pixels per CHIP-8 pixel
    speed: int = 10         # instructions executed per cycle
    timer_hz: int = 60      # cycles (and timer decrements) per second
    tone_hz: int = 440
    vsync: bool = False
    show_stats: bool = True

    @property
    def window_width(self):
        return width * self.scale

    @property
    def window_height(self):
        return height * self.scale
