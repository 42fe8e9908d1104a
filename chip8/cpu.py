# CHIP8 Virtual Machine Steps:
# Input - read key states from the keyboard and resume on key presses.
# Output - pixel toggles and render requests to the display, tone on/off to the speaker.
# CPU - Cowgod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - 4096 bytes which includes: the interpreter area, fonts, and the loaded ROM.
#----------------------------------------------------------------------------------------------
# Registers are 16 bytes, plus the I register and the program counter. The delay and sound
# timers are decremented once per cycle. The stack is a plain list of return addresses,
# limited to 16 entries.

import logging
import random
from collections import namedtuple
from functools import lru_cache

from .config import (
    ADDRESS_MASK, FONT_ADDRESS, MAX_PROGRAM_SIZE, MEMORY_SIZE, PROGRAM_START,
    REGISTER_COUNT, STACK_DEPTH, fontset,
)
from .errors import ExecutionError, OutOfBounds, StackOverflow, StackUnderflow, UnknownOpcode

logger = logging.getLogger(__name__)


class Instruction(namedtuple('Instruction', 'name opcode x y kk nnn n')):
    """A decoded opcode with all of its operand fields extracted."""

    __slots__ = ()

    def mnemonic(self):
        return MNEMONICS[self.name].format(x=self.x, y=self.y, kk=self.kk, nnn=self.nnn, n=self.n)


# (mask, pattern, name): first matching row wins, so 00E0/00EE sit above 0nnn
OPCODE_TABLE = [
    (0xFFFF, 0x00E0, 'CLS'),        # 00E0 - Clear the screen
    (0xFFFF, 0x00EE, 'RET'),        # 00EE - Return from subroutine
    (0xF000, 0x0000, 'SYS'),        # 0nnn - Machine code call, ignored on modern interpreters

    (0xF000, 0x1000, 'JP'),         # 1nnn - Jump to address
    (0xF000, 0x2000, 'CALL'),       # 2nnn - Call subroutine
    (0xF000, 0x3000, 'SE_Vx_kk'),   # 3xkk - Skip if Vx == kk
    (0xF000, 0x4000, 'SNE_Vx_kk'),  # 4xkk - Skip if Vx != kk
    (0xF00F, 0x5000, 'SE_Vx_Vy'),   # 5xy0 - Skip if Vx == Vy
    (0xF000, 0x6000, 'LD_Vx_kk'),   # 6xkk - Vx = kk
    (0xF000, 0x7000, 'ADD_Vx_kk'),  # 7xkk - Vx += kk, no carry

    (0xF00F, 0x8000, 'LD_Vx_Vy'),   # 8xy0..8xyE - Math and logic between two registers
    (0xF00F, 0x8001, 'OR'),
    (0xF00F, 0x8002, 'AND'),
    (0xF00F, 0x8003, 'XOR'),
    (0xF00F, 0x8004, 'ADD'),
    (0xF00F, 0x8005, 'SUB'),
    (0xF00F, 0x8006, 'SHR'),
    (0xF00F, 0x8007, 'SUBN'),
    (0xF00F, 0x800E, 'SHL'),

    (0xF00F, 0x9000, 'SNE_Vx_Vy'),  # 9xy0 - Skip if Vx != Vy
    (0xF000, 0xA000, 'LD_I'),       # Annn - I = nnn
    (0xF000, 0xB000, 'JP_V0'),      # Bnnn - Jump to nnn + V0
    (0xF000, 0xC000, 'RND'),        # Cxkk - Vx = random byte & kk
    (0xF000, 0xD000, 'DRW'),        # Dxyn - Draw sprite

    (0xF0FF, 0xE09E, 'SKP'),        # Ex9E - Skip if key Vx pressed
    (0xF0FF, 0xE0A1, 'SKNP'),       # ExA1 - Skip if key Vx not pressed

    (0xF0FF, 0xF007, 'LD_Vx_DT'),   # Fx07..Fx65 - timers, memory, I, and key input
    (0xF0FF, 0xF00A, 'WAITKEY'),
    (0xF0FF, 0xF015, 'LD_DT_Vx'),
    (0xF0FF, 0xF018, 'LD_ST_Vx'),
    (0xF0FF, 0xF01E, 'ADD_I_Vx'),
    (0xF0FF, 0xF029, 'FONT'),
    (0xF0FF, 0xF033, 'BCD'),
    (0xF0FF, 0xF055, 'STORE'),
    (0xF0FF, 0xF065, 'LOAD'),
]

MNEMONICS = {
    'CLS': "CLS",
    'RET': "RET",
    'SYS': "SYS 0x{nnn:03X}",
    'JP': "JP 0x{nnn:03X}",
    'CALL': "CALL 0x{nnn:03X}",
    'SE_Vx_kk': "SE V{x:X}, 0x{kk:02X}",
    'SNE_Vx_kk': "SNE V{x:X}, 0x{kk:02X}",
    'SE_Vx_Vy': "SE V{x:X}, V{y:X}",
    'LD_Vx_kk': "LD V{x:X}, 0x{kk:02X}",
    'ADD_Vx_kk': "ADD V{x:X}, 0x{kk:02X}",
    'LD_Vx_Vy': "LD V{x:X}, V{y:X}",
    'OR': "OR V{x:X}, V{y:X}",
    'AND': "AND V{x:X}, V{y:X}",
    'XOR': "XOR V{x:X}, V{y:X}",
    'ADD': "ADD V{x:X}, V{y:X}",
    'SUB': "SUB V{x:X}, V{y:X}",
    'SHR': "SHR V{x:X}",
    'SUBN': "SUBN V{x:X}, V{y:X}",
    'SHL': "SHL V{x:X}",
    'SNE_Vx_Vy': "SNE V{x:X}, V{y:X}",
    'LD_I': "LD I, 0x{nnn:03X}",
    'JP_V0': "JP V0, 0x{nnn:03X}",
    'RND': "RND V{x:X}, 0x{kk:02X}",
    'DRW': "DRW V{x:X}, V{y:X}, {n}",
    'SKP': "SKP V{x:X}",
    'SKNP': "SKNP V{x:X}",
    'LD_Vx_DT': "LD V{x:X}, DT",
    'WAITKEY': "LD V{x:X}, K",
    'LD_DT_Vx': "LD DT, V{x:X}",
    'LD_ST_Vx': "LD ST, V{x:X}",
    'ADD_I_Vx': "ADD I, V{x:X}",
    'FONT': "LD F, V{x:X}",
    'BCD': "LD B, V{x:X}",
    'STORE': "LD [I], V{x:X}",
    'LOAD': "LD V{x:X}, [I]",
}


@lru_cache(maxsize=None)
def decode(opcode):
    """Decode a 16-bit opcode, or return None if it is not a CHIP-8 instruction."""
    for mask, pattern, name in OPCODE_TABLE:
        if (opcode & mask) == pattern:
            return Instruction(
                name,
                opcode,
                (opcode & 0x0F00) >> 8,
                (opcode & 0x00F0) >> 4,
                opcode & 0x00FF,
                opcode & 0x0FFF,
                opcode & 0x000F,
            )
    return None


class Interpreter:
    """The CHIP-8 CPU: memory, registers, stack and timers.

    The display, keyboard and speaker are injected; the interpreter only calls
    their contracted operations. ``cycle()`` is meant to be called once per
    host frame (nominally 60 Hz).
    """

    def __init__(self, display, keyboard, speaker, speed=10, tone_hz=440, rng=None):
        self.display = display
        self.keyboard = keyboard
        self.speaker = speaker
        self.speed = speed          # instructions per cycle
        self.tone_hz = tone_hz
        self.rng = rng or random.Random()

        # ---- CPU state ----
        self.memory = bytearray(MEMORY_SIZE)
        self.V = bytearray(REGISTER_COUNT)
        self.I = 0
        self.pc = PROGRAM_START
        self.stack = []
        self.delay_timer = 0
        self.sound_timer = 0

        # Fx0A parks the target register here until a key arrives
        self.paused = False
        self.waiting_register = None
        self.halted = False

        self.cycle_count = 0
        self.instruction_count = 0

        self._handlers = {name: getattr(self, 'op_' + name) for _, _, name in OPCODE_TABLE}

        self.load_sprites_into_memory()
        self.keyboard.push_handlers(self)

    # ---- Loading ----
    def load_sprites_into_memory(self):
        self.memory[FONT_ADDRESS:FONT_ADDRESS + len(fontset)] = bytes(fontset)

    def load_program(self, program):
        """Copy a program image into memory at 0x200, replacing any earlier program."""
        program = bytes(program)
        if len(program) > MAX_PROGRAM_SIZE:
            raise OutOfBounds(len(program), MAX_PROGRAM_SIZE)
        self.memory[PROGRAM_START:] = bytes(MAX_PROGRAM_SIZE)
        self.memory[PROGRAM_START:PROGRAM_START + len(program)] = program
        logger.info("Loaded %d byte program at 0x%03X", len(program), PROGRAM_START)

    def load_rom(self, path):
        logger.info("Loading ROM: %s", path)
        with open(path, "rb") as f:
            data = f.read()
        self.load_program(data)

    # ---- Cycle ----
    def cycle(self):
        """Run up to ``speed`` instructions, then settle timers, audio and display."""
        self.cycle_count += 1

        try:
            if not self.halted:
                for _ in range(self.speed):
                    if self.paused:
                        break
                    self.step()

                if not self.paused:
                    self.update_timers()
        finally:
            # audio and display are settled even on the frame that faulted
            self.play_sound()
            self.display.render()

    def update_timers(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def play_sound(self):
        if self.sound_timer > 0 and not self.halted:
            self.speaker.play(self.tone_hz)
        else:
            self.speaker.stop()

    def fetch(self):
        return (self.memory[self.pc & ADDRESS_MASK] << 8) | self.memory[(self.pc + 1) & ADDRESS_MASK]

    def step(self):
        """Fetch, decode and execute a single instruction."""
        opcode = self.fetch()
        try:
            self.execute(opcode)
        except ExecutionError as e:
            self.halted = True
            logger.error("Emulation halted: %s", e)
            raise
        self.instruction_count += 1

    def execute(self, opcode):
        pc = self.pc
        # Increment the PC now that the current instruction has been read
        self.pc = (self.pc + 2) & ADDRESS_MASK

        ins = decode(opcode)
        if ins is None:
            raise UnknownOpcode(opcode, pc)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%03X: %s", pc, ins.mnemonic())
        self._handlers[ins.name](ins)

    # ---- Input ----
    def on_key_down(self, key):
        # Fx0A continuation: the first new key press fills the register and resumes
        if self.waiting_register is None:
            return
        self.V[self.waiting_register] = key
        logger.info("Key %X pressed, resuming with V%X = %X", key, self.waiting_register, key)
        self.waiting_register = None
        self.paused = False

    def _skip(self):
        self.pc = (self.pc + 2) & ADDRESS_MASK

    # ---- Opcode Handlers ----
    def op_SYS(self, ins):
        pass

    def op_CLS(self, ins):
        self.display.clear()

    def op_RET(self, ins):
        if not self.stack:
            raise StackUnderflow(ins.opcode, (self.pc - 2) & ADDRESS_MASK)
        self.pc = self.stack.pop()

    def op_JP(self, ins):
        self.pc = ins.nnn

    def op_CALL(self, ins):
        if len(self.stack) >= STACK_DEPTH:
            raise StackOverflow(ins.opcode, (self.pc - 2) & ADDRESS_MASK)
        self.stack.append(self.pc)
        self.pc = ins.nnn

    def op_SE_Vx_kk(self, ins):
        if self.V[ins.x] == ins.kk:
            self._skip()

    def op_SNE_Vx_kk(self, ins):
        if self.V[ins.x] != ins.kk:
            self._skip()

    def op_SE_Vx_Vy(self, ins):
        if self.V[ins.x] == self.V[ins.y]:
            self._skip()

    def op_LD_Vx_kk(self, ins):
        self.V[ins.x] = ins.kk

    def op_ADD_Vx_kk(self, ins):
        self.V[ins.x] = (self.V[ins.x] + ins.kk) & 0xFF

    def op_LD_Vx_Vy(self, ins):
        self.V[ins.x] = self.V[ins.y]

    def op_OR(self, ins):
        self.V[ins.x] |= self.V[ins.y]

    def op_AND(self, ins):
        self.V[ins.x] &= self.V[ins.y]

    def op_XOR(self, ins):
        self.V[ins.x] ^= self.V[ins.y]

    def op_ADD(self, ins):
        total = self.V[ins.x] + self.V[ins.y]
        self.V[0xF] = 1 if total > 0xFF else 0
        self.V[ins.x] = total & 0xFF

    def op_SUB(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[0xF] = 1 if vx > vy else 0
        self.V[ins.x] = (vx - vy) & 0xFF

    def op_SHR(self, ins):
        vx = self.V[ins.x]
        self.V[0xF] = vx & 0x1
        self.V[ins.x] = vx >> 1

    def op_SUBN(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[0xF] = 1 if vy > vx else 0
        self.V[ins.x] = (vy - vx) & 0xFF

    def op_SHL(self, ins):
        vx = self.V[ins.x]
        self.V[0xF] = 1 if vx & 0x80 else 0
        self.V[ins.x] = (vx << 1) & 0xFF

    def op_SNE_Vx_Vy(self, ins):
        if self.V[ins.x] != self.V[ins.y]:
            self._skip()

    def op_LD_I(self, ins):
        self.I = ins.nnn

    def op_JP_V0(self, ins):
        self.pc = (ins.nnn + self.V[0]) & ADDRESS_MASK

    def op_RND(self, ins):
        self.V[ins.x] = self.rng.getrandbits(8) & ins.kk

    def op_DRW(self, ins):
        px = self.V[ins.x]
        py = self.V[ins.y]
        erased = False
        for row in range(ins.n):
            sprite = self.memory[(self.I + row) & ADDRESS_MASK]
            for bit in range(8):
                if sprite & (0x80 >> bit):
                    if self.display.set_pixel(px + bit, py + row):
                        erased = True
        self.V[0xF] = 1 if erased else 0

    def op_SKP(self, ins):
        if self.keyboard.is_key_pressed(self.V[ins.x]):
            self._skip()

    def op_SKNP(self, ins):
        if not self.keyboard.is_key_pressed(self.V[ins.x]):
            self._skip()

    def op_LD_Vx_DT(self, ins):
        self.V[ins.x] = self.delay_timer

    def op_WAITKEY(self, ins):
        # Keys already held do not count; only the next new press resumes execution
        self.paused = True
        self.waiting_register = ins.x
        logger.info("Waiting for key press into V%X", ins.x)

    def op_LD_DT_Vx(self, ins):
        self.delay_timer = self.V[ins.x]

    def op_LD_ST_Vx(self, ins):
        self.sound_timer = self.V[ins.x]

    def op_ADD_I_Vx(self, ins):
        self.I = (self.I + self.V[ins.x]) & 0xFFFF

    def op_FONT(self, ins):
        self.I = FONT_ADDRESS + self.V[ins.x] * 5

    def op_BCD(self, ins):
        v = self.V[ins.x]
        self.memory[self.I & ADDRESS_MASK] = v // 100
        self.memory[(self.I + 1) & ADDRESS_MASK] = (v // 10) % 10
        self.memory[(self.I + 2) & ADDRESS_MASK] = v % 10

    def op_STORE(self, ins):
        for i in range(ins.x + 1):
            self.memory[(self.I + i) & ADDRESS_MASK] = self.V[i]

    def op_LOAD(self, ins):
        for i in range(ins.x + 1):
            self.V[i] = self.memory[(self.I + i) & ADDRESS_MASK]
