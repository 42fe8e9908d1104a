"""CHIP-8 interpreter with a pyglet host."""

from .config import EmulatorConfig
from .cpu import Instruction, Interpreter, OPCODE_TABLE, decode
from .display import Display
from .errors import (
    Chip8Error, ExecutionError, OutOfBounds, StackOverflow, StackUnderflow, UnknownOpcode,
)
from .keyboard import Keyboard
from .speaker import Speaker

__all__ = [
    "Chip8Error",
    "Display",
    "EmulatorConfig",
    "ExecutionError",
    "Instruction",
    "Interpreter",
    "Keyboard",
    "OPCODE_TABLE",
    "OutOfBounds",
    "Speaker",
    "StackOverflow",
    "StackUnderflow",
    "UnknownOpcode",
    "decode",
]
