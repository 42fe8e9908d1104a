"""Faults raised by the CHIP-8 interpreter.

Every fault is fatal to the operation that raised it; the interpreter never
retries or skips past one.
"""


class Chip8Error(Exception):
    """Base class for all emulator faults."""


class OutOfBounds(Chip8Error):
    """Program image does not fit between 0x200 and the end of memory."""

    def __init__(self, size, capacity):
        super().__init__(f"Program of {size} bytes exceeds the {capacity} bytes available at 0x200")
        self.size = size
        self.capacity = capacity


class ExecutionError(Chip8Error):
    """Fault raised while executing the instruction at ``pc``."""

    reason = "Execution fault"

    def __init__(self, opcode, pc):
        super().__init__(f"{self.reason}: {opcode:04X} at 0x{pc:03X}")
        self.opcode = opcode
        self.pc = pc


class UnknownOpcode(ExecutionError):
    reason = "Unknown opcode"


class StackOverflow(ExecutionError):
    reason = "Stack overflow on CALL"


class StackUnderflow(ExecutionError):
    reason = "Stack underflow on RET"
