"""Shared pytest fixtures for the CHIP-8 interpreter tests."""

import random

import pytest

from chip8.cpu import Interpreter
from chip8.display import Display
from chip8.keyboard import Keyboard


class RecordingSpeaker:
    """Audio device stand-in that records every call instead of making noise."""

    def __init__(self):
        self.calls = []
        self.playing = False

    def play(self, frequency):
        self.calls.append(("play", frequency))
        self.playing = True

    def stop(self):
        self.calls.append(("stop",))
        self.playing = False


@pytest.fixture
def speaker():
    return RecordingSpeaker()


@pytest.fixture
def make_interpreter(speaker):
    """Build an interpreter on a real display/keyboard and load ``program`` at 0x200."""

    def _make(program=b"", speed=10, seed=1234):
        interp = Interpreter(Display(), Keyboard(), speaker, speed=speed, rng=random.Random(seed))
        interp.load_program(bytes(program))
        return interp

    return _make


@pytest.fixture
def interp(make_interpreter):
    return make_interpreter()
