"""Tests for argument parsing and ROM bootstrap (no window is opened)."""

import pytest

from chip8.cli import build_parser, config_from_args, create_interpreter, main
from chip8.config import EmulatorConfig


def test_defaults():
    args = build_parser().parse_args(["game.ch8"])
    config = config_from_args(args)
    assert args.rom == "game.ch8"
    assert config == EmulatorConfig()
    assert config.window_width == 640
    assert config.window_height == 320


def test_options_map_onto_config():
    args = build_parser().parse_args(
        ["game.ch8", "--scale", "4", "--speed", "20", "--hz", "30", "--tone", "880", "--vsync", "--no-stats"])
    config = config_from_args(args)
    assert config == EmulatorConfig(scale=4, speed=20, timer_hz=30, tone_hz=880, vsync=True, show_stats=False)


def test_non_positive_values_rejected():
    args = build_parser().parse_args(["game.ch8", "--speed", "0"])
    with pytest.raises(ValueError):
        config_from_args(args)


def test_main_rejects_bad_option():
    with pytest.raises(SystemExit) as excinfo:
        main(["game.ch8", "--scale", "-1"])
    assert excinfo.value.code == 2


def test_create_interpreter_uses_config(tmp_path):
    rom = tmp_path / "maze.ch8"
    rom.write_bytes(b"\xA2\x1E\xC2\x01")
    interp = create_interpreter(EmulatorConfig(speed=3, tone_hz=500))
    interp.load_rom(str(rom))
    assert interp.speed == 3
    assert interp.tone_hz == 500
    assert interp.memory[0x200:0x204] == b"\xA2\x1E\xC2\x01"


def test_main_missing_rom(tmp_path):
    assert main([str(tmp_path / "missing.ch8")]) == 1


def test_main_oversized_rom(tmp_path):
    rom = tmp_path / "huge.ch8"
    rom.write_bytes(bytes(4096))
    assert main([str(rom)]) == 1
