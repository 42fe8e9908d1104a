"""Command line entry point: ``chip8 ROM [options]``."""

import argparse
import logging
import sys

from .config import EmulatorConfig
from .cpu import Interpreter
from .display import Display
from .errors import OutOfBounds
from .keyboard import Keyboard
from .speaker import Speaker

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="chip8", description='Run a CHIP-8 program.')

    parser.add_argument('rom', type=str,
                        help='Filename of the program image to load at 0x200.')
    parser.add_argument('--scale', type=int, default=10,
                        help='Size of an individual pixel (e.g. 10 = a 10x10 square).')
    parser.add_argument('--speed', type=int, default=10,
                        help='Instructions executed per frame.')
    parser.add_argument('--hz', dest='timer_hz', type=int, default=60,
                        help='Frames (and timer decrements) per second.')
    parser.add_argument('--tone', dest='tone_hz', type=int, default=440,
                        help='Buzzer frequency in Hz.')
    parser.add_argument('--vsync', action='store_true',
                        help='Enable vertical sync.')
    parser.add_argument('--no-stats', dest='show_stats', action='store_false',
                        help='Hide the FPS / instructions-per-second overlay.')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level; DEBUG traces every instruction.')
    return parser


def config_from_args(args):
    for name in ('scale', 'speed', 'timer_hz', 'tone_hz'):
        if getattr(args, name) <= 0:
            raise ValueError(f"--{name.replace('_', '-')} must be positive")
    return EmulatorConfig(
        scale=args.scale,
        speed=args.speed,
        timer_hz=args.timer_hz,
        tone_hz=args.tone_hz,
        vsync=args.vsync,
        show_stats=args.show_stats,
    )


def create_interpreter(config, speaker=None):
    """Wire one display, keyboard and speaker to a fresh interpreter."""
    return Interpreter(
        Display(),
        Keyboard(),
        speaker or Speaker(),
        speed=config.speed,
        tone_hz=config.tone_hz,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="[%(levelname)s] %(name)s: %(message)s", stream=sys.stdout)

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    interpreter = create_interpreter(config)
    try:
        interpreter.load_rom(args.rom)
    except OSError as e:
        logger.error("Cannot read ROM %s: %s", args.rom, e)
        return 1
    except OutOfBounds as e:
        logger.error("Cannot load ROM %s: %s", args.rom, e)
        return 1

    # pyglet.window needs a display connection, so it is only imported to actually run
    import pyglet
    from .window import Chip8Window

    Chip8Window(interpreter, config)
    pyglet.app.run()
    return 0
