# Host window - subclassing pyglet (graphics, keyboard events and the frame clock)
# and overriding the event handlers we need from there.

import logging

import pyglet
from pyglet.window import key

from .errors import Chip8Error

logger = logging.getLogger(__name__)

# Key mapping - maps physical keyboard keys to the CHIP-8 keypad
keymap = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}


class Chip8Window(pyglet.window.Window):

    def __init__(self, interpreter, config):
        super().__init__(
            width=config.window_width,
            height=config.window_height,
            caption="CHIP-8 Emulator",
            resizable=False,
            vsync=config.vsync,
        )
        self.interpreter = interpreter
        self.display = interpreter.display
        self.keyboard = interpreter.keyboard
        self.config = config
        self.has_exit = False

        #creating ImageData once, updated in place on every draw
        self.image = pyglet.image.ImageData(
            config.window_width,
            config.window_height,
            'RGBA',
            self.display.to_rgba(config.scale, flip_vertical=True).tobytes(),
        )

        # Performance tracking counters
        self._fps_counter = 0
        self._last_instruction_count = 0
        self._bench_time = pyglet.clock.get_default().time()

        # Labels for HUD
        self.fps_label = self._make_label("FPS: 0", 15)
        self.cps_label = self._make_label("Instructions/s: 0", 30)

        # One interpreter cycle per timer tick (timers, audio and render ride along)
        pyglet.clock.schedule_interval(self._cpu_tick, 1.0 / config.timer_hz)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    def _make_label(self, text, offset):
        return pyglet.text.Label(
            text,
            font_size=12,
            x=5,
            y=self.config.window_height - offset,
            anchor_x='left',
            anchor_y='center',
            color=(255, 255, 255, 255)
        )

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        if self.has_exit:
            return
        try:
            self.interpreter.cycle()
        except Chip8Error as e:
            logger.error("Emulation error: %s", e)
            self.dispatch_event('on_close')

    # FPS / CPS
    def _update_bench(self, dt):
        now = pyglet.clock.get_default().time()
        elapsed = now - self._bench_time
        if elapsed >= 1.0:
            self.fps_label.text = f"FPS: {self._fps_counter / elapsed:.1f}"
            executed = self.interpreter.instruction_count - self._last_instruction_count
            self.cps_label.text = f"Instructions/s: {executed / elapsed:.0f}"

            self._fps_counter = 0
            self._last_instruction_count = self.interpreter.instruction_count
            self._bench_time = now

    # ---- Drawing ----
    def on_draw(self):
        self.clear()

        scale = self.config.scale
        if self.display.should_draw:
            scaled = self.display.to_rgba(scale, flip_vertical=True)
            #updates existing image without creating new object
            self.image.set_data('RGBA', self.config.window_width * 4, scaled.tobytes())
            self.display.should_draw = False
        self.image.blit(0, 0)

        if self.config.show_stats:
            self.fps_label.draw()
            self.cps_label.draw()

        self._fps_counter += 1

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == key.ESCAPE:
            self.dispatch_event('on_close')
        elif symbol == key.F1:
            toggle_trace_logging()
        elif symbol in keymap:
            self.keyboard.key_down(keymap[symbol])

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in keymap:
            self.keyboard.key_up(keymap[symbol])

    def on_close(self):
        pyglet.clock.unschedule(self._cpu_tick)
        pyglet.clock.unschedule(self._update_bench)
        self.interpreter.speaker.stop()
        super().on_close()


def toggle_trace_logging():
    """Flip the package logger between per-instruction tracing and normal output."""
    package_logger = logging.getLogger("chip8")
    if package_logger.getEffectiveLevel() <= logging.DEBUG:
        package_logger.setLevel(logging.INFO)
    else:
        package_logger.setLevel(logging.DEBUG)
    logger.info("Instruction trace %s", "on" if package_logger.level == logging.DEBUG else "off")
