# Output - single-tone buzzer, on while the sound timer is non-zero.
# pyglet.media is imported on first use so the interpreter can run without an audio stack.

import logging

logger = logging.getLogger(__name__)

TONE_DURATION = 1.0     # seconds of waveform per loop of the player


def generate_tone(frequency=440, duration=TONE_DURATION, sample_rate=44100):
    # Square wave, the classic buzzer timbre
    from pyglet.media import synthesis
    return synthesis.Square(duration=duration, frequency=frequency, sample_rate=sample_rate)


def create_player():
    from pyglet.media import Player
    return Player()


class Speaker:
    """Audio device with an idempotent play/stop pair."""

    def __init__(self, player_factory=create_player, source_factory=generate_tone):
        self._player_factory = player_factory
        self._source_factory = source_factory
        self._player = None
        self.frequency = None

    @property
    def playing(self):
        return self._player is not None

    def play(self, frequency=440):
        if self._player is not None:
            if frequency == self.frequency:
                return
            self.stop()

        player = self._player_factory()
        player.queue(self._source_factory(frequency=frequency))
        player.loop = True
        player.play()
        self._player = player
        self.frequency = frequency
        logger.debug("Tone on at %d Hz", frequency)

    def stop(self):
        if self._player is None:
            return
        self._player.pause()
        self._player.delete()
        self._player = None
        self.frequency = None
        logger.debug("Tone off")
