import logging
import time
from typing import Any, Callable, Iterable, Optional

from .config import AudioConfig
from .errors import DeviceInitializationError, EmptyPlaylistError
from .music.bridge import AudioCallbackBridge
from .music.sequencer import NoteSequencer
from .music.types import Note, OscillatorState

StreamFactory = Callable[[AudioConfig, AudioCallbackBridge], Any]


def open_output_stream(config: AudioConfig, callback: AudioCallbackBridge) -> Any:
    """Open an unsigned 8-bit mono PortAudio stream that pulls from ``callback``."""
    import sounddevice as sd  # PortAudio is loaded on import and may be missing

    return sd.RawOutputStream(
        samplerate=config.sample_rate,
        blocksize=config.block_size,
        channels=1,
        dtype="uint8",
        device=config.device,
        callback=callback,
    )


class PlaybackSession:
    """Plays one playlist through the audio device from start to finish."""

    def __init__(
        self,
        config: Optional[AudioConfig] = None,
        stream_factory: StreamFactory = open_output_stream,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or AudioConfig()
        self.state = OscillatorState()
        self.bridge = AudioCallbackBridge(self.state, self.config)
        self.sequencer = NoteSequencer(self.state, self.config, clock=clock, sleep=sleep)
        self._stream_factory = stream_factory
        self._log = logging.getLogger("chiptune.player")

    def play(self, playlist: Iterable[Note]) -> int:
        notes = list(playlist)
        if not notes:
            raise EmptyPlaylistError("No notes to play!")

        stream = self._start_stream()
        self._log.info("Playing %d notes at %d Hz", len(notes), self.config.sample_rate)
        try:
            played = self.sequencer.play(notes)
        finally:
            self._stop_stream(stream)
            self._report()
        return played

    def _start_stream(self) -> Any:
        try:
            stream = self._stream_factory(self.config, self.bridge)
        except Exception as exc:
            raise DeviceInitializationError(f"Failed to open audio: {exc}") from exc
        try:
            stream.start()
        except Exception as exc:
            stream.close()
            raise DeviceInitializationError(f"Failed to start audio: {exc}") from exc
        return stream

    def _stop_stream(self, stream: Any) -> None:
        try:
            stream.stop()
        finally:
            stream.close()

    def _report(self) -> None:
        if self.bridge.underruns:
            self._log.warning("Audio output underran %d times", self.bridge.underruns)
        if self.bridge.errors:
            self._log.error(
                "Audio callback failed %d times, last error: %r",
                self.bridge.errors,
                self.bridge.last_error,
            )
