import logging
import time
from typing import Callable, Iterable, Optional

from ..config import AudioConfig
from ..errors import EmptyPlaylistError
from .types import Note, OscillatorState, VoiceParams

_LOG = logging.getLogger("chiptune.sequencer")


class NoteSequencer:
    """Walks a playlist in order and points the oscillator at each note in turn.

    Each note is published as a fresh ``VoiceParams`` snapshot; the audio
    callback adopts it at its next buffer and restarts the phase. The note is
    then held either for its wall-clock duration or until the callback has
    emitted the matching number of frames, whichever ``config.pacing`` asks for.
    """

    def __init__(
        self,
        state: OscillatorState,
        config: AudioConfig,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.state = state
        self.config = config
        self._clock = clock
        self._sleep = sleep
        self._serial = state.params.serial
        self._origin: Optional[int] = None
        self._target = 0

    def play(self, playlist: Iterable[Note]) -> int:
        notes = list(playlist)
        if not notes:
            raise EmptyPlaylistError("Playlist has no notes.")
        self._origin = None
        self._target = 0

        for index, note in enumerate(notes, start=1):
            serial = self._publish(VoiceParams.from_note(note, self._next_serial()))
            _LOG.debug(
                "Note %d/%d: %s %.2f Hz for %d ms at %.0f%%",
                index,
                len(notes),
                note.waveform.name.lower(),
                note.frequency,
                note.duration,
                note.volume * 100,
            )
            self._hold(serial, note.duration)

        self._publish(self.state.params.silenced(self._next_serial()))
        return len(notes)

    def _next_serial(self) -> int:
        self._serial += 1
        return self._serial

    def _publish(self, params: VoiceParams) -> int:
        self.state.params = params
        return params.serial

    def _hold(self, serial: int, duration_ms: int) -> None:
        if self.config.pacing == "wallclock":
            self._sleep(duration_ms / 1000)
            return
        self._hold_for_frames(serial, duration_ms)

    def _hold_for_frames(self, serial: int, duration_ms: int) -> None:
        # Targets are cumulative from the first note, so a note that ran long
        # because of buffer granularity is made up for by the ones after it.
        if duration_ms <= 0:
            return
        self._target += self.config.frames_for(duration_ms)
        deadline = self._clock() + (duration_ms + self.config.max_lag_ms) / 1000
        while not self._reached(serial):
            if self._clock() >= deadline:
                elapsed = self._elapsed()
                _LOG.debug(
                    "Output fell behind on note %d (%d of %d frames); moving on",
                    serial,
                    elapsed,
                    self._target,
                )
                self._target = max(elapsed, 0)
                return
            self._sleep(self.config.poll_interval)

    def _reached(self, serial: int) -> bool:
        if self.state.frames_since_active(serial) < 0:
            return False
        if self._origin is None:
            self._origin = self.state.active_since
        return self._elapsed() >= self._target

    def _elapsed(self) -> int:
        if self._origin is None:
            return -1
        return self.state.frames_rendered - self._origin
