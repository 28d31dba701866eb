from typing import Any, Optional

from ..config import AudioConfig
from .oscillator import render_block
from .types import OscillatorState


class AudioCallbackBridge:
    """Realtime callback that pulls 8-bit mono samples out of the oscillator.

    ``sounddevice`` calls this on its own thread whenever the output buffer
    needs refilling. It must always write the whole buffer and must never
    raise, so failures turn into silence and are left on the bridge for the
    session to report once playback is over.
    """

    def __init__(self, state: OscillatorState, config: AudioConfig) -> None:
        self.state = state
        self.config = config
        self.underruns = 0
        self.errors = 0
        self.last_error: Optional[BaseException] = None

    def __call__(self, outdata: Any, frames: int, time_info: Any, status: Any) -> None:
        if status and getattr(status, "output_underflow", False):
            self.underruns += 1
        self.fill(outdata)

    def fill(self, buffer: Any) -> None:
        view = memoryview(buffer).cast("B")
        frames = len(view)
        state = self.state
        try:
            # one read per buffer: a buffer never mixes two notes
            params = state.params
            if params.serial != state.active_serial:
                state.phase = 0.0
                state.active_since = state.frames_rendered
                state.active_serial = params.serial
            samples, state.phase = render_block(params, state.phase, frames, self.config)
            view[:] = samples.tobytes()
        except Exception as exc:  # callback must not raise into the audio thread
            self.errors += 1
            self.last_error = exc
            view[:] = bytes([self.config.midpoint]) * frames
        state.frames_rendered += frames
