from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class Waveform(Enum):
    SQUARE = 0
    TRIANGLE = 1
    SAWTOOTH = 2
    SINE = 3


def clamp_volume(volume: float) -> float:
    return max(0.0, min(float(volume), 1.0))


@dataclass(frozen=True)
class Note:
    waveform: Waveform
    frequency: float  # Hz
    duration: int  # milliseconds
    volume: float  # 0..1

    def __post_init__(self) -> None:
        if self.frequency <= 0:
            raise ValueError(f"frequency must be positive, got {self.frequency}")
        if self.duration < 0:
            raise ValueError(f"duration must be non-negative, got {self.duration}")
        object.__setattr__(self, "volume", clamp_volume(self.volume))


@dataclass(frozen=True)
class VoiceParams:
    """Parameters of the note currently sounding.

    Instances are never mutated: the sequencer swaps in a new one per note and
    the render context picks it up at its next buffer. ``serial`` tells the
    render context that a new note started and the phase must restart.
    """

    waveform: Waveform
    frequency: float
    volume: float
    serial: int = 0

    @classmethod
    def from_note(cls, note: Note, serial: int) -> "VoiceParams":
        return cls(
            waveform=note.waveform,
            frequency=note.frequency,
            volume=note.volume,
            serial=serial,
        )

    def silenced(self, serial: int) -> "VoiceParams":
        return VoiceParams(self.waveform, self.frequency, 0.0, serial)


class OscillatorState:
    """State shared by the sequencer and the audio callback for one session.

    The sequencer only ever assigns ``params``. Everything else is written by
    the render context alone.
    """

    def __init__(self, params: Optional[VoiceParams] = None) -> None:
        self.params: VoiceParams = params or VoiceParams(Waveform.SQUARE, 440.0, 1.0)
        self.phase = 0.0
        self.frames_rendered = 0
        self.active_serial = self.params.serial
        self.active_since = 0

    def frames_since_active(self, serial: int) -> int:
        """Frames emitted for note ``serial``; -1 until the render context adopts it."""
        if self.active_serial != serial:
            return -1
        return self.frames_rendered - self.active_since


Playlist = List[Note]
