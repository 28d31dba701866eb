import io
import logging
from typing import Iterable, Optional, Tuple

import numpy as np
from pydub import AudioSegment

from ..config import AudioConfig
from ..errors import EmptyPlaylistError
from .oscillator import render_block
from .types import Note, VoiceParams

_LOG = logging.getLogger("chiptune.synthesis")


def _render_samples(notes: Iterable[Note], config: AudioConfig) -> np.ndarray:
    chunks = []
    for serial, note in enumerate(notes, start=1):
        frames = config.frames_for(note.duration)
        # every note starts from the waveform origin, as it does on the device
        samples, _ = render_block(VoiceParams.from_note(note, serial), 0.0, frames, config)
        chunks.append(samples)
    if not chunks:
        return np.zeros(0, dtype=np.uint8)
    return np.concatenate(chunks)


def render_playlist(notes: Iterable[Note], config: Optional[AudioConfig] = None) -> AudioSegment:
    config = config or AudioConfig()
    note_list = list(notes)
    if not note_list:
        raise EmptyPlaylistError("No notes to render.")

    samples = _render_samples(note_list, config)
    # pydub keeps 8-bit audio signed and re-biases it when writing WAV
    signed = (samples.astype(np.int16) - 128).astype(np.int8)
    return AudioSegment(
        signed.tobytes(),
        frame_rate=config.sample_rate,
        sample_width=1,
        channels=1,
    )


def render_playlist_to_wav(
    notes: Iterable[Note],
    config: Optional[AudioConfig] = None,
) -> Tuple[io.BytesIO, float]:
    segment = render_playlist(notes, config)
    duration = segment.duration_seconds
    _LOG.info("Rendered %.1f seconds of audio", duration)

    buffer = io.BytesIO()
    segment.export(buffer, format="wav")
    buffer.seek(0)
    return buffer, duration
