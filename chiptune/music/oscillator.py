"""Phase-accumulator oscillator for the four 8-bit waveforms.

Phase is a position in ``[0, 1)`` within one period. Every sample advances it
by ``frequency / sample_rate`` and wraps it back into range. Shapes produce a
value in ``[-peak, +peak]`` which is scaled by volume and shifted onto the
unsigned 8-bit range around the midpoint.
"""

import math
from typing import Callable, Dict, Iterator, Tuple

import numpy as np

from ..config import AudioConfig
from .types import VoiceParams, Waveform

ShapeFn = Callable[[np.ndarray, float], np.ndarray]


def _square(phase: np.ndarray, peak: float) -> np.ndarray:
    return np.where(phase < 0.5, peak, -peak)


def _triangle(phase: np.ndarray, peak: float) -> np.ndarray:
    rising = 4 * peak * phase - peak
    falling = -4 * peak * (phase - 0.5) + peak
    return np.where(phase < 0.5, rising, falling)


def _sawtooth(phase: np.ndarray, peak: float) -> np.ndarray:
    return 2 * peak * (phase - 0.5)


def _sine(phase: np.ndarray, peak: float) -> np.ndarray:
    return peak * np.sin(2 * math.pi * phase)


SHAPES: Dict[Waveform, ShapeFn] = {
    Waveform.SQUARE: _square,
    Waveform.TRIANGLE: _triangle,
    Waveform.SAWTOOTH: _sawtooth,
    Waveform.SINE: _sine,
}

_unmapped = set(Waveform) - set(SHAPES)
if _unmapped:  # pragma: no cover - guards edits to Waveform
    raise RuntimeError(f"No shape registered for {sorted(w.name for w in _unmapped)}")


def validate_frequency(frequency: float, config: AudioConfig) -> float:
    """Reject frequencies the oscillator cannot represent at this sample rate."""
    if not 0 < frequency < config.nyquist:
        raise ValueError(
            f"frequency {frequency} Hz outside (0, {config.nyquist}) for {config.sample_rate} Hz output"
        )
    return float(frequency)


def wrap_phase(phase: float) -> float:
    return phase % 1.0


def unscaled_value(waveform: Waveform, phase: float, peak: float) -> float:
    return float(SHAPES[waveform](np.asarray(phase, dtype=np.float64), peak))


def _to_unsigned(values: np.ndarray, volume: float, config: AudioConfig) -> np.ndarray:
    scaled = values * volume + config.midpoint
    return np.trunc(scaled).astype(np.uint8)


def generate_sample(
    waveform: Waveform,
    frequency: float,
    phase: float,
    volume: float,
    config: AudioConfig,
) -> Tuple[int, float]:
    """Return one unsigned 8-bit sample for ``phase`` and the phase that follows it."""
    value = SHAPES[waveform](np.asarray(phase, dtype=np.float64), config.peak_amplitude)
    sample = int(_to_unsigned(value, volume, config))
    return sample, wrap_phase(phase + frequency / config.sample_rate)


def iter_samples(
    waveform: Waveform,
    frequency: float,
    volume: float,
    config: AudioConfig,
    phase: float = 0.0,
) -> Iterator[int]:
    """Endless samples for one fixed tone. Start a new iterator to restart at phase 0."""
    while True:
        sample, phase = generate_sample(waveform, frequency, phase, volume, config)
        yield sample


def render_block(
    params: VoiceParams,
    phase: float,
    frames: int,
    config: AudioConfig,
) -> Tuple[np.ndarray, float]:
    """Vectorised ``generate_sample`` over ``frames`` consecutive samples.

    Phases are accumulated one add-and-wrap at a time, exactly as repeated
    ``generate_sample`` calls do, so both paths produce the same bytes.
    """
    increment = params.frequency / config.sample_rate
    steps = []
    for _ in range(frames):
        steps.append(phase)
        phase = wrap_phase(phase + increment)
    phases = np.array(steps, dtype=np.float64)
    values = SHAPES[params.waveform](phases, config.peak_amplitude)
    samples = _to_unsigned(values, params.volume, config)
    return samples, phase
