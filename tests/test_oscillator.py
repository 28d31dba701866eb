import itertools

import numpy as np
import pytest

from chiptune.config import AudioConfig
from chiptune.music.oscillator import (
    SHAPES,
    generate_sample,
    iter_samples,
    render_block,
    unscaled_value,
    validate_frequency,
)
from chiptune.music.types import VoiceParams, Waveform

PHASES = [i / 64 for i in range(64)] + [0.4999, 0.5001, 0.9999]
VOLUMES = [0.0, 0.25, 0.5, 0.99, 1.0]


def test_every_waveform_has_a_shape():
    assert set(SHAPES) == set(Waveform)


@pytest.mark.parametrize("waveform", list(Waveform))
def test_samples_stay_in_unsigned_range(waveform):
    config = AudioConfig()
    for phase, volume in itertools.product(PHASES, VOLUMES):
        sample, _ = generate_sample(waveform, 440.0, phase, volume, config)
        assert 0 <= sample <= 255
        assert config.midpoint - config.peak_amplitude <= sample <= config.midpoint + config.peak_amplitude


def test_square_is_at_peak_either_side_of_half_period():
    assert unscaled_value(Waveform.SQUARE, 0.0, 127) == 127
    assert unscaled_value(Waveform.SQUARE, 0.4999, 127) == 127
    assert unscaled_value(Waveform.SQUARE, 0.5, 127) == -127
    assert unscaled_value(Waveform.SQUARE, 0.99, 127) == -127


def test_known_sample_values():
    config = AudioConfig()
    assert generate_sample(Waveform.SQUARE, 440.0, 0.0, 1.0, config)[0] == 255
    assert generate_sample(Waveform.SQUARE, 440.0, 0.5, 1.0, config)[0] == 1
    assert generate_sample(Waveform.TRIANGLE, 440.0, 0.0, 1.0, config)[0] == 1
    assert generate_sample(Waveform.TRIANGLE, 440.0, 0.25, 1.0, config)[0] == 128
    assert generate_sample(Waveform.SAWTOOTH, 440.0, 0.5, 1.0, config)[0] == 128
    assert generate_sample(Waveform.SINE, 440.0, 0.0, 1.0, config)[0] == 128
    # 127 * 0.5 + 128 = 191.5, truncated
    assert generate_sample(Waveform.SINE, 440.0, 0.25, 0.5, config)[0] == 191


def test_triangle_peaks_at_half_period():
    assert unscaled_value(Waveform.TRIANGLE, 0.5, 127) == pytest.approx(127)
    assert unscaled_value(Waveform.TRIANGLE, 0.75, 127) == pytest.approx(0)


@pytest.mark.parametrize("waveform", list(Waveform))
def test_zero_volume_is_silence(waveform):
    config = AudioConfig()
    for phase in PHASES:
        sample, _ = generate_sample(waveform, 440.0, phase, 0.0, config)
        assert sample == config.midpoint


def test_phase_advances_by_frequency_over_rate():
    config = AudioConfig()
    _, phase = generate_sample(Waveform.SINE, 441.0, 0.25, 1.0, config)
    assert phase == pytest.approx(0.25 + 441.0 / 44100)


def test_phase_wraps_when_reaching_one():
    config = AudioConfig(sample_rate=8000)
    _, phase = generate_sample(Waveform.SQUARE, 1000.0, 0.875, 1.0, config)
    assert phase == 0.0
    _, phase = generate_sample(Waveform.SQUARE, 1000.0, 0.9375, 1.0, config)
    assert phase == pytest.approx(0.0625)


def test_phase_stays_in_range_above_sample_rate():
    config = AudioConfig(sample_rate=8000)
    _, phase = generate_sample(Waveform.SAWTOOTH, 20500.0, 0.5, 1.0, config)
    assert 0.0 <= phase < 1.0
    assert phase == pytest.approx(0.0625)


def test_square_period_returns_to_start_phase():
    config = AudioConfig(sample_rate=8000)
    phase = 0.0
    samples = []
    for _ in range(config.sample_rate // 1000):
        sample, phase = generate_sample(Waveform.SQUARE, 1000.0, phase, 1.0, config)
        samples.append(sample)
    assert phase == 0.0
    assert samples == [255] * 4 + [1] * 4


def test_iter_samples_restarts_from_origin():
    config = AudioConfig()
    first = list(itertools.islice(iter_samples(Waveform.TRIANGLE, 330.0, 0.8, config), 50))
    second = list(itertools.islice(iter_samples(Waveform.TRIANGLE, 330.0, 0.8, config), 50))
    assert first == second
    assert first[0] == generate_sample(Waveform.TRIANGLE, 330.0, 0.0, 0.8, config)[0]


@pytest.mark.parametrize("waveform", list(Waveform))
def test_block_matches_sample_by_sample(waveform):
    # 250 Hz at 8 kHz steps the phase by exactly 1/32
    config = AudioConfig(sample_rate=8000)
    params = VoiceParams(waveform, 250.0, 0.7)
    expected = list(itertools.islice(iter_samples(waveform, 250.0, 0.7, config, phase=0.25), 100))

    block, phase = render_block(params, 0.25, 100, config)

    assert block.dtype == np.uint8
    assert block.tolist() == expected
    assert phase == pytest.approx((0.25 + 100 / 32) % 1.0)


@pytest.mark.parametrize("frequency", [440.0, 441.0, 659.25, 1102.5])
@pytest.mark.parametrize("waveform", list(Waveform))
def test_block_matches_sample_by_sample_at_cd_rate(waveform, frequency):
    # increments here are not exact in binary, so rounding must match step for step
    config = AudioConfig()
    frames = 4410
    phase = 0.0
    expected = []
    for _ in range(frames):
        sample, phase = generate_sample(waveform, frequency, phase, 1.0, config)
        expected.append(sample)

    block, block_phase = render_block(VoiceParams(waveform, frequency, 1.0), 0.0, frames, config)

    assert block.tolist() == expected
    assert block_phase == phase


def test_empty_block_keeps_phase():
    block, phase = render_block(VoiceParams(Waveform.SINE, 440.0, 1.0), 0.3, 0, AudioConfig())
    assert len(block) == 0
    assert phase == 0.3


def test_alternate_peak_amplitude():
    config = AudioConfig(peak_amplitude=63)
    assert config.midpoint == 64
    assert generate_sample(Waveform.SQUARE, 440.0, 0.0, 1.0, config)[0] == 127
    assert generate_sample(Waveform.SQUARE, 440.0, 0.5, 1.0, config)[0] == 1


@pytest.mark.parametrize("frequency", [0.0, -5.0, 22050.0, 30000.0])
def test_validate_frequency_rejects_out_of_band(frequency):
    with pytest.raises(ValueError):
        validate_frequency(frequency, AudioConfig())


def test_validate_frequency_accepts_audible():
    assert validate_frequency(440, AudioConfig()) == 440.0
