from types import SimpleNamespace

import pytest

from chiptune.config import AudioConfig

# 8 kHz with 32-frame blocks: one block every 4 ms, and the sequencer polls
# once per block so the simulated device advances in lock step.
TEST_RATE = 8000
TEST_BLOCK = 32


@pytest.fixture
def config() -> AudioConfig:
    return AudioConfig(
        sample_rate=TEST_RATE,
        block_size=TEST_BLOCK,
        poll_interval=TEST_BLOCK / TEST_RATE,
        max_lag_ms=50,
    )


class FakeClock:
    """Monotonic clock that only moves when someone sleeps on it.

    When a ``pull`` callback is attached it behaves like a sound card: one
    block is pulled every ``block_size / sample_rate`` seconds of fake time.
    """

    def __init__(self, config: AudioConfig, pull=None) -> None:
        self.now = 0.0
        self.config = config
        self.pull = pull
        self.sleeps = []
        self.blocks = 0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        if self.pull is None:
            return
        period = self.config.block_size / self.config.sample_rate
        due = int(self.now / period + 1e-9)
        while self.blocks < due:
            self.blocks += 1
            self.pull(self.config.block_size)


class FakeStream:
    def __init__(self, config, callback, fail_start=False, underflow=False):
        self.config = config
        self.callback = callback
        self.fail_start = fail_start
        self.underflow = underflow
        self.events = []

    def start(self):
        if self.fail_start:
            raise RuntimeError("device busy")
        self.events.append("start")

    def stop(self):
        self.events.append("stop")

    def close(self):
        self.events.append("close")

    def pull(self, frames):
        status = SimpleNamespace(output_underflow=self.underflow)
        self.callback(bytearray(frames), frames, None, status)

