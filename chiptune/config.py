import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError

PACING_MODES = ("samples", "wallclock")


@dataclass(frozen=True)
class AudioConfig:
    sample_rate: int = 44100
    peak_amplitude: int = 127  # 8-bit range is 0..255, centred on peak + 1
    block_size: int = 4096
    pacing: str = "samples"
    max_lag_ms: int = 250
    poll_interval: float = 0.005  # seconds
    device: Optional[str] = None

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ConfigError(f"sample_rate must be positive, got {self.sample_rate}")
        if not 0 < self.peak_amplitude <= 127:
            raise ConfigError(f"peak_amplitude must be in 1..127, got {self.peak_amplitude}")
        if self.block_size <= 0:
            raise ConfigError(f"block_size must be positive, got {self.block_size}")
        if self.pacing not in PACING_MODES:
            raise ConfigError(f"pacing must be one of {PACING_MODES}, got {self.pacing!r}")
        if self.max_lag_ms < 0:
            raise ConfigError(f"max_lag_ms must be non-negative, got {self.max_lag_ms}")

    @property
    def midpoint(self) -> int:
        return self.peak_amplitude + 1

    @property
    def nyquist(self) -> float:
        return self.sample_rate / 2

    def frames_for(self, duration_ms: int) -> int:
        return int(round(duration_ms * self.sample_rate / 1000))

    @classmethod
    def from_env(cls) -> "AudioConfig":
        try:
            return cls(
                sample_rate=int(os.getenv("CHIPTUNE_SAMPLE_RATE", "44100")),
                peak_amplitude=int(os.getenv("CHIPTUNE_PEAK_AMPLITUDE", "127")),
                block_size=int(os.getenv("CHIPTUNE_BLOCK_SIZE", "4096")),
                pacing=os.getenv("CHIPTUNE_PACING", "samples").strip().lower(),
                max_lag_ms=int(os.getenv("CHIPTUNE_MAX_LAG_MS", "250")),
                device=os.getenv("CHIPTUNE_DEVICE") or None,
            )
        except ValueError as exc:
            if isinstance(exc, ConfigError):
                raise
            raise ConfigError(f"Invalid audio setting in environment: {exc}") from exc
