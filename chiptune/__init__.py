from .config import AudioConfig
from .errors import ChiptuneError, ConfigError, DeviceInitializationError, EmptyPlaylistError
from .player import PlaybackSession

__all__ = [
    "AudioConfig",
    "ChiptuneError",
    "ConfigError",
    "DeviceInitializationError",
    "EmptyPlaylistError",
    "PlaybackSession",
]
