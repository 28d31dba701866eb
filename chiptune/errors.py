class ChiptuneError(Exception):
    """Base class for playback failures."""


class ConfigError(ChiptuneError, ValueError):
    pass


class DeviceInitializationError(ChiptuneError):
    """The audio output stream could not be opened or started."""


class EmptyPlaylistError(ChiptuneError):
    """There is nothing to play."""
