import logging
import os
from typing import Iterable, List, Optional, Union

from ..config import AudioConfig
from .oscillator import validate_frequency
from .types import Note, Playlist, Waveform

_LOG = logging.getLogger("chiptune.loader")

NoteSource = Union[str, "os.PathLike[str]", Iterable[str]]


def parse_note_line(line: str, config: Optional[AudioConfig] = None) -> Optional[Note]:
    """Parse ``<waveform> <frequency Hz> <duration ms> <volume %>``.

    Returns ``None`` for anything that is not exactly such a record.
    """
    fields = line.split()
    if len(fields) != 4 or fields[0].startswith("#"):
        return None
    try:
        waveform = Waveform(int(fields[0]))
        frequency = validate_frequency(float(fields[1]), config or AudioConfig())
        duration = int(fields[2])
        volume = int(fields[3]) / 100.0
        return Note(waveform=waveform, frequency=frequency, duration=duration, volume=volume)
    except ValueError:
        return None


def _read_lines(source: NoteSource) -> List[str]:
    if isinstance(source, (str, os.PathLike)):
        with open(source, encoding="utf-8", errors="replace") as handle:
            return handle.readlines()
    return list(source)


def load_notes(source: NoteSource, config: Optional[AudioConfig] = None) -> Playlist:
    """Read a note file (or any iterable of lines) into a playlist.

    Malformed records are skipped. A file that cannot be read gives an empty
    playlist; deciding whether that is fatal is up to the caller.
    """
    try:
        lines = _read_lines(source)
    except OSError as exc:
        _LOG.warning("Failed to open note file %s: %s", source, exc)
        return []

    notes: Playlist = []
    for number, line in enumerate(lines, start=1):
        note = parse_note_line(line, config)
        if note is None:
            if line.strip() and not line.lstrip().startswith("#"):
                _LOG.debug("Skipping malformed note record on line %d: %r", number, line.rstrip())
            continue
        notes.append(note)

    _LOG.info("Loaded %d notes", len(notes))
    return notes
