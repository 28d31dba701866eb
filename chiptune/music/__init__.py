"""Waveform synthesis and note sequencing."""

from .bridge import AudioCallbackBridge
from .note_loader import load_notes, parse_note_line
from .oscillator import generate_sample, iter_samples, render_block
from .sequencer import NoteSequencer
from .synthesis import render_playlist, render_playlist_to_wav
from .types import Note, OscillatorState, Playlist, VoiceParams, Waveform

__all__ = [
    "AudioCallbackBridge",
    "Note",
    "NoteSequencer",
    "OscillatorState",
    "Playlist",
    "VoiceParams",
    "Waveform",
    "generate_sample",
    "iter_samples",
    "load_notes",
    "parse_note_line",
    "render_block",
    "render_playlist",
    "render_playlist_to_wav",
]
