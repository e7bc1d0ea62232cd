"""MIDI perform: turn MIDI notes from a controller into keyboard input."""

from midi_perform.dispatch import AppState, Outcome, dispatch
from midi_perform.keygen import KeyGen
from midi_perform.mappings import NoteMapping, NoteMappings
from midi_perform.midi import MidiEvent, MidiMessage, Note, decode

__all__ = [
    'AppState',
    'KeyGen',
    'MidiEvent',
    'MidiMessage',
    'Note',
    'NoteMapping',
    'NoteMappings',
    'Outcome',
    'decode',
    'dispatch',
]
