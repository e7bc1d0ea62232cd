"""Decode raw MIDI channel-voice bytes into note events; note names."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

NOTE_MIN = 0
NOTE_MAX = 127

# Pitch class names, C = 0. Sharps are spelled with a trailing 's'.
NOTE_NAMES = ('C', 'Cs', 'D', 'Ds', 'E', 'F', 'Fs', 'G', 'Gs', 'A', 'As', 'B')

# Status nibbles
NOTE_OFF = 0x80
NOTE_ON = 0x90

# Longest names first so 'Cs4' is not read as 'C' + 's4'.
_NOTE_RE = re.compile(
    r'(%s)(n|\d+)' % '|'.join(sorted(NOTE_NAMES, key=len, reverse=True)),
    re.IGNORECASE,
)
_PITCH_CLASS = {name.lower(): i for i, name in enumerate(NOTE_NAMES)}


class DecodeError(ValueError):
    """Base for recoverable decode failures; only the offending message/line is skipped."""


class TooShortError(DecodeError):
    def __init__(self, data: bytes):
        super().__init__(f'MIDI message too short: {format_bytes(data) or "(empty)"}')
        self.data = data


class UnimplementedStatusError(DecodeError):
    def __init__(self, status: int):
        super().__init__(f'Unimplemented MIDI status 0x{status:02X}')
        self.status = status


class NoteOutOfRangeError(DecodeError):
    def __init__(self, value: int):
        super().__init__(f'Note {value} out of range ({NOTE_MIN}-{NOTE_MAX})')
        self.value = value


class UnparseableNoteNameError(DecodeError):
    def __init__(self, text: str):
        super().__init__(f'Unparseable note name: {text!r}')
        self.text = text


class MidiEvent(Enum):
    NOTE_ON = 'note_on'
    NOTE_OFF = 'note_off'


@dataclass(frozen=True, order=True)
class Note:
    """MIDI pitch 0-127. 48 is C3."""
    value: int

    def __post_init__(self):
        if not NOTE_MIN <= self.value <= NOTE_MAX:
            raise NoteOutOfRangeError(self.value)

    @classmethod
    def from_byte(cls, b: int) -> Note:
        """Build from a data byte; the top bit is masked off so this never fails."""
        return cls(b & 0x7F)

    @classmethod
    def from_text(cls, text: str) -> Note:
        """Parse a note name like 'C3', 'fs4' or 'Csn' (case-insensitive)."""
        m = _NOTE_RE.fullmatch(text.strip())
        if not m:
            raise UnparseableNoteNameError(text)
        pitch = _PITCH_CLASS[m.group(1).lower()]
        octave = m.group(2)
        if octave.lower() == 'n':
            value = pitch
        else:
            value = (int(octave) + 1) * 12 + pitch
        if value > NOTE_MAX:
            raise NoteOutOfRangeError(value)
        return cls(value)

    def index(self) -> int:
        return self.value

    @property
    def name(self) -> str:
        base = NOTE_NAMES[self.value % 12]
        if self.value < 12:
            return base + 'n'
        return f'{base}{(self.value - 12) // 12}'

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class MidiMessage:
    event: MidiEvent
    channel: int
    note: Note
    velocity: int


def format_bytes(data: bytes) -> str:
    """Hex dump for log lines, e.g. '90 3C 64'."""
    return ' '.join(f'{b:02X}' for b in data)


def decode(data: bytes) -> MidiMessage:
    """Decode one raw message. Note-On with velocity 0 comes back as NOTE_OFF.

    Raises TooShortError or UnimplementedStatusError; callers that feed live
    traffic should treat the latter as "not a note event".
    """
    data = bytes(data)
    if not data:
        raise TooShortError(data)
    status = data[0]
    kind = status & 0xF0
    if kind == NOTE_OFF:
        if len(data) < 3:
            raise TooShortError(data)
        event = MidiEvent.NOTE_OFF
    elif kind == NOTE_ON:
        if len(data) < 3:
            raise TooShortError(data)
        event = MidiEvent.NOTE_ON if data[2] & 0x7F else MidiEvent.NOTE_OFF
    else:
        raise UnimplementedStatusError(status)
    return MidiMessage(
        event=event,
        channel=status & 0x0F,
        note=Note.from_byte(data[1]),
        velocity=data[2] & 0x7F,
    )
