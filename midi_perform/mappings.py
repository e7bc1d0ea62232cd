"""Note mappings: (note, channel, instrument) -> on/off step sequences."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from midi_perform.keys import Layout, LogicalKey
from midi_perform.midi import DecodeError, Note

log = logging.getLogger("midi_perform.mappings")

CHANNEL_MIN = 0
CHANNEL_MAX = 15


# Steps. Immutable; owned by the mapping they belong to.

@dataclass(frozen=True)
class Delay:
    ms: int


@dataclass(frozen=True)
class KeyDown:
    key: LogicalKey


@dataclass(frozen=True)
class KeyUp:
    key: LogicalKey


@dataclass(frozen=True)
class SetModifier:
    """Hold this modifier (Shift/Control) for the notes that follow; None releases them."""
    key: LogicalKey | None = None


Step = Delay | KeyDown | KeyUp | SetModifier


def down_event(char: str, modifier: LogicalKey | None = None) -> tuple[Step, ...]:
    """Canonical 'on' sequence: declare the modifier once, then press the character."""
    return (SetModifier(modifier), KeyDown(Layout(char)))


def up_event(char: str) -> tuple[Step, ...]:
    """Canonical 'off' sequence. The modifier stays held for the next note."""
    return (KeyUp(Layout(char)),)


@dataclass(frozen=True)
class NoteMapping:
    note: Note
    channel: int
    instrument: str | None = None
    on: tuple[Step, ...] = ()
    off: tuple[Step, ...] = ()

    def matches(self, note: Note, channel: int, instrument: str | None) -> bool:
        return (self.note == note
                and self.channel == channel
                and self.instrument == instrument)

    @classmethod
    def for_char(
        cls,
        note: Note,
        channel: int,
        char: str,
        modifier: LogicalKey | None = None,
        up_char: str | None = None,
        instrument: str | None = None,
    ) -> NoteMapping:
        """Mapping that types `char` on note-on and lets go of `up_char` (default `char`) on note-off."""
        return cls(
            note=note,
            channel=channel,
            instrument=instrument,
            on=down_event(char, modifier),
            off=up_event(up_char or char),
        )


class MappingImportError(ValueError):
    def __init__(self, path: str, line_no: int, reason: str):
        super().__init__(f'{path}:{line_no}: {reason}')
        self.path = path
        self.line_no = line_no
        self.reason = reason


class NoteMappings:
    """Ordered mapping table. Lookup is a linear scan; the first match in insertion order wins.

    Adding never removes an earlier mapping for the same key, so a later
    duplicate is shadowed rather than replacing it.
    """

    def __init__(self, mappings: list[NoteMapping] | None = None) -> None:
        self._mappings: list[NoteMapping] = list(mappings or [])
        self._lock = threading.Lock()

    def add(self, mapping: NoteMapping) -> None:
        with self._lock:
            self._mappings.append(mapping)

    def extend(self, mappings: list[NoteMapping]) -> None:
        with self._lock:
            self._mappings.extend(mappings)

    def find(self, note: Note, channel: int, instrument: str | None = None) -> NoteMapping | None:
        # Filled during configuration, read-only afterwards; lookups take no lock.
        for mapping in self._mappings:
            if mapping.matches(note, channel, instrument):
                return mapping
        return None

    def items(self) -> list[NoteMapping]:
        return list(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)

    def import_file(self, path: str) -> int:
        """Add mappings from a text file. Returns the number added.

        Each line: <note name> <channel> <key-down char> <key-up char>, separated
        by whitespace. Lines with another field count are skipped with a warning.
        A bad note name or channel fails the whole import and adds nothing.
        """
        try:
            with open(path, encoding='utf-8') as f:
                lines = f.read().splitlines()
        except UnicodeDecodeError as e:
            raise MappingImportError(path, 0, f'not valid UTF-8 ({e.reason} at byte {e.start})') from e
        parsed = parse_mapping_lines(lines, path)
        self.extend(parsed)
        log.info("Imported %d mapping(s) from %s", len(parsed), path)
        return len(parsed)


def parse_mapping_lines(lines: list[str], source: str = '<lines>') -> list[NoteMapping]:
    result: list[NoteMapping] = []
    for line_no, line in enumerate(lines, start=1):
        fields = line.split()
        if len(fields) != 4:
            log.warning("%s:%d: expected 4 fields, got %d; skipped", source, line_no, len(fields))
            continue
        note_txt, channel_txt, down_txt, up_txt = fields
        try:
            note = Note.from_text(note_txt)
        except DecodeError as e:
            raise MappingImportError(source, line_no, str(e)) from e
        try:
            channel = int(channel_txt)
        except ValueError:
            raise MappingImportError(source, line_no, f'channel is not a number: {channel_txt!r}') from None
        if not CHANNEL_MIN <= channel <= CHANNEL_MAX:
            raise MappingImportError(source, line_no, f'channel {channel} out of range ({CHANNEL_MIN}-{CHANNEL_MAX})')
        mapping = NoteMapping.for_char(note, channel, down_txt[0], up_char=up_txt[0])
        log.debug("%s:%d: %s ch%d -> %r/%r", source, line_no, note.name, channel, down_txt[0], up_txt[0])
        result.append(mapping)
    return result
