"""Route decoded MIDI notes through the mapping table to the key driver."""

import logging
from enum import Enum

from midi_perform.keygen import KeyGen
from midi_perform.mappings import NoteMappings
from midi_perform.midi import (
    DecodeError,
    MidiEvent,
    UnimplementedStatusError,
    decode,
    format_bytes,
)

log = logging.getLogger("midi_perform.dispatch")


class Outcome(Enum):
    IGNORED = 'ignored'      # not a note message, or malformed
    UNMAPPED = 'unmapped'
    HANDLED = 'handled'


def dispatch(raw: bytes, mappings: NoteMappings, keygen: KeyGen) -> Outcome:
    """Decode one raw MIDI buffer and run the matching on/off sequence.

    Decode errors are logged and reported as IGNORED; they never propagate.
    """
    try:
        msg = decode(raw)
    except UnimplementedStatusError:
        log.debug("Ignoring non-note message: %s", format_bytes(raw))
        return Outcome.IGNORED
    except DecodeError as e:
        log.warning("Dropping message: %s", e)
        return Outcome.IGNORED

    mapping = mappings.find(msg.note, msg.channel)
    if mapping is None:
        log.debug("No mapping for %s ch%d (%s)", msg.note.name, msg.channel, msg.event.value)
        return Outcome.UNMAPPED

    steps = mapping.on if msg.event is MidiEvent.NOTE_ON else mapping.off
    log.debug("%s ch%d %s: %d step(s)", msg.note.name, msg.channel, msg.event.value, len(steps))
    keygen.run(steps)
    return Outcome.HANDLED


class AppState:
    """Everything the MIDI callbacks share: one key driver and one mapping table."""

    def __init__(self, keygen: KeyGen, mappings: NoteMappings | None = None) -> None:
        self.keygen = keygen
        self.mappings = mappings if mappings is not None else NoteMappings()

    def handle(self, raw: bytes) -> Outcome:
        return dispatch(raw, self.mappings, self.keygen)

    def release_all(self) -> int:
        return self.keygen.reset()
