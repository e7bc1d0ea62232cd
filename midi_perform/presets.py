"""Built-in performance layout: piano keys C3..C6 on channel 0, instrument pads on channel 9."""

from midi_perform.config import Settings
from midi_perform.keys import KeyName, Layout
from midi_perform.mappings import Delay, KeyDown, KeyUp, NoteMapping, SetModifier
from midi_perform.midi import Note

PIANO_CHANNEL = 0
PAD_CHANNEL = 9

LOWEST = Note.from_text('C3')
HIGHEST = Note.from_text('C6')

# One key per semitone, C..B, plus the top C.
PIANO_KEYS = ['q', '2', 'w', '3', 'e', 'r', '5', 't', '6', 'y', '7', 'u', 'i']

# Pads 40..43 switch instruments with Ctrl+Alt+Shift+<key>.
PAD_FIRST_NOTE = 40
PAD_KEYS = ['z', 'x', 'c', 'v']


def piano_modifier(note: Note) -> KeyName | None:
    """Octave selector: Shift for C5..C6, Control for C3..C4, none in between."""
    if Note.from_text('C5') <= note <= HIGHEST:
        return KeyName.SHIFT
    if LOWEST <= note <= Note.from_text('C4'):
        return KeyName.CONTROL
    return None


def piano_key(note: Note) -> str:
    # High C gets its own key
    if note == HIGHEST:
        return PIANO_KEYS[12]
    return PIANO_KEYS[note.index() % 12]


def piano_mappings() -> list[NoteMapping]:
    return [
        NoteMapping.for_char(Note(n), PIANO_CHANNEL, piano_key(Note(n)), piano_modifier(Note(n)))
        for n in range(LOWEST.index(), HIGHEST.index() + 1)
    ]


def pad_mappings(settings: Settings) -> list[NoteMapping]:
    """Tap Esc, wait for the game menu, then Ctrl+Alt+Shift+<pad key>."""
    chord = (KeyName.CONTROL, KeyName.ALT, KeyName.SHIFT)
    result = []
    for i, char in enumerate(PAD_KEYS):
        key = Layout(char)
        on = (
            SetModifier(None),
            KeyDown(KeyName.ESCAPE),
            Delay(settings.key_delay_ms),
            KeyUp(KeyName.ESCAPE),
            Delay(settings.system_delay_ms),
            *(KeyDown(m) for m in chord),
            Delay(settings.modifier_delay_ms),
            KeyDown(key),
            Delay(settings.key_delay_ms),
            KeyUp(key),
            Delay(settings.modifier_delay_ms),
            *(KeyUp(m) for m in chord),
        )
        result.append(NoteMapping(Note(PAD_FIRST_NOTE + i), PAD_CHANNEL, on=on, off=()))
    return result


def performance_layout(settings: Settings | None = None) -> list[NoteMapping]:
    settings = settings or Settings()
    return piano_mappings() + pad_mappings(settings)
