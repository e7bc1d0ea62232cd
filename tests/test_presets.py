"""Tests for midi_perform.presets: built-in piano and pad layout."""

from midi_perform.config import Settings
from midi_perform.dispatch import AppState
from midi_perform.injector import RecordingInjector
from midi_perform.keygen import KeyGen
from midi_perform.keys import KeyName, Layout
from midi_perform.mappings import Delay, KeyDown, NoteMappings, SetModifier
from midi_perform.midi import Note
from midi_perform.presets import (
    PAD_CHANNEL,
    PIANO_CHANNEL,
    pad_mappings,
    performance_layout,
    piano_key,
    piano_mappings,
    piano_modifier,
)


class TestPiano:
    """Test the C3..C6 piano layout."""

    def test_range(self):
        notes = [m.note.index() for m in piano_mappings()]
        assert notes == list(range(48, 85))
        assert all(m.channel == PIANO_CHANNEL for m in piano_mappings())

    def test_keys(self):
        assert piano_key(Note.from_text('C3')) == 'q'
        assert piano_key(Note.from_text('Cs4')) == '2'
        assert piano_key(Note.from_text('B5')) == 'u'
        assert piano_key(Note.from_text('C6')) == 'i'

    def test_modifiers(self):
        assert piano_modifier(Note.from_text('C3')) is KeyName.CONTROL
        assert piano_modifier(Note.from_text('C4')) is KeyName.CONTROL
        assert piano_modifier(Note.from_text('Cs4')) is None
        assert piano_modifier(Note.from_text('B4')) is None
        assert piano_modifier(Note.from_text('C5')) is KeyName.SHIFT
        assert piano_modifier(Note.from_text('C6')) is KeyName.SHIFT

    def test_sequence_shape(self):
        m = piano_mappings()[0]
        assert m.on == (SetModifier(KeyName.CONTROL), KeyDown(Layout('q')))


class TestPads:
    """Test the channel 9 instrument-switch pads."""

    def test_pad_notes(self):
        pads = pad_mappings(Settings())
        assert [m.note.index() for m in pads] == [40, 41, 42, 43]
        assert all(m.channel == PAD_CHANNEL and m.off == () for m in pads)

    def test_pad_uses_settings_delays(self):
        settings = Settings(key_delay_ms=10, system_delay_ms=100, modifier_delay_ms=1)
        on = pad_mappings(settings)[0].on
        assert [s.ms for s in on if isinstance(s, Delay)] == [10, 100, 1, 10, 1]

    def test_pad_run_leaves_nothing_held(self):
        injector = RecordingInjector()
        sleeps = []
        state = AppState(KeyGen(injector, sleep=sleeps.append), NoteMappings(pad_mappings(Settings())))
        state.handle(bytes([0x99, 41, 90]))
        downs = [k for kind, k in injector.events if kind == 'down']
        assert downs == [KeyName.ESCAPE, KeyName.CONTROL, KeyName.ALT, KeyName.SHIFT, Layout('x')]
        assert state.keygen.pressed_keys() == []
        assert sum(sleeps) > 0.4


def test_performance_layout_combines():
    layout = performance_layout()
    assert len(layout) == 37 + 4
