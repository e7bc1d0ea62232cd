"""Tests for midi_perform.ports with mido's port functions patched out."""

import mido
import pytest

from midi_perform import ports
from midi_perform.dispatch import AppState
from midi_perform.injector import RecordingInjector
from midi_perform.keygen import KeyGen
from midi_perform.keys import Layout
from midi_perform.mappings import NoteMapping, NoteMappings
from midi_perform.midi import Note


class FakePort:
    def __init__(self, name, callback):
        self.name = name
        self.callback = callback
        self.closed = False

    def close(self):
        self.closed = True


class FakeMido:
    def __init__(self):
        self.names: list[str] = []
        self.opened: list[FakePort] = []
        self.fail = False

    def get_input_names(self):
        return list(self.names)

    def open_input(self, name, callback=None):
        if self.fail:
            raise OSError(f'unknown port {name!r}')
        port = FakePort(name, callback)
        self.opened.append(port)
        return port


@pytest.fixture
def fake_mido(monkeypatch):
    fake = FakeMido()
    monkeypatch.setattr(mido, 'get_input_names', fake.get_input_names)
    monkeypatch.setattr(mido, 'open_input', fake.open_input)
    return fake


@pytest.fixture
def injector():
    return RecordingInjector()


@pytest.fixture
def state(injector):
    mappings = NoteMappings([NoteMapping.for_char(Note(60), 0, 't')])
    return AppState(KeyGen(injector, sleep=lambda s: None), mappings)


class TestListDevices:
    def test_dedupes(self, fake_mido):
        fake_mido.names = ['A', 'B', 'A']
        assert ports.list_devices() == ['A', 'B']


class TestDeviceConnection:
    """Test message delivery through the mido callback."""

    def test_callback_dispatches(self, fake_mido, state, injector):
        conn = ports.DeviceConnection('Keys', state)
        fake_mido.opened[0].callback(mido.Message('note_on', note=60, velocity=90))
        assert injector.events == [('down', Layout('t'))]
        conn.close()
        assert fake_mido.opened[0].closed

    def test_callback_ignores_other_messages(self, fake_mido, state, injector):
        ports.DeviceConnection('Keys', state)
        fake_mido.opened[0].callback(mido.Message('control_change', control=7, value=10))
        assert injector.events == []

    def test_callback_survives_injector_error(self, fake_mido, injector, caplog):
        class Broken:
            def key_down(self, key):
                raise RuntimeError('boom')

            def key_up(self, key):
                pass

        mappings = NoteMappings([NoteMapping.for_char(Note(60), 0, 't')])
        state = AppState(KeyGen(Broken(), sleep=lambda s: None), mappings)
        ports.DeviceConnection('Keys', state)
        fake_mido.opened[0].callback(mido.Message('note_on', note=60, velocity=90))
        assert 'Error handling' in caplog.text


class TestDeviceWatcher:
    """Test connect, disconnect and reconnect handling."""

    def test_first_available(self, fake_mido, state):
        fake_mido.names = ['One', 'Two']
        watcher = ports.DeviceWatcher(state)
        watcher.poll()
        assert watcher.connected() == ['One']

    def test_sticks_to_first_device(self, fake_mido, state):
        fake_mido.names = ['One', 'Two']
        watcher = ports.DeviceWatcher(state)
        watcher.poll()
        fake_mido.names = ['Two']
        watcher.poll()
        assert watcher.connected() == []
        fake_mido.names = ['Two', 'One']
        watcher.poll()
        assert watcher.connected() == ['One']

    def test_waits_for_device(self, fake_mido, state):
        watcher = ports.DeviceWatcher(state)
        watcher.poll()
        assert watcher.connected() == []
        fake_mido.names = ['Late']
        watcher.poll()
        assert watcher.connected() == ['Late']

    def test_named_devices(self, fake_mido, state):
        fake_mido.names = ['One', 'Two', 'Three']
        watcher = ports.DeviceWatcher(state, ['Three', 'One'])
        watcher.poll()
        assert sorted(watcher.connected()) == ['One', 'Three']

    def test_disconnect_releases_keys(self, fake_mido, state, injector):
        fake_mido.names = ['Keys']
        watcher = ports.DeviceWatcher(state, ['Keys'])
        watcher.poll()
        fake_mido.opened[0].callback(mido.Message('note_on', note=60, velocity=90))
        fake_mido.names = []
        watcher.poll()
        assert fake_mido.opened[0].closed
        assert injector.events[-1] == ('up', Layout('t'))
        assert state.keygen.pressed_keys() == []

    def test_connect_failure_retried(self, fake_mido, state):
        fake_mido.names = ['Keys']
        fake_mido.fail = True
        watcher = ports.DeviceWatcher(state, ['Keys'])
        watcher.poll()
        assert watcher.connected() == []
        fake_mido.fail = False
        watcher.poll()
        assert watcher.connected() == ['Keys']

    def test_close(self, fake_mido, state):
        fake_mido.names = ['Keys']
        watcher = ports.DeviceWatcher(state, ['Keys'])
        watcher.poll()
        watcher.close()
        assert watcher.connected() == []
        assert fake_mido.opened[0].closed

    def test_run_stops(self, fake_mido, state):
        watcher = ports.DeviceWatcher(state, poll_interval=0.01)
        watcher.stop()
        watcher.run()
