"""MIDI input ports via mido: list, connect, and keep connections alive as devices come and go."""

import logging
import threading

import mido

from midi_perform.dispatch import AppState
from midi_perform.midi import format_bytes

log = logging.getLogger("midi_perform.ports")


def list_devices() -> list[str]:
    """Input port names, duplicates removed."""
    return list(dict.fromkeys(mido.get_input_names()))


class DeviceConnection:
    """One open input port. mido calls back on its own thread, one message at a time per port."""

    def __init__(self, name: str, state: AppState):
        self.name = name
        self._state = state
        self._port = mido.open_input(name, callback=self._on_message)
        log.info("Connection established: %s", name)

    def _on_message(self, msg) -> None:
        raw = bytes(msg.bytes())
        try:
            self._state.handle(raw)
        except Exception:
            # Keep the port open; the next message may be fine.
            log.exception("Error handling %s from %s", format_bytes(raw), self.name)

    def close(self) -> None:
        try:
            self._port.close()
        except OSError:
            log.warning("Error closing %s", self.name, exc_info=True)
        log.info("Connection closed: %s", self.name)


class DeviceWatcher:
    """Connect to the requested devices (or the first one found) and reconnect when they reappear.

    When a connected device vanishes its connection is dropped and every held
    key is released so nothing stays stuck.
    """

    def __init__(self, state: AppState, devices: list[str] | None = None, poll_interval: float = 1.0):
        self._state = state
        self._targets: list[str] = list(devices or [])
        self._auto = not self._targets
        self._connections: dict[str, DeviceConnection] = {}
        self._poll_interval = poll_interval
        self._stop = threading.Event()

    def connected(self) -> list[str]:
        return list(self._connections)

    def poll(self) -> None:
        available = list_devices()
        if self._auto and not self._targets:
            if not available:
                log.debug("No MIDI input devices yet")
                return
            log.info("Connecting to first available device: %s", available[0])
            self._targets.append(available[0])

        for name in self._targets:
            conn = self._connections.get(name)
            if conn is not None and name not in available:
                log.info("Device went away: %s", name)
                conn.close()
                del self._connections[name]
                self._state.release_all()
            elif conn is None and name in available:
                try:
                    self._connections[name] = DeviceConnection(name, self._state)
                except OSError as e:
                    log.warning("Unable to connect to %s: %s", name, e)
            elif conn is None:
                log.debug("Looking for device %s", name)

    def run(self) -> None:
        """Poll until stop() is called."""
        while not self._stop.is_set():
            self.poll()
            self._stop.wait(self._poll_interval)

    def stop(self) -> None:
        self._stop.set()

    def close(self) -> None:
        for conn in self._connections.values():
            conn.close()
        self._connections.clear()
        self._state.release_all()
