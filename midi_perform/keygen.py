"""Key driver: idempotent press/release state per logical key, modifier handling, step execution."""

import logging
import threading
import time
from typing import Callable, Iterable, Protocol

from midi_perform.config import MOD_DELAY_MS
from midi_perform.keys import KeyName, LogicalKey, describe_key
from midi_perform.mappings import Delay, KeyDown, KeyUp, SetModifier, Step

log = logging.getLogger("midi_perform.keygen")

# Modifiers managed by SetModifier. Other keys (Alt, Meta) are only pressed explicitly.
MODIFIERS: tuple[KeyName, ...] = (KeyName.SHIFT, KeyName.CONTROL)


class Injector(Protocol):
    def key_down(self, key: LogicalKey) -> None: ...

    def key_up(self, key: LogicalKey) -> None: ...


class KeyGen:
    """Tracks which logical keys are held and only sends real transitions.

    One lock covers a whole sequence (run()); logical keys are process-wide,
    so concurrent devices serialize here.
    """

    def __init__(
        self,
        injector: Injector,
        modifier_delay_ms: int = MOD_DELAY_MS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._injector = injector
        self._state: dict[LogicalKey, bool] = {}
        self._lock = threading.RLock()
        self.modifier_delay_ms = modifier_delay_ms
        self._sleep = sleep

    def is_pressed(self, key: LogicalKey) -> bool:
        return self._state.get(key, False)

    def pressed_keys(self) -> list[LogicalKey]:
        with self._lock:
            return [k for k, down in self._state.items() if down]

    def press(self, key: LogicalKey) -> bool:
        """Press a key. Returns True if an event was sent."""
        with self._lock:
            if self._state.get(key, False):
                return False
            self._injector.key_down(key)
            self._state[key] = True
            return True

    def release(self, key: LogicalKey) -> bool:
        """Release a key. Returns True if an event was sent."""
        with self._lock:
            if not self._state.get(key, False):
                return False
            self._injector.key_up(key)
            self._state[key] = False
            return True

    def reset(self) -> int:
        """Release every held key. Returns the number of keys released."""
        with self._lock:
            changes = 0
            try:
                for key, pressed in self._state.items():
                    if pressed:
                        self._injector.key_up(key)
                        changes += 1
            finally:
                self._state.clear()
            if changes:
                log.info("Released %d stuck key(s)", changes)
            return changes

    def apply_modifier(self, requested: LogicalKey | None) -> int:
        """Hold `requested` if it is Shift/Control and let go of the other; None (or
        any other key) releases both. Returns the number of real transitions."""
        with self._lock:
            changes = 0
            if requested in MODIFIERS:
                changes += self.press(requested)
            for mod in MODIFIERS:
                if mod != requested:
                    changes += self.release(mod)
            return changes

    def execute(self, step: Step) -> None:
        match step:
            case Delay(ms=ms):
                self._sleep(ms / 1000.0)
            case KeyDown(key=key):
                self.press(key)
            case KeyUp(key=key):
                self.release(key)
            case SetModifier(key=key):
                if self.apply_modifier(key):
                    self._sleep(self.modifier_delay_ms / 1000.0)
            case _:
                raise TypeError(f'Unknown step: {step!r}')

    def run(self, steps: Iterable[Step]) -> None:
        """Execute a sequence to completion while holding the lock."""
        with self._lock:
            for step in steps:
                log.debug("step %s", _describe_step(step))
                self.execute(step)


def _describe_step(step: Step) -> str:
    match step:
        case Delay(ms=ms):
            return f'delay {ms}ms'
        case KeyDown(key=key):
            return f'down {describe_key(key)}'
        case KeyUp(key=key):
            return f'up {describe_key(key)}'
        case SetModifier(key=None):
            return 'modifier none'
        case SetModifier(key=key):
            return f'modifier {describe_key(key)}'
    return repr(step)
