"""Send logical key events to the OS using pynput, or just record/log them."""

import logging

from midi_perform.keys import KeyName, Layout, LogicalKey, Raw, describe_key

log = logging.getLogger("midi_perform.injector")

# KeyName -> attribute of pynput.keyboard.Key
PYNPUT_KEY_NAMES = {
    KeyName.RETURN: 'enter',
    KeyName.TAB: 'tab',
    KeyName.SPACE: 'space',
    KeyName.BACKSPACE: 'backspace',
    KeyName.ESCAPE: 'esc',
    KeyName.META: 'cmd',
    KeyName.SHIFT: 'shift',
    KeyName.CAPS_LOCK: 'caps_lock',
    KeyName.ALT: 'alt',
    KeyName.OPTION: 'alt',
    KeyName.CONTROL: 'ctrl',
    KeyName.HOME: 'home',
    KeyName.PAGE_UP: 'page_up',
    KeyName.PAGE_DOWN: 'page_down',
    KeyName.LEFT_ARROW: 'left',
    KeyName.RIGHT_ARROW: 'right',
    KeyName.DOWN_ARROW: 'down',
    KeyName.UP_ARROW: 'up',
    KeyName.F1: 'f1',
    KeyName.F2: 'f2',
    KeyName.F3: 'f3',
    KeyName.F4: 'f4',
    KeyName.F5: 'f5',
    KeyName.F6: 'f6',
    KeyName.F7: 'f7',
    KeyName.F8: 'f8',
    KeyName.F9: 'f9',
    KeyName.F10: 'f10',
    KeyName.F11: 'f11',
    KeyName.F12: 'f12',
}


class PynputInjector:
    """Real OS key injection. pynput is imported here so the rest of the package works without a display."""

    def __init__(self):
        try:
            from pynput.keyboard import Controller, Key, KeyCode
        except ImportError as e:
            raise RuntimeError('pynput not available') from e
        self._ctrl = Controller()
        self._Key = Key
        self._KeyCode = KeyCode

    def to_pynput_key(self, key: LogicalKey):
        match key:
            case KeyName():
                return getattr(self._Key, PYNPUT_KEY_NAMES[key])
            case Layout(char=c):
                return self._KeyCode.from_char(c)
            case Raw(code=code):
                return self._KeyCode.from_vk(code)
        raise TypeError(f'Not a logical key: {key!r}')

    def key_down(self, key: LogicalKey) -> None:
        self._ctrl.press(self.to_pynput_key(key))

    def key_up(self, key: LogicalKey) -> None:
        self._ctrl.release(self.to_pynput_key(key))


class RecordingInjector:
    """Keeps ('down'|'up', key) tuples instead of touching the OS. Used for --dry-run and tests."""

    def __init__(self):
        self.events: list[tuple[str, LogicalKey]] = []

    def key_down(self, key: LogicalKey) -> None:
        log.info("key down %s", describe_key(key))
        self.events.append(('down', key))

    def key_up(self, key: LogicalKey) -> None:
        log.info("key up %s", describe_key(key))
        self.events.append(('up', key))

    def clear(self) -> None:
        self.events.clear()
