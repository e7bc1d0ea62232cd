"""Logical keys: named control keys, layout characters and raw keycodes.

These never carry the injection library's own key type; see injector.py for
the translation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KeyName(Enum):
    RETURN = 'return'
    TAB = 'tab'
    SPACE = 'space'
    BACKSPACE = 'backspace'
    ESCAPE = 'escape'
    META = 'meta'           # Windows key / Command
    SHIFT = 'shift'
    CAPS_LOCK = 'caps_lock'
    ALT = 'alt'
    OPTION = 'option'       # macOS name for Alt
    CONTROL = 'control'
    HOME = 'home'
    PAGE_UP = 'page_up'
    PAGE_DOWN = 'page_down'
    LEFT_ARROW = 'left_arrow'
    RIGHT_ARROW = 'right_arrow'
    DOWN_ARROW = 'down_arrow'
    UP_ARROW = 'up_arrow'
    F1 = 'f1'
    F2 = 'f2'
    F3 = 'f3'
    F4 = 'f4'
    F5 = 'f5'
    F6 = 'f6'
    F7 = 'f7'
    F8 = 'f8'
    F9 = 'f9'
    F10 = 'f10'
    F11 = 'f11'
    F12 = 'f12'


@dataclass(frozen=True)
class Layout:
    """Keyboard-layout dependent printable character."""
    char: str

    def __post_init__(self):
        if len(self.char) != 1:
            raise ValueError(f'Layout key needs exactly one character, got {self.char!r}')


@dataclass(frozen=True)
class Raw:
    """Platform keycode, e.g. 0x38."""
    code: int


LogicalKey = KeyName | Layout | Raw


def describe_key(key: LogicalKey) -> str:
    match key:
        case KeyName():
            return key.value
        case Layout(char=c):
            return repr(c)
        case Raw(code=code):
            return f'raw:0x{code:X}'
    raise TypeError(f'Not a logical key: {key!r}')
