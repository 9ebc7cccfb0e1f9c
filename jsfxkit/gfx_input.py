"""Keyboard queue and host callbacks used by an effect's graphics code."""

from __future__ import annotations

import enum
from collections import deque
from typing import Callable, Deque, Optional, Set

MAX_INPUT = 1024
_WINDOW_FLAGS_QUERY = 65536


class SpecialKey(enum.IntEnum):
    """Host key codes for keys that have no character of their own."""

    DELETE = 0xE000
    F1 = enum.auto()
    F2 = enum.auto()
    F3 = enum.auto()
    F4 = enum.auto()
    F5 = enum.auto()
    F6 = enum.auto()
    F7 = enum.auto()
    F8 = enum.auto()
    F9 = enum.auto()
    F10 = enum.auto()
    F11 = enum.auto()
    F12 = enum.auto()
    LEFT = enum.auto()
    UP = enum.auto()
    RIGHT = enum.auto()
    DOWN = enum.auto()
    PAGE_UP = enum.auto()
    PAGE_DOWN = enum.auto()
    HOME = enum.auto()
    END = enum.auto()
    INSERT = enum.auto()


class Modifier(enum.IntFlag):
    NONE = 0
    SHIFT = 1
    CTRL = 2
    ALT = 4
    SUPER = 8


def _code(name: bytes) -> int:
    return int.from_bytes(name.ljust(4, b"\0"), "little")


_SPECIAL_CODES = {
    SpecialKey.DELETE: _code(b"del"),
    SpecialKey.F1: _code(b"f1"),
    SpecialKey.F2: _code(b"f2"),
    SpecialKey.F3: _code(b"f3"),
    SpecialKey.F4: _code(b"f4"),
    SpecialKey.F5: _code(b"f5"),
    SpecialKey.F6: _code(b"f6"),
    SpecialKey.F7: _code(b"f7"),
    SpecialKey.F8: _code(b"f8"),
    SpecialKey.F9: _code(b"f9"),
    SpecialKey.F10: _code(b"f10"),
    SpecialKey.F11: _code(b"f11"),
    SpecialKey.F12: _code(b"f12"),
    SpecialKey.LEFT: _code(b"left"),
    SpecialKey.UP: _code(b"up"),
    SpecialKey.RIGHT: _code(b"rght"),
    SpecialKey.DOWN: _code(b"down"),
    SpecialKey.PAGE_UP: _code(b"pgup"),
    SpecialKey.PAGE_DOWN: _code(b"pgdn"),
    SpecialKey.HOME: _code(b"home"),
    SpecialKey.END: _code(b"end"),
    SpecialKey.INSERT: _code(b"ins"),
}


def translate_special_key(key: int) -> Optional[int]:
    """Script key code of a special key (its name packed little-endian), or None."""
    return _SPECIAL_CODES.get(key)  # type: ignore[call-overload]


def latin1_tolower(key: int) -> int:
    """Lower-case a Latin-1 code point; other values are returned unchanged."""
    if ord("A") <= key <= ord("Z"):
        return key + 0x20
    if 0xC0 <= key <= 0xDE and key != 0xD7:
        return key + 0x20
    return key


def _key_id(key: int) -> Optional[int]:
    special = translate_special_key(key)
    if special is not None:
        return special
    if key < 256:
        return latin1_tolower(key)
    return None  # only the Latin-1 character set is supported


ShowMenuCallback = Callable[[str, int, int], int]
SetCursorCallback = Callable[[int], object]
GetDropFileCallback = Callable[[int], Optional[str]]


class GfxInput:
    """Keyboard state and host callbacks seen by the graphics code.

    Key presses are queued (at most MAX_INPUT, oldest dropped first) and the
    set of keys currently held down is tracked.
    """

    def __init__(self) -> None:
        self._queue: Deque[int] = deque(maxlen=MAX_INPUT)
        self._pressed: Set[int] = set()
        self.show_menu_callback: Optional[ShowMenuCallback] = None
        self.set_cursor_callback: Optional[SetCursorCallback] = None
        self.get_drop_file_callback: Optional[GetDropFileCallback] = None

    def reset(self) -> None:
        """Forget queued input and held keys."""
        self._queue.clear()
        self._pressed.clear()

    def add_key(self, mods: int, key: int, press: bool) -> None:
        """Record a key press or release from the host."""
        if key < 1:
            return
        key_id = _key_id(key)
        if key_id is None:
            return

        special = translate_special_key(key)
        key_with_mod = special if special is not None else key
        if ord("a") <= key_id <= ord("z") and mods & (Modifier.CTRL | Modifier.ALT):
            key_with_mod = key_id - ord("a") + 257

        if press:
            if key_with_mod > 0:
                self._queue.append(key_with_mod)
            self._pressed.add(key_id)
        else:
            self._pressed.discard(key_id)

    def getchar(self, query: float = 0) -> float:
        """With a key code of 1 or more, 1.0 if that key is down, else 0.0.

        Otherwise pop the next queued key, or return 0.0 if there is none.
        """
        if query >= 1:
            if query == _WINDOW_FLAGS_QUERY:
                return 0.0
            key_id = _key_id(int(query) & 0xFFFFFFFF)
            if key_id is None:
                return 0.0
            return 1.0 if key_id in self._pressed else 0.0
        if self._queue:
            return float(self._queue.popleft())
        return 0.0

    def show_menu(self, desc: str, x: float, y: float) -> int:
        """Ask the host to show a popup menu; 0 if there is no menu or host."""
        if self.show_menu_callback is None or not desc:
            return 0
        return int(self.show_menu_callback(desc, int(x), int(y)))

    def set_cursor(self, cursor_id: float) -> None:
        """Ask the host to change the mouse cursor."""
        if self.set_cursor_callback is not None:
            self.set_cursor_callback(int(cursor_id))

    def get_drop_file(self, index: float) -> Optional[str]:
        """Return a dropped file by index; a negative index clears the list."""
        if self.get_drop_file_callback is None:
            return None
        idx = int(index)
        if idx < 0:
            self.get_drop_file_callback(-1)
            return None
        return self.get_drop_file_callback(idx)