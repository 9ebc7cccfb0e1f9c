"""Line-oriented text readers over strings and streams."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO, Iterator, Optional, Union

_END = ("", "\0")


class TextReader(ABC):
    """Character source that can be consumed line by line.

    ``read_next_char`` and ``peek_next_char`` return an empty string (or a
    NUL character) when no more input is available.
    """

    @abstractmethod
    def read_next_char(self) -> str:
        """Consume and return the next character."""

    @abstractmethod
    def peek_next_char(self) -> str:
        """Return the next character without consuming it."""

    def read_next_line(self) -> Optional[str]:
        """Return the next line without its terminator, or None at the end.

        Lines end at ``\\n``, ``\\r`` or ``\\r\\n``.
        """
        next_char = self.read_next_char()
        if next_char in _END:
            return None

        chars = []
        while next_char not in _END and next_char not in ("\r", "\n"):
            chars.append(next_char)
            next_char = self.read_next_char()

        if next_char == "\r" and self.peek_next_char() == "\n":
            self.read_next_char()

        return "".join(chars)

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.read_next_line()
            if line is None:
                return
            yield line


class StringTextReader(TextReader):
    """Reads characters from a string; a NUL character ends the input."""

    def __init__(self, text: Optional[str]) -> None:
        self._text = text or ""
        self._pos = 0

    def read_next_char(self) -> str:
        if self._pos >= len(self._text):
            return ""
        char = self._text[self._pos]
        if char == "\0":
            return ""
        self._pos += 1
        return char

    def peek_next_char(self) -> str:
        if self._pos >= len(self._text):
            return ""
        return self._text[self._pos]


class StreamTextReader(TextReader):
    """Reads characters from a text or binary stream.

    Bytes are interpreted as Latin-1 so that every byte maps to one character.
    """

    def __init__(self, stream: Optional[IO[Union[str, bytes]]]) -> None:
        self._stream = stream
        self._pending: Optional[str] = None

    def _fetch(self) -> str:
        if self._stream is None:
            return ""
        data = self._stream.read(1)
        if not data:
            return ""
        if isinstance(data, (bytes, bytearray)):
            return data.decode("latin-1")
        return data

    def read_next_char(self) -> str:
        if self._pending is not None:
            char, self._pending = self._pending, None
            return char
        return self._fetch()

    def peek_next_char(self) -> str:
        if self._pending is None:
            char = self._fetch()
            if not char:
                return ""
            self._pending = char
        return self._pending