"""Loading of preset banks stored as RPL preset libraries."""

from __future__ import annotations

import base64
import itertools
import string
from dataclasses import dataclass, field
from typing import List

from .parse import MAX_SLIDERS, dot_strtod

_MAX_INPUT = 1 << 24
_WHITESPACE = " \t\r\n"
_QUOTES = "\"'`"
_BASE64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/")


class BankFormatError(ValueError):
    """Raised when a preset library cannot be parsed."""


@dataclass(frozen=True)
class SliderValue:
    """A saved slider value by slider index (0-based)."""

    index: int
    value: float


@dataclass
class State:
    """Saved slider values and the raw serialized data of an effect."""

    sliders: List[SliderValue] = field(default_factory=list)
    data: bytes = b""


@dataclass
class Preset:
    name: str
    state: State


@dataclass
class Bank:
    name: str
    presets: List[Preset] = field(default_factory=list)


def tokenize_line(text: str) -> List[str]:
    """Split text into whitespace-separated tokens.

    A token may be wrapped in ``"``, ``'`` or `````; it then runs to the
    matching quote and may hold spaces and the other quote characters.
    Raises ValueError on an unterminated quote.
    """
    tokens: List[str] = []
    pos = 0
    length = len(text)
    while True:
        while pos < length and text[pos] in _WHITESPACE:
            pos += 1
        if pos >= length:
            return tokens
        quote = text[pos]
        if quote in _QUOTES:
            end = text.find(quote, pos + 1)
            if end < 0:
                raise ValueError("unterminated quoted token")
            tokens.append(text[pos + 1:end])
            pos = end + 1
        else:
            end = pos
            while end < length and text[end] not in _WHITESPACE:
                end += 1
            tokens.append(text[pos:end])
            pos = end


def _decode_base64(text: str) -> bytes:
    chars = "".join(
        char for char in itertools.takewhile(lambda c: c != "=", text)
        if char in _BASE64_ALPHABET
    )
    remainder = len(chars) % 4
    if remainder == 1:
        chars = chars[:-1]
    elif remainder:
        chars += "=" * (4 - remainder)
    return base64.b64decode(chars)


def parse_preset_blob(name: str, data: bytes) -> Preset:
    """Build a preset from its decoded blob.

    The blob is a line of slider values (``-`` for a missing slider), a NUL
    byte, then the raw serialized data.
    """
    text_bytes, nul, payload = data.partition(b"\0")
    if not nul:
        payload = b""

    sliders: List[SliderValue] = []
    try:
        tokens = tokenize_line(text_bytes.decode("utf-8", "replace"))
    except ValueError:
        tokens = None
    if tokens is not None:
        padded = (tokens + [""] * MAX_SLIDERS)[:MAX_SLIDERS]
        sliders = [
            SliderValue(index, dot_strtod(token)[0])
            for index, token in enumerate(padded)
            if token != "-"
        ]

    return Preset(name=name, state=State(sliders=sliders, data=bytes(payload)))


def load_bank_from_text(text: str) -> Bank:
    """Parse the text of a preset library; raises BankFormatError."""
    try:
        tokens = tokenize_line(text)
    except ValueError as exc:
        raise BankFormatError(str(exc)) from exc

    it = iter(tokens)
    if next(it, "") != "<REAPER_PRESET_LIBRARY":
        raise BankFormatError("not a preset library")
    bank = Bank(name=next(it, ""))

    for token in it:
        if token != "<PRESET":
            continue
        preset_name = next(it, "")
        blob = bytearray()
        for part in it:
            if part == ">":
                break
            blob += _decode_base64(part)
        bank.presets.append(parse_preset_blob(preset_name, bytes(blob)))

    return bank


def load_bank(path: str) -> Bank:
    """Load a preset library file (at most 16 MiB of it is read)."""
    with open(path, "rb") as stream:
        raw = stream.read(_MAX_INPUT)
    text = raw.decode("utf-8", "replace").replace("\r", " ").replace("\n", " ")
    return load_bank_from_text(text)