"""Parsing of effect source files: sections, header metadata and sliders."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .reader import StringTextReader, TextReader

MAX_SLIDERS = 64
MAX_CHANNELS = 64

_ASCII_SPACE = " \t\n\v\f\r"
_SPACE_CLASS = "[ \\t\\n\\v\\f\\r]"
_SPLIT_RE = re.compile(_SPACE_CLASS + "+")
_NUMBER_RE = re.compile(
    _SPACE_CLASS + "*"
    r"(?P<num>[+-]?(?:"
    r"0x(?:[0-9a-f]+(?:\.[0-9a-f]*)?|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?"
    r"|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:e[+-]?[0-9]+)?"
    r"|inf(?:inity)?"
    r"|nan(?:\([0-9a-z_]*\))?"
    r"))",
    re.IGNORECASE,
)
_UINT_RE = re.compile(_SPACE_CLASS + r"*(?P<sign>[+-]?)(?P<digits>[0-9]+)")


@dataclass
class Section:
    """A block of source text and the line number where it starts."""

    line_offset: int = 0
    text: str = ""


@dataclass
class Toplevel:
    """The sections of a source file; the header section is always present."""

    header: Section = field(default_factory=Section)
    init: Optional[Section] = None
    slider: Optional[Section] = None
    block: Optional[Section] = None
    sample: Optional[Section] = None
    serialize: Optional[Section] = None
    gfx: Optional[Section] = None
    gfx_w: int = 0
    gfx_h: int = 0


class SectionParseError(ValueError):
    """Raised when a source file contains an unknown section."""

    def __init__(self, line: int, message: str) -> None:
        super().__init__(message)
        self.line = line
        self.message = message


@dataclass
class Slider:
    """A slider declaration from the header."""

    id: int = 0
    exists: bool = False
    default: float = 0.0
    min: float = 0.0
    max: float = 0.0
    inc: float = 0.0
    var: str = ""
    path: str = ""
    is_enum: bool = False
    enum_names: List[str] = field(default_factory=list)
    desc: str = ""
    initially_visible: bool = False


@dataclass
class Options:
    """Values of the ``options:`` header lines."""

    gmem: str = ""
    maxmem: int = 0
    want_all_kb: bool = False
    no_meter: bool = False


@dataclass
class Header:
    """Metadata parsed from the header section."""

    desc: str = ""
    author: str = ""
    tags: List[str] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)
    in_pins: List[str] = field(default_factory=list)
    out_pins: List[str] = field(default_factory=list)
    explicit_pins: bool = False
    filenames: List[str] = field(default_factory=list)
    options: Options = field(default_factory=Options)
    sliders: List[Slider] = field(
        default_factory=lambda: [Slider(id=i) for i in range(MAX_SLIDERS)]
    )


@dataclass
class ParsedFilename:
    """A ``filename:`` header line."""

    index: int
    filename: str


def dot_strtod(text: str) -> Tuple[float, int]:
    """Parse a leading number like C ``strtod`` with a ``.`` decimal point.

    Returns the value and the number of characters consumed; (0.0, 0) when no
    number starts the text.
    """
    match = _NUMBER_RE.match(text)
    if not match:
        return 0.0, 0
    num = match.group("num")
    body = num.lstrip("+-").lower()
    negative = num.startswith("-")
    if body.startswith("0x"):
        value = float.fromhex(body)
    elif body.startswith("inf"):
        value = math.inf
    elif body.startswith("nan"):
        value = math.nan
    else:
        value = float(body)
    return (-value if negative else value), match.end()


def _dot_atof(text: str) -> float:
    return dot_strtod(text)[0]


def _trunc(value: float, low: int, high: int) -> int:
    if math.isnan(value):
        return 0
    if value <= low:
        return low
    if value >= high:
        return high
    return int(value)


def _trim(text: str) -> str:
    return text.strip(_ASCII_SPACE)


def _split_words(text: str) -> List[str]:
    return [word for word in _SPLIT_RE.split(text) if word]


def _is_none(text: str) -> bool:
    return text.isascii() and text.lower() == "none"


def parse_toplevel(reader: TextReader) -> Toplevel:
    """Split source text into its sections.

    Raises SectionParseError on a line starting with an unknown ``@`` section.
    """
    toplevel = Toplevel()
    current = toplevel.header

    for lineno, line in enumerate(reader):
        if not line.startswith("@"):
            current.text += line + "\n"
            continue

        tokens = _split_words(line)
        current = Section()
        name = tokens[0]
        if name == "@init":
            toplevel.init = current
        elif name == "@slider":
            toplevel.slider = current
        elif name == "@block":
            toplevel.block = current
        elif name == "@sample":
            toplevel.sample = current
        elif name == "@serialize":
            toplevel.serialize = current
        elif name == "@gfx":
            toplevel.gfx = current
            gfx_w = _trunc(_dot_atof(tokens[1]), -(2**63), 2**63 - 1) if len(tokens) > 1 else 0
            gfx_h = _trunc(_dot_atof(tokens[2]), -(2**63), 2**63 - 1) if len(tokens) > 2 else 0
            toplevel.gfx_w = min(gfx_w, 0xFFFFFFFF) if gfx_w > 0 else 0
            toplevel.gfx_h = min(gfx_h, 0xFFFFFFFF) if gfx_h > 0 else 0
        else:
            raise SectionParseError(lineno, f"Invalid section: {line}")
        current.line_offset = lineno + 1

    return toplevel


def _parse_tags(rest: str) -> List[str]:
    return _split_words(rest)


def parse_header(section: Section) -> Header:
    """Extract the metadata of a header section."""
    header = Header()

    for line in StringTextReader(section.text):
        if line.startswith("desc:"):
            if not header.desc:
                header.desc = _trim(line[5:])
        elif line.startswith("author:"):
            if not header.author:
                header.author = _trim(line[7:])
        elif line.startswith("tags:"):
            if not header.tags:
                header.tags = _parse_tags(line[5:])
        elif line.startswith("in_pin:"):
            header.explicit_pins = True
            header.in_pins.append(_trim(line[7:]))
        elif line.startswith("out_pin:"):
            header.explicit_pins = True
            header.out_pins.append(_trim(line[8:]))
        elif line.startswith("options:"):
            for opt in _split_words(line[8:]):
                name, sep, value = opt.partition("=")
                if name == "gmem":
                    header.options.gmem = value
                elif name == "maxmem":
                    maxmem = _trunc(_dot_atof(value), -(2**31), 2**31 - 1)
                    header.options.maxmem = max(maxmem, 0)
                elif name == "want_all_kb":
                    header.options.want_all_kb = True
                elif name == "no_meter":
                    header.options.no_meter = True
        elif line.startswith("import") and line[6:7] != "" and line[6] in _ASCII_SPACE:
            header.imports.append(_trim(line[7:]))
        else:
            slider = parse_slider(line)
            if slider is not None:
                if slider.id >= MAX_SLIDERS:
                    continue
                slider.exists = True
                header.sliders[slider.id] = slider
                continue
            filename = parse_filename(line)
            if filename is not None and filename.index == len(header.filenames):
                header.filenames.append(filename.filename)

    # metadata in comments is not part of the format, but is accepted
    for line in StringTextReader(section.text):
        if line.startswith("//author:"):
            if not header.author:
                header.author = _trim(line[9:])
        elif line.startswith("//tags:"):
            if not header.tags:
                header.tags = _parse_tags(line[7:])

    if len(header.in_pins) == 1 and _is_none(header.in_pins[0]):
        header.in_pins.clear()
    if len(header.out_pins) == 1 and _is_none(header.out_pins[0]):
        header.out_pins.clear()

    del header.in_pins[MAX_CHANNELS:]
    del header.out_pins[MAX_CHANNELS:]
    return header


def _strtoul(text: str, pos: int) -> Tuple[int, int]:
    match = _UINT_RE.match(text, pos)
    if not match:
        return 0, pos
    value = int(match.group("digits"))
    if match.group("sign") == "-" and value:
        value = 2**64 - value
    return value, match.end()


def parse_slider(line: str) -> Optional[Slider]:
    """Parse a ``sliderN:`` line, or return None if it is not a valid one.

    The parser is deliberately permissive about malformed ranges.
    """
    s = line.split("\0", 1)[0]
    n = len(s)
    if not s.startswith("slider"):
        return None

    number, cur = _strtoul(s, 6)
    if number < 1 or number > MAX_SLIDERS:
        return None
    if cur >= n or s[cur] != ":":
        return None
    cur += 1

    slider = Slider(id=number - 1)

    def number_at(pos: int) -> Tuple[float, int]:
        value, used = dot_strtod(s[pos:])
        return value, pos + used

    def skip_until(pos: int, stops: str) -> int:
        while pos < n and s[pos] not in stops:
            pos += 1
        return pos

    # an '=' before any '<' or ',' names a custom variable
    pos: Optional[int] = cur
    while pos is not None and pos < n and s[pos] != "=":
        pos = None if s[pos] in "<," else pos + 1
    if pos is not None and pos < n:
        slider.var = s[cur:pos]
        cur = pos + 1
    else:
        slider.var = f"slider{number}"

    if cur >= n or s[cur] != "/":
        slider.default, cur = number_at(cur)
        cur = skip_until(cur, ",<")
        if cur >= n:
            return None
        if s[cur] == ",":
            cur += 1
        else:
            cur += 1
            slider.min, cur = number_at(cur)
            cur = skip_until(cur, ",>")
            if cur >= n:
                return None
            if s[cur] == ",":
                cur += 1
                slider.max, cur = number_at(cur)
                cur = skip_until(cur, ",>")
                if cur >= n:
                    return None
            if s[cur] == ",":
                cur += 1
                slider.inc, cur = number_at(cur)
                cur = skip_until(cur, "{,>")
                if cur >= n:
                    return None
                if s[cur] == "{":
                    cur += 1
                    start = cur
                    cur = skip_until(cur, "}>")
                    if cur >= n:
                        return None
                    slider.is_enum = True
                    slider.enum_names = [
                        _trim(name) for name in s[start:cur].split(",") if name
                    ]
            cur = skip_until(cur, ">")
            if cur >= n:
                return None
            cur += 1

        while cur < n and (s[cur] == "," or s[cur] in _ASCII_SPACE):
            cur += 1
        if cur >= n:
            return None
    else:
        start = cur
        cur = skip_until(cur, ":")
        if cur >= n:
            return None
        slider.path = s[start:cur]
        cur += 1
        slider.default, cur = number_at(cur)
        slider.inc = 1.0
        slider.is_enum = True
        cur = skip_until(cur, ":")
        if cur >= n:
            return None
        cur += 1

    while cur < n and s[cur] in _ASCII_SPACE:
        cur += 1

    slider.initially_visible = True
    if cur < n and s[cur] == "-":
        cur += 1
        slider.initially_visible = False

    slider.desc = _trim(s[cur:])
    if not slider.desc:
        return None
    return slider


def parse_filename(line: str) -> Optional[ParsedFilename]:
    """Parse a ``filename:index,path`` line, or return None."""
    s = line.split("\0", 1)[0]
    if not s.startswith("filename:"):
        return None
    value, used = dot_strtod(s[9:])
    if math.isnan(value) or value <= -1 or value >= 2**32:
        return None
    index = int(value)
    comma = s.find(",", 9 + used)
    if comma < 0:
        return None
    return ParsedFilename(index=index, filename=s[comma + 1:])