"""Buffers of timestamped MIDI events grouped by bus."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Optional

MAX_MIDI_BUSES = 16
MIDI_MESSAGE_MAX_SIZE = 1 << 24

_HEADER = struct.Struct("<III")  # bus, offset, size
HEADER_SIZE = _HEADER.size


class MidiOverflowError(BufferError):
    """Raised when a MIDI event does not fit in a buffer."""


@dataclass(frozen=True)
class MidiEvent:
    """A MIDI message on a bus at a frame offset."""

    bus: int
    offset: int
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class MidiBuffer:
    """Packed storage of MIDI events.

    The buffer keeps a global read position and one per bus; use either the
    global or the per-bus reading methods, not both on the same pass.
    Unless extensible, the buffer never grows past its capacity in bytes.
    ``len()`` gives the number of bytes in use.
    """

    def __init__(self, capacity: int = 0, extensible: bool = True) -> None:
        self._data = bytearray()
        self._capacity = 0
        self._extensible = True
        self._read_pos = 0
        self._read_pos_for_bus = [0] * MAX_MIDI_BUSES
        self.reserve(capacity, extensible)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def extensible(self) -> bool:
        return self._extensible

    def __len__(self) -> int:
        return len(self._data)

    def _writable(self) -> int:
        return self._capacity - len(self._data)

    def reserve(self, capacity: int, extensible: bool) -> None:
        """Drop all events and set a new capacity and growth policy."""
        self._data = bytearray()
        self._capacity = capacity
        self._extensible = extensible
        self.rewind()

    def clear(self) -> None:
        """Drop all events and reset the read positions."""
        self._data.clear()
        self.rewind()

    def push(self, event: MidiEvent) -> None:
        """Append an event.

        Raises MidiOverflowError if the message is too large or the buffer is
        full, and ValueError for a bus out of range.
        """
        data = bytes(event.data)
        if len(data) > MIDI_MESSAGE_MAX_SIZE:
            raise MidiOverflowError("MIDI message too large")
        if not 0 <= event.bus < MAX_MIDI_BUSES:
            raise ValueError(f"invalid MIDI bus: {event.bus}")
        if not self._extensible and self._writable() < HEADER_SIZE + len(data):
            raise MidiOverflowError("MIDI buffer is full")
        self._data += _HEADER.pack(event.bus, event.offset, len(data))
        self._data += data

    def rewind(self) -> None:
        """Reset the global and per-bus read positions."""
        self._read_pos = 0
        self._read_pos_for_bus = [0] * MAX_MIDI_BUSES

    def _event_at(self, pos: int) -> tuple[MidiEvent, int]:
        bus, offset, size = _HEADER.unpack_from(self._data, pos)
        start = pos + HEADER_SIZE
        event = MidiEvent(bus, offset, bytes(self._data[start:start + size]))
        return event, start + size

    def get_next(self) -> Optional[MidiEvent]:
        """Return the next event in order, or None when all were read."""
        if self._read_pos >= len(self._data):
            return None
        event, self._read_pos = self._event_at(self._read_pos)
        return event

    def get_next_from_bus(self, bus: int) -> Optional[MidiEvent]:
        """Return the next event on ``bus``, or None if there is none."""
        if not 0 <= bus < MAX_MIDI_BUSES:
            return None
        pos = self._read_pos_for_bus[bus]
        while pos < len(self._data):
            event, next_pos = self._event_at(pos)
            if event.bus == bus:
                self._read_pos_for_bus[bus] = next_pos
                return event
            pos = next_pos
        self._read_pos_for_bus[bus] = pos
        return None

    def begin_push(self, bus: int, offset: int) -> "MidiPush":
        """Start an event whose data is written piece by piece.

        Raises MidiOverflowError if not even the header fits.
        """
        if not self._extensible and self._writable() < HEADER_SIZE:
            raise MidiOverflowError("MIDI buffer is full")
        start = len(self._data)
        self._data += _HEADER.pack(bus, offset, 0)
        return MidiPush(self, start)


class MidiPush:
    """Incremental writer of a single event into a MidiBuffer."""

    def __init__(self, midi: MidiBuffer, start: int) -> None:
        self._midi = midi
        self._start = start
        self._count = 0
        self._overflow = False

    @property
    def count(self) -> int:
        return self._count

    def write(self, data: bytes) -> bool:
        """Append bytes to the event; False once the event no longer fits."""
        if self._overflow:
            return False
        size = len(data)
        if size > MIDI_MESSAGE_MAX_SIZE or self._count + size > MIDI_MESSAGE_MAX_SIZE:
            self._overflow = True
            return False
        midi = self._midi
        if not midi._extensible and midi._writable() < size:
            self._overflow = True
            return False
        midi._data += bytes(data)
        self._count += size
        return True

    def end(self) -> None:
        """Finish the event, or discard it and raise MidiOverflowError."""
        midi = self._midi
        if self._overflow:
            del midi._data[self._start:]
            raise MidiOverflowError("MIDI event did not fit in the buffer")
        bus, offset, _ = _HEADER.unpack_from(midi._data, self._start)
        _HEADER.pack_into(midi._data, self._start, bus, offset, self._count)


_CHANNEL_SIZES = (3, 3, 3, 3, 2, 2, 3, 0)
_SYSTEM_SIZES = (0, 2, 3, 2, 1, 1, 1, 0, 1, 1, 1, 1, 1, 1, 1, 1)


def midi_sizeof(status: int) -> int:
    """Length of a MIDI message from its status byte; 0 if variable or unknown."""
    status &= 0xFF
    if status >> 7 == 0:
        return 0
    if status >> 4 != 0xF:
        return _CHANNEL_SIZES[(status >> 4) & 0x7]
    return _SYSTEM_SIZES[status & 0xF]