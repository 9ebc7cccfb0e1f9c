"""Reading of RIFF/WAVE audio files as floating-point samples."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Callable, Dict, List, Optional, Tuple

_FORMAT_PCM = 1
_FORMAT_IEEE_FLOAT = 3
_FORMAT_EXTENSIBLE = 0xFFFE


class WavFormatError(ValueError):
    """Raised when a file is not a WAVE file this reader can decode."""


@dataclass(frozen=True)
class AudioFileInfo:
    """Channel count and sample rate of an audio file."""

    channels: int
    sample_rate: float


def _decode_pcm8(raw: bytes) -> List[float]:
    return [(byte - 128) / 128.0 for byte in raw]


def _decode_pcm16(raw: bytes) -> List[float]:
    count = len(raw) // 2
    return [value / 32768.0 for value in struct.unpack(f"<{count}h", raw[:2 * count])]


def _decode_pcm24(raw: bytes) -> List[float]:
    return [
        int.from_bytes(raw[pos:pos + 3], "little", signed=True) / 8388608.0
        for pos in range(0, len(raw) - 2, 3)
    ]


def _decode_pcm32(raw: bytes) -> List[float]:
    count = len(raw) // 4
    return [value / 2147483648.0 for value in struct.unpack(f"<{count}i", raw[:4 * count])]


def _decode_f32(raw: bytes) -> List[float]:
    count = len(raw) // 4
    return list(struct.unpack(f"<{count}f", raw[:4 * count]))


def _decode_f64(raw: bytes) -> List[float]:
    count = len(raw) // 8
    return list(struct.unpack(f"<{count}d", raw[:8 * count]))


_DECODERS: Dict[Tuple[int, int], Callable[[bytes], List[float]]] = {
    (_FORMAT_PCM, 8): _decode_pcm8,
    (_FORMAT_PCM, 16): _decode_pcm16,
    (_FORMAT_PCM, 24): _decode_pcm24,
    (_FORMAT_PCM, 32): _decode_pcm32,
    (_FORMAT_IEEE_FLOAT, 32): _decode_f32,
    (_FORMAT_IEEE_FLOAT, 64): _decode_f64,
}


class WavReader:
    """Sequential reader of interleaved samples from a WAVE file.

    Reads are counted in samples, not frames, so a read may end in the middle
    of a frame and the next one continues from there.
    """

    def __init__(self, path: str) -> None:
        self._file: Optional[BinaryIO] = open(path, "rb")
        try:
            self._parse_header()
        except BaseException:
            self._file.close()
            self._file = None
            raise
        self._pos = 0

    def _parse_header(self) -> None:
        stream = self._file
        assert stream is not None
        riff = stream.read(12)
        if len(riff) < 12 or riff[:4] != b"RIFF" or riff[8:12] != b"WAVE":
            raise WavFormatError("not a RIFF/WAVE file")

        file_size = os.fstat(stream.fileno()).st_size
        fmt: Optional[bytes] = None
        data_offset: Optional[int] = None
        data_size = 0

        while True:
            head = stream.read(8)
            if len(head) < 8:
                break
            chunk_id = head[:4]
            (size,) = struct.unpack("<I", head[4:])
            start = stream.tell()
            if chunk_id == b"fmt ":
                fmt = stream.read(size)
            elif chunk_id == b"data":
                data_offset = start
                data_size = max(0, min(size, file_size - start))
                if fmt is not None:
                    break
            stream.seek(start + size + (size & 1))

        if fmt is None or len(fmt) < 16:
            raise WavFormatError("missing or truncated format chunk")
        if data_offset is None:
            raise WavFormatError("missing data chunk")

        code, channels, sample_rate, _, block_align, bits = struct.unpack("<HHIIHH", fmt[:16])
        if code == _FORMAT_EXTENSIBLE and len(fmt) >= 40:
            (code,) = struct.unpack("<H", fmt[24:26])
        if channels == 0:
            raise WavFormatError("file has no channels")
        decoder = _DECODERS.get((code, bits))
        if decoder is None:
            raise WavFormatError(f"unsupported sample format {code} with {bits} bits")
        sample_bytes = bits // 8
        if block_align < channels * sample_bytes:
            raise WavFormatError("invalid block alignment")

        self._channels = channels
        self._sample_rate = float(sample_rate)
        self._decoder = decoder
        self._sample_bytes = sample_bytes
        self._stride = block_align
        self._data_offset = data_offset
        self._total_samples = (data_size // block_align) * channels

    def info(self) -> AudioFileInfo:
        """Return the channel count and sample rate."""
        return AudioFileInfo(self._channels, self._sample_rate)

    def avail(self) -> int:
        """Number of samples left to read."""
        return self._total_samples - self._pos

    def rewind(self) -> None:
        """Go back to the first sample."""
        self._pos = 0

    def _read_frames(self, first: int, count: int) -> bytes:
        stream = self._file
        if stream is None:
            raise ValueError("read from a closed WavReader")
        stream.seek(self._data_offset + first * self._stride)
        raw = stream.read(count * self._stride)
        frame_bytes = self._channels * self._sample_bytes
        if self._stride == frame_bytes:
            return raw
        view = memoryview(raw)
        return b"".join(
            view[pos:pos + frame_bytes] for pos in range(0, len(raw), self._stride)
        )

    def read(self, count: int) -> List[float]:
        """Read up to ``count`` interleaved samples."""
        count = min(count, self.avail())
        if count <= 0:
            return []
        channels = self._channels
        first_frame, skip = divmod(self._pos, channels)
        end_frame = -(-(self._pos + count) // channels)
        raw = self._read_frames(first_frame, end_frame - first_frame)
        samples = self._decoder(raw)[skip:skip + count]
        self._pos += len(samples)
        return samples

    def close(self) -> None:
        """Release the file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "WavReader":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class WavFormat:
    """Audio format handler for ``.wav`` files."""

    def can_handle(self, path: str) -> bool:
        """True if the path has a ``wav`` extension, in any case."""
        extension = os.path.splitext(path)[1]
        return extension[1:].lower() == "wav"

    def open(self, path: str) -> WavReader:
        """Open a reader; raises OSError or WavFormatError on failure."""
        return WavReader(path)