"""Byte stream helpers shared by the MIDI chunk decoder."""
from __future__ import annotations

from .models import MidiErrorKind, MidiImportError

MAX_VARLEN_BYTES = 4
MAX_VARLEN_VALUE = 0x0FFFFFFF


class StreamReader:
    """Big-endian reader over an immutable buffer with a sticky error flag.

    Reads only advance the cursor when they succeed. The first failure is
    recorded in :attr:`error` and every later read returns a sentinel
    (``b""`` or ``0``) without touching the cursor, so callers can check for
    failure once per event rather than after each primitive.
    """

    __slots__ = ("_data", "_length", "_position", "_error")

    def __init__(self, data: bytes):
        self._data = memoryview(bytes(data))
        self._length = len(self._data)
        self._position = 0
        self._error: MidiImportError | None = None

    @property
    def remaining(self) -> int:
        return self._length - self._position

    @property
    def at_end(self) -> bool:
        return self._position >= self._length

    @property
    def error(self) -> MidiImportError | None:
        return self._error

    @property
    def failed(self) -> bool:
        return self._error is not None

    def tell(self) -> int:
        return self._position

    def fail(self, kind: MidiErrorKind, detail: str, *, offset: int | None = None) -> None:
        """Record ``kind`` unless an earlier failure is already pending."""

        if self._error is None:
            position = self._position if offset is None else offset
            self._error = MidiImportError(kind, position, detail)

    def raise_for_error(self) -> None:
        if self._error is not None:
            raise self._error

    def read_fixed(self, size: int) -> bytes:
        if self._error is not None:
            return b""
        if size < 0:
            raise ValueError("Size must be non-negative.")
        if self.remaining < size:
            self.fail(
                MidiErrorKind.TRUNCATED_STREAM,
                f"needed {size} byte(s), {self.remaining} left",
            )
            return b""
        start = self._position
        self._position += size
        return bytes(self._data[start : start + size])

    def read_byte(self) -> int:
        data = self.read_fixed(1)
        return data[0] if data else 0

    def peek_byte(self) -> int:
        if self._error is not None:
            return 0
        if self.at_end:
            self.fail(MidiErrorKind.TRUNCATED_STREAM, "needed 1 byte, 0 left")
            return 0
        return self._data[self._position]

    def read_be16(self) -> int:
        return int.from_bytes(self.read_fixed(2), "big")

    def read_be24(self) -> int:
        return int.from_bytes(self.read_fixed(3), "big")

    def read_be32(self) -> int:
        return int.from_bytes(self.read_fixed(4), "big")

    def read_varlen(self) -> int:
        """Decode a variable-length quantity of at most four bytes."""

        if self._error is not None:
            return 0
        start = self._position
        value = 0
        for index in range(self._length - start):
            byte = self._data[start + index]
            value = (value << 7) | (byte & 0x7F)
            if byte & 0x80 == 0:
                self._position = start + index + 1
                return value
            if index + 1 >= MAX_VARLEN_BYTES:
                self.fail(
                    MidiErrorKind.MALFORMED_TRACK,
                    "variable-length quantity exceeds four bytes",
                    offset=start,
                )
                return 0
        self.fail(
            MidiErrorKind.TRUNCATED_STREAM,
            "stream ended inside a variable-length quantity",
            offset=start,
        )
        return 0

    def skip(self, size: int) -> None:
        self.read_fixed(size)

    def seek(self, offset: int) -> None:
        if self._error is not None:
            return
        if not 0 <= offset <= self._length:
            self.fail(MidiErrorKind.TRUNCATED_STREAM, f"cannot seek to byte {offset}")
            return
        self._position = offset


def encode_varlen(value: int) -> bytes:
    """Encode ``value`` as a MIDI variable-length quantity."""

    if not 0 <= value <= MAX_VARLEN_VALUE:
        raise ValueError(f"Variable-length value out of range: {value}")
    buffer = [value & 0x7F]
    value >>= 7
    while value:
        buffer.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(buffer))


def decode_varlen(data: bytes) -> int:
    """Decode a single variable-length quantity, raising on malformed input."""

    reader = StreamReader(data)
    value = reader.read_varlen()
    reader.raise_for_error()
    return value


__all__ = [
    "MAX_VARLEN_BYTES",
    "MAX_VARLEN_VALUE",
    "StreamReader",
    "decode_varlen",
    "encode_varlen",
]
