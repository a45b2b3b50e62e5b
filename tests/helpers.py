"""Byte-level builders for hand-made Standard MIDI Files."""

from __future__ import annotations

import struct
from typing import Iterable


def vlq(value: int) -> bytes:
    """Encode ``value`` as a variable-length quantity (written independently of the codec)."""

    chunks = [value & 0x7F]
    while value > 0x7F:
        value >>= 7
        chunks.insert(0, 0x80 | (value & 0x7F))
    return bytes(chunks)


def header_chunk(format_version: int = 0, tracks: int = 1, division: int = 480) -> bytes:
    return b"MThd" + struct.pack(">IHHH", 6, format_version, tracks, division)


def track_chunk(*events: bytes, length: int | None = None) -> bytes:
    """Wrap raw ``delta + message`` event bytes in an ``MTrk`` chunk.

    ``length`` overrides the declared chunk length (it is written as a
    signed 32-bit value, so negative lengths are possible).
    """

    body = b"".join(events)
    declared = len(body) if length is None else length
    return b"MTrk" + struct.pack(">i", declared) + body


def midi_file(*tracks: bytes, format_version: int = 0, division: int = 480) -> bytes:
    return header_chunk(format_version, len(tracks), division) + b"".join(tracks)


def note_on(delta: int, pitch: int, velocity: int = 100, channel: int = 0) -> bytes:
    return vlq(delta) + bytes([0x90 | channel, pitch, velocity])


def note_off(delta: int, pitch: int, velocity: int = 64, channel: int = 0) -> bytes:
    return vlq(delta) + bytes([0x80 | channel, pitch, velocity])


def meta(delta: int, meta_type: int, payload: bytes = b"") -> bytes:
    return vlq(delta) + bytes([0xFF, meta_type]) + vlq(len(payload)) + payload


def end_of_track(delta: int = 0) -> bytes:
    return meta(delta, 0x2F)


def tempo(delta: int, microseconds_per_quarter: int) -> bytes:
    return meta(delta, 0x51, microseconds_per_quarter.to_bytes(3, "big"))


def single_track_file(events: Iterable[bytes], *, division: int = 480) -> bytes:
    """A format-0 file holding ``events`` followed by end-of-track."""

    return midi_file(track_chunk(*events, end_of_track()), division=division)


def minimal_note_file() -> bytes:
    """Middle C lasting 480 ticks on channel 0."""

    return single_track_file([note_on(0, 60), note_off(480, 60)])
