"""Conversion of MIDS stream files into standard single-track MIDI files."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import Union

_U32 = 0xFFFFFFFF
_MAX_VARIABLE_LEN = 0x0FFFFFFF

_RIFF = b"RIFF"
_MIDS = b"MIDS"
_FMT = b"fmt "
_DATA = b"data"

_HEADER_SIZE = 14
_TRACK_HEADER_SIZE = 8
_META_SET_TEMPO = b"\xff\x51\x03"
_META_END_TRACK = b"\x00\xff\x2f\x00"

_EVENT_SHORT_MESSAGE = 0
_EVENT_TEMPO = 1


class MdsFormatError(ValueError):
    """Raised when MIDS data is malformed."""


@dataclass(frozen=True)
class MidiEvent:
    """A MIDS event: absolute time in ticks and the packed event word."""

    ticks: int
    event: int


def swap_byte_order_int(value: int) -> int:
    """Reverse the byte order of a 32-bit value."""
    return int.from_bytes((value & _U32).to_bytes(4, "little"), "big")


def swap_byte_order_short(value: int) -> int:
    """Reverse the byte order of a 16-bit value."""
    return int.from_bytes((value & 0xFFFF).to_bytes(2, "little"), "big")


def to_variable_len(value: int) -> bytes:
    """Encode ``value`` as a MIDI variable-length quantity."""
    if not 0 <= value <= _MAX_VARIABLE_LEN:
        raise ValueError(f"value out of range for a variable-length quantity: {value}")
    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(groups))


def _read_u32(data: bytes, offset: int, count: int = 1) -> tuple[int, ...]:
    try:
        return struct.unpack_from(f"<{count}I", data, offset)
    except struct.error as exc:
        raise MdsFormatError("truncated MIDS data") from exc


def _parse_events(data: bytes) -> tuple[int, list[MidiEvent]]:
    """Validate MIDS data and return its time format and sorted events."""
    size = len(data)
    if size < 12:
        raise MdsFormatError("file too short")
    if data[0:4] != _RIFF or data[8:12] != _MIDS or data[12:16] != _FMT:
        raise MdsFormatError("not a RIFF MIDS file")
    (file_size,) = _read_u32(data, 4)
    if file_size > size - 8:
        raise MdsFormatError("RIFF size exceeds file size")
    if size - 12 < 8:
        raise MdsFormatError("file too short")
    (fmt_size,) = _read_u32(data, 16)
    if fmt_size < 12 or fmt_size > size - 12:
        raise MdsFormatError("bad format chunk size")

    time_format, _max_buffer, flags = _read_u32(data, 20, 3)
    stream_id_used = flags == 0

    data_offset = 20 + fmt_size
    if data[data_offset:data_offset + 4] != _DATA:
        raise MdsFormatError("missing data chunk")
    data_size, block_count = _read_u32(data, data_offset + 4, 2)
    if data_size < 4:
        raise MdsFormatError("data chunk too small")

    words_per_event = 3 if stream_id_used else 2
    event_index = 2 if stream_id_used else 1
    events: list[MidiEvent] = []
    offset = data_offset + 12
    for _ in range(block_count):
        ticks, buffer_size = _read_u32(data, offset, 2)
        payload = offset + 8
        event_count = buffer_size // (4 * words_per_event)
        for n in range(event_count):
            words = _read_u32(data, payload + n * 4 * words_per_event, words_per_event)
            ticks = (ticks + words[0]) & _U32
            events.append(MidiEvent(ticks, words[event_index]))
        offset = payload + buffer_size

    # Events may be stored out of order.
    events.sort(key=lambda e: e.ticks)
    return time_format, events


def _encode_event(event: int) -> bytes:
    kind = event >> 24
    if kind == _EVENT_SHORT_MESSAGE:
        status = event & 0xF0
        length = 2 if status in (0xC0, 0xD0) else 3
        return event.to_bytes(4, "little")[:length]
    if kind == _EVENT_TEMPO:
        return _META_SET_TEMPO + event.to_bytes(4, "big")[1:]
    raise MdsFormatError(f"unknown MIDS event type {kind}")


def mds_to_midi(data: bytes) -> bytes:
    """Convert the contents of a MIDS file into a format 0 MIDI file."""
    time_format, events = _parse_events(data)

    track = bytearray()
    previous = 0
    for event in events:
        track += to_variable_len(event.ticks - previous)
        previous = event.ticks
        track += _encode_event(event.event)
    track += _META_END_TRACK

    header = b"MThd" + struct.pack(">IhHH", 6, 0, 1, time_format & 0xFFFF)
    return header + b"MTrk" + struct.pack(">I", len(track)) + bytes(track)


def mds_file_to_midi(path: Union[str, os.PathLike]) -> bytes:
    """Read a MIDS file from ``path`` and convert it to MIDI.

    Raises OSError if the file cannot be read and MdsFormatError if it is
    malformed.
    """
    with open(path, "rb") as handle:
        return mds_to_midi(handle.read())