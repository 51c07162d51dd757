"""
Byte-level primitives for Standard MIDI Files.

Variable-length quantities (delta-times, meta/sysex lengths) and fixed-width
big/little-endian integers. The little-endian helpers are public API for
RIFF/WAV-style callers; the SMF code itself only uses the big-endian ones.
"""

import struct
from typing import Tuple


# Largest value that fits in a 4-byte VLQ
VLQ_MAX = 0x0FFFFFFF


def read_vlq(data: bytes, pos: int, end: int) -> Tuple[int, int]:
    """Decode a variable-length quantity starting at pos.

    Each byte contributes its low 7 bits, most significant group first.
    A byte with the high bit clear terminates the sequence. If end is reached
    first, the value accumulated so far is returned.

    Args:
        data: Source buffer
        pos: Offset of the first VLQ byte
        end: Offset one past the last readable byte

    Returns:
        Tuple of (value, offset after the last consumed byte)
    """
    value = 0
    while pos < end:
        byte = data[pos]
        pos += 1
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            break
    return value, pos


def encode_vlq(value: int) -> bytes:
    """Encode value as a minimal variable-length quantity."""
    if value < 0 or value > VLQ_MAX:
        raise ValueError(f"VLQ value out of range: {value}")

    groups = [value & 0x7F]
    value >>= 7
    while value > 0:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(groups))


def read_be16(data: bytes, pos: int) -> int:
    return struct.unpack_from('>H', data, pos)[0]


def read_be24(data: bytes, pos: int) -> int:
    hi, lo = struct.unpack_from('>BH', data, pos)
    return (hi << 16) | lo


def read_be32(data: bytes, pos: int) -> int:
    return struct.unpack_from('>I', data, pos)[0]


def read_le16(data: bytes, pos: int) -> int:
    return struct.unpack_from('<H', data, pos)[0]


def read_le32(data: bytes, pos: int) -> int:
    return struct.unpack_from('<I', data, pos)[0]


def write_be16(value: int) -> bytes:
    return struct.pack('>H', value)


def write_be24(value: int) -> bytes:
    if value < 0 or value > 0xFFFFFF:
        raise ValueError(f"24-bit value out of range: {value}")
    return struct.pack('>BH', value >> 16, value & 0xFFFF)


def write_be32(value: int) -> bytes:
    return struct.pack('>I', value)


def write_le16(value: int) -> bytes:
    return struct.pack('<H', value)


def write_le32(value: int) -> bytes:
    return struct.pack('<I', value)
