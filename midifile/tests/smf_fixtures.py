"""Raw SMF byte builders shared by the tests."""

import struct

from byte_codec import encode_vlq


TEMPO_120 = b'\x00\xFF\x51\x03\x07\xA1\x20'
END_OF_TRACK = b'\x00\xFF\x2F\x00'


def header(fmt: int = 0, num_tracks: int = 1, division: int = 480, extra: bytes = b'') -> bytes:
    return b'MThd' + struct.pack('>IHHH', 6 + len(extra), fmt, num_tracks, division) + extra


def track(body: bytes, declared_len: int = None) -> bytes:
    length = len(body) if declared_len is None else declared_len
    return b'MTrk' + struct.pack('>I', length) + body


def tempo_event(delta: int, microseconds_per_quarter: int) -> bytes:
    return encode_vlq(delta) + b'\xFF\x51\x03' + microseconds_per_quarter.to_bytes(3, 'big')


def smf(*bodies: bytes, fmt: int = None, division: int = 480) -> bytes:
    """Complete file with one track per body."""
    if fmt is None:
        fmt = 0 if len(bodies) == 1 else 1
    return header(fmt, len(bodies), division) + b''.join(track(b) for b in bodies)


# Tempo 120, note-on C4 at tick 0, note-off at tick 480
SIMPLE_BODY = (
    TEMPO_120 +
    b'\x00\x90\x3C\x64' +
    b'\x83\x60\x80\x3C\x40' +
    END_OF_TRACK
)
