"""
Standard MIDI File (SMF) chunk parsing.

Header chunk validation, per-track event decoding with running status, and
merging of all tracks into a single tick-ordered event list.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from byte_codec import read_be16, read_be24, read_be32, read_vlq
from midi_events import EventType, MidiEvent, TempoChange


HEADER_MAGIC = b'MThd'
TRACK_MAGIC = b'MTrk'

META_EVENT = 0xFF
META_SET_TEMPO = 0x51
META_END_OF_TRACK = 0x2F
SYSEX_START = 0xF0
SYSEX_ESCAPE = 0xF7


class MidiFormatError(ValueError):
    """Structural violation that makes the whole file unusable."""


@dataclass(frozen=True)
class SmfHeader:
    format: int
    num_tracks: int
    ticks_per_quarter: int


@dataclass(frozen=True)
class TrackState:
    """Running-status state machine for one track walk."""
    pos: int
    tick: int = 0
    running_status: int = 0


@dataclass
class TrackParseResult:
    events: List[MidiEvent] = field(default_factory=list)
    tempo_changes: List[TempoChange] = field(default_factory=list)
    end_pos: int = 0
    truncated: bool = False


def parse_header(data: bytes, pos: int = 0) -> Tuple[SmfHeader, int]:
    """Parse the MThd chunk.

    Args:
        data: Complete file buffer
        pos: Offset of the header chunk

    Returns:
        Tuple of (header, offset of the first track chunk)

    Raises:
        MidiFormatError: On any structural violation
    """
    if len(data) - pos < 14:
        raise MidiFormatError("File too small for MIDI header")

    if data[pos:pos + 4] != HEADER_MAGIC:
        raise MidiFormatError("Not a MIDI file (missing MThd)")
    pos += 4

    header_len = read_be32(data, pos)
    pos += 4
    if header_len < 6:
        raise MidiFormatError("Invalid header length")

    smf_format = read_be16(data, pos)
    num_tracks = read_be16(data, pos + 2)
    division = read_be16(data, pos + 4)

    if division & 0x8000:
        raise MidiFormatError("SMPTE time format not supported")

    ticks_per_quarter = division & 0x7FFF
    if ticks_per_quarter == 0:
        raise MidiFormatError("Invalid ticks per quarter note (0)")

    # Extra header bytes are skipped, not interpreted
    pos += header_len

    return SmfHeader(smf_format, num_tracks, ticks_per_quarter), pos


def _step(data: bytes, state: TrackState, end: int,
          result: TrackParseResult) -> Optional[TrackState]:
    """Decode one (delta-time, event) pair.

    Returns the next state, or None when a read would pass the track end.
    """
    delta, pos = read_vlq(data, state.pos, end)
    tick = state.tick + delta
    running_status = state.running_status

    if pos >= end:
        return None

    status = data[pos]
    if status < 0x80:
        # Running status: data byte follows, status byte omitted
        status = running_status
    else:
        pos += 1
        if status < 0xF0:
            running_status = status

    if status == META_EVENT:
        if pos >= end:
            return None
        meta_type = data[pos]
        pos += 1
        length, pos = read_vlq(data, pos, end)
        if pos + length > end:
            return None
        if meta_type == META_SET_TEMPO and length == 3:
            microseconds_per_quarter = read_be24(data, pos)
            if microseconds_per_quarter == 0:
                raise MidiFormatError("Invalid tempo (0)")
            result.tempo_changes.append(TempoChange(tick, microseconds_per_quarter))
        pos += length

    elif status in (SYSEX_START, SYSEX_ESCAPE):
        length, pos = read_vlq(data, pos, end)
        if pos + length > end:
            return None
        pos += length

    elif 0x80 <= status < 0xF0:
        event_type = EventType(status & 0xF0)
        if pos >= end:
            return None
        data1 = data[pos]
        pos += 1

        data2 = 0
        if event_type not in (EventType.PROGRAM_CHANGE, EventType.CHANNEL_PRESSURE):
            if pos >= end:
                return None
            data2 = data[pos]
            pos += 1

        result.events.append(MidiEvent(
            type=event_type,
            channel=status & 0x0F,
            data1=data1,
            data2=data2,
            tick_time=tick
        ))

    # Anything else (0xF1-0xFE, or a data byte with no running status yet)
    # carries no event; a stray data byte is read as the next delta-time.

    return TrackState(pos, tick, running_status)


def parse_track(data: bytes, pos: int) -> TrackParseResult:
    """Parse one MTrk chunk starting at pos.

    Truncation inside the track body stops this track only: events collected
    so far are kept and the result is flagged as truncated.

    Raises:
        MidiFormatError: Missing chunk header or a length beyond the buffer
    """
    if len(data) - pos < 8:
        raise MidiFormatError("Unexpected end of file (track header)")

    if data[pos:pos + 4] != TRACK_MAGIC:
        raise MidiFormatError("Invalid track header (missing MTrk)")
    pos += 4

    track_len = read_be32(data, pos)
    pos += 4

    if len(data) - pos < track_len:
        raise MidiFormatError("Track length exceeds file size")

    track_end = pos + track_len
    result = TrackParseResult(end_pos=track_end)

    state: Optional[TrackState] = TrackState(pos)
    while state is not None and state.pos < track_end:
        state = _step(data, state, track_end, result)

    result.truncated = state is None
    return result


def merge_tracks(track_events: Sequence[Sequence[MidiEvent]]) -> List[MidiEvent]:
    """Merge per-track event lists into one list ordered by tick.

    The sort is stable and keyed on tick only, so simultaneous events keep
    their track order and emission order. Format 2 files (independent
    timelines) are merged the same way as format 1.
    """
    merged: List[MidiEvent] = []
    for events in track_events:
        merged.extend(events)
    merged.sort(key=lambda e: e.tick_time)
    return merged
