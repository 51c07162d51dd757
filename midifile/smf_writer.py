"""
Single-track (format 0) Standard MIDI File writer.
"""

from typing import List, Sequence, Tuple

from byte_codec import encode_vlq, write_be16, write_be24, write_be32
from format_smf import (
    HEADER_MAGIC, TRACK_MAGIC, META_EVENT, META_SET_TEMPO, META_END_OF_TRACK
)
from midi_events import MidiEvent


def seconds_to_tick(second_time: float, tempo: float, ticks_per_quarter: int) -> int:
    """Tick position of second_time at a constant tempo (BPM)."""
    return int(round(second_time * ticks_per_quarter * tempo / 60.0))


def encode_smf(events: Sequence[MidiEvent], tempo: float = 120.0,
               ticks_per_quarter: int = 480) -> bytes:
    """Serialize events into a format 0 MIDI file.

    Event positions come from second_time only; tick_time is ignored. The
    declared tempo is written as the single tempo event at tick 0 and is used
    for every seconds-to-ticks conversion.

    Args:
        events: Events in any order, each with second_time set
        tempo: Tempo in BPM
        ticks_per_quarter: Division written to the header

    Returns:
        Complete file bytes
    """
    if tempo <= 0:
        raise ValueError(f"Tempo must be positive: {tempo}")
    if not 0 < ticks_per_quarter <= 0x7FFF:
        raise ValueError(f"Ticks per quarter note out of range: {ticks_per_quarter}")

    timed: List[Tuple[int, MidiEvent]] = []
    for event in events:
        if event.second_time < 0:
            raise ValueError(f"Negative event time: {event.second_time}")
        timed.append((seconds_to_tick(event.second_time, tempo, ticks_per_quarter), event))

    # At equal ticks, higher status first: note-on (0x90) before note-off (0x80)
    timed.sort(key=lambda item: (item[0], -int(item[1].type)))

    track = bytearray()

    microseconds_per_quarter = int(60000000.0 / tempo)
    track += encode_vlq(0)
    track += bytes([META_EVENT, META_SET_TEMPO, 0x03])
    track += write_be24(microseconds_per_quarter)

    last_tick = 0
    for tick, event in timed:
        track += encode_vlq(tick - last_tick)
        last_tick = tick

        track.append(event.status_byte)
        track.append(event.data1)
        if event.has_second_data_byte():
            track.append(event.data2)

    track += encode_vlq(0)
    track += bytes([META_EVENT, META_END_OF_TRACK, 0x00])

    data = bytearray()
    data += HEADER_MAGIC
    data += write_be32(6)
    data += write_be16(0)  # Format 0
    data += write_be16(1)  # One track
    data += write_be16(ticks_per_quarter)
    data += TRACK_MAGIC
    data += write_be32(len(track))
    data += track
    return bytes(data)
