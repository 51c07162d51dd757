#!/usr/bin/env python3
"""
Event records for Standard MIDI File data.
Channel voice messages decoded from (or destined for) a single merged timeline.
"""

from dataclasses import dataclass, replace
from enum import IntEnum


class EventType(IntEnum):
    """Channel voice message categories (status byte with the channel stripped)."""
    NOTE_OFF = 0x80
    NOTE_ON = 0x90
    POLY_PRESSURE = 0xA0
    CONTROL_CHANGE = 0xB0
    PROGRAM_CHANGE = 0xC0
    CHANNEL_PRESSURE = 0xD0
    PITCH_BEND = 0xE0


# Messages that carry a single data byte
ONE_DATA_BYTE_TYPES = (EventType.PROGRAM_CHANGE, EventType.CHANNEL_PRESSURE)

DEFAULT_MICROSECONDS_PER_QUARTER = 500000  # 120 BPM
PITCH_BEND_CENTER = 8192


@dataclass(frozen=True)
class MidiEvent:
    """A single channel voice message on the merged timeline.

    tick_time is the absolute tick in the source file. second_time is derived
    from the tempo map once the whole file is parsed; events handed to the
    writer only need second_time.
    """
    type: EventType
    channel: int
    data1: int
    data2: int = 0
    tick_time: int = 0
    second_time: float = 0.0

    def __post_init__(self):
        # Accept raw status values (0x90) as well as EventType members
        object.__setattr__(self, 'type', EventType(self.type))
        if not 0 <= self.channel <= 0x0F:
            raise ValueError(f"MIDI channel out of range: {self.channel}")
        if not (0 <= self.data1 <= 0xFF and 0 <= self.data2 <= 0xFF):
            raise ValueError(f"MIDI data byte out of range: {self.data1}, {self.data2}")
        if self.tick_time < 0:
            raise ValueError(f"Negative tick time: {self.tick_time}")

    @property
    def status_byte(self) -> int:
        return int(self.type) | self.channel

    def is_note_on(self) -> bool:
        """Note-on with non-zero velocity."""
        return self.type == EventType.NOTE_ON and self.data2 > 0

    def is_note_off(self) -> bool:
        """Note-off, including note-on with zero velocity."""
        return self.type == EventType.NOTE_OFF or (self.type == EventType.NOTE_ON and self.data2 == 0)

    def is_note_event(self) -> bool:
        return self.is_note_on() or self.is_note_off()

    def has_second_data_byte(self) -> bool:
        return self.type not in ONE_DATA_BYTE_TYPES

    @property
    def pitch_bend_value(self) -> int:
        """14-bit pitch bend value (0-16383, 8192 = center)."""
        if self.type != EventType.PITCH_BEND:
            raise ValueError(f"Not a pitch bend event: {self.type.name}")
        return (self.data2 & 0x7F) << 7 | (self.data1 & 0x7F)

    def with_times(self, tick_time: int, second_time: float) -> 'MidiEvent':
        return replace(self, tick_time=tick_time, second_time=second_time)


@dataclass(frozen=True)
class TempoChange:
    """Set Tempo meta event (0xFF 0x51 with a 3-byte payload)."""
    tick: int
    microseconds_per_quarter: int

    @property
    def bpm(self) -> float:
        return 60000000.0 / self.microseconds_per_quarter


# Helper functions to create events

def make_note_on(second_time: float, channel: int, key: int, velocity: int) -> MidiEvent:
    """Create a note-on event."""
    return MidiEvent(
        type=EventType.NOTE_ON,
        channel=channel,
        data1=key,
        data2=velocity,
        second_time=second_time
    )


def make_note_off(second_time: float, channel: int, key: int, velocity: int = 64) -> MidiEvent:
    """Create a note-off event (64 = default release velocity)."""
    return MidiEvent(
        type=EventType.NOTE_OFF,
        channel=channel,
        data1=key,
        data2=velocity,
        second_time=second_time
    )


def make_control_change(second_time: float, channel: int, controller: int, value: int) -> MidiEvent:
    """Create a control change event."""
    return MidiEvent(
        type=EventType.CONTROL_CHANGE,
        channel=channel,
        data1=controller,
        data2=value,
        second_time=second_time
    )


def make_program_change(second_time: float, channel: int, program: int) -> MidiEvent:
    """Create a program change event."""
    return MidiEvent(
        type=EventType.PROGRAM_CHANGE,
        channel=channel,
        data1=program,
        second_time=second_time
    )


def make_pitch_bend(second_time: float, channel: int, semitones: float,
                    bend_range: float = 2.0) -> MidiEvent:
    """Create a pitch bend event from a tuning offset in semitones.

    bend_range is the receiver's bend range in semitones (typically +/-2).
    The 14-bit value is split LSB-first into data1/data2.
    """
    value = int(PITCH_BEND_CENTER + (semitones / bend_range) * PITCH_BEND_CENTER)
    value = max(0, min(value, 0x3FFF))
    return MidiEvent(
        type=EventType.PITCH_BEND,
        channel=channel,
        data1=value & 0x7F,
        data2=(value >> 7) & 0x7F,
        second_time=second_time
    )
