#!/usr/bin/env python3
"""Tests for event records and constructors."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import dataclasses

import pytest

from midi_events import (
    EventType, MidiEvent, TempoChange,
    make_note_on, make_note_off, make_control_change, make_program_change, make_pitch_bend
)


def test_note_on_zero_velocity_is_note_off():
    event = MidiEvent(type=EventType.NOTE_ON, channel=0, data1=60, data2=0)
    assert event.is_note_off()
    assert not event.is_note_on()
    assert event.is_note_event()


def test_note_classification():
    assert make_note_on(0.0, 0, 60, 100).is_note_on()
    assert make_note_off(0.0, 0, 60).is_note_off()
    cc = make_control_change(0.0, 0, 7, 100)
    assert not cc.is_note_on()
    assert not cc.is_note_off()
    assert not cc.is_note_event()


def test_raw_status_value_is_coerced():
    event = MidiEvent(type=0x90, channel=3, data1=60, data2=1)
    assert event.type is EventType.NOTE_ON
    assert event.status_byte == 0x93


def test_invalid_fields_rejected():
    with pytest.raises(ValueError):
        MidiEvent(type=0xF0, channel=0, data1=0)
    with pytest.raises(ValueError):
        MidiEvent(type=EventType.NOTE_ON, channel=16, data1=60)
    with pytest.raises(ValueError):
        MidiEvent(type=EventType.NOTE_ON, channel=0, data1=256)


def test_events_are_immutable():
    event = make_note_on(1.0, 0, 60, 100)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.second_time = 2.0
    moved = event.with_times(480, 0.5)
    assert (moved.tick_time, moved.second_time) == (480, 0.5)
    assert event.second_time == 1.0


def test_data_byte_count():
    assert not make_program_change(0.0, 0, 5).has_second_data_byte()
    assert not MidiEvent(type=EventType.CHANNEL_PRESSURE, channel=0, data1=64).has_second_data_byte()
    for event_type in (EventType.NOTE_OFF, EventType.NOTE_ON, EventType.POLY_PRESSURE,
                       EventType.CONTROL_CHANGE, EventType.PITCH_BEND):
        assert MidiEvent(type=event_type, channel=0, data1=0).has_second_data_byte()


def test_pitch_bend_from_semitones():
    center = make_pitch_bend(0.0, 1, 0.0)
    assert (center.data1, center.data2) == (0x00, 0x40)
    assert center.pitch_bend_value == 8192

    assert make_pitch_bend(0.0, 1, 1.0).pitch_bend_value == 12288
    assert make_pitch_bend(0.0, 1, 2.0).pitch_bend_value == 0x3FFF
    assert make_pitch_bend(0.0, 1, -2.0).pitch_bend_value == 0
    assert make_pitch_bend(0.0, 1, 12.0, bend_range=12.0).pitch_bend_value == 0x3FFF


def test_pitch_bend_value_requires_pitch_bend():
    with pytest.raises(ValueError):
        make_note_on(0.0, 0, 60, 100).pitch_bend_value


def test_tempo_change_bpm():
    assert TempoChange(0, 500000).bpm == 120.0
    assert TempoChange(0, 1000000).bpm == 60.0
