#!/usr/bin/env python3
"""Tests for text summaries and event dumps."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from midi_file import MidiFile
from output_generators import dump_events_to_text, note_name, summarize
from smf_fixtures import END_OF_TRACK, SIMPLE_BODY, TEMPO_120, smf, tempo_event


def test_note_names():
    assert note_name(60) == "C4"
    assert note_name(61) == "C#4"
    assert note_name(0) == "C-1"
    assert note_name(127) == "G9"


def test_summary():
    text = summarize(MidiFile.from_bytes(smf(SIMPLE_BODY)), "simple.mid")
    lines = text.splitlines()
    assert lines[0] == "MIDI file: simple.mid"
    assert "Format: 0, Tracks: 1, Division: 480 ticks/quarter" in text
    assert "Tempo: 120.0 BPM, Duration: 0.50s" in text
    assert "Events: 2, Note events: 2" in text
    assert "Tempo map" not in text


def test_summary_lists_tempo_map():
    body = TEMPO_120 + tempo_event(960, 250000) + b'\x00\x90\x3C\x64' + END_OF_TRACK
    text = summarize(MidiFile.from_bytes(smf(body)))
    assert "Tempo map:" in text
    assert "(240.00 BPM)" in text


def test_summary_of_failed_load():
    text = summarize(MidiFile.from_bytes(b'nope'), "bad.mid")
    assert text == "MIDI file: bad.mid\n  Error: File too small for MIDI header"


def test_event_dump():
    body = (
        TEMPO_120 +
        b'\x00\xC1\x05' +
        b'\x00\x90\x3C\x64' +
        b'\x00\xE2\x00\x40' +
        b'\x00\xB3\x07\x64' +
        b'\x83\x60\x90\x3C\x00' +
        END_OF_TRACK
    )
    lines = dump_events_to_text(MidiFile.from_bytes(smf(body))).splitlines()
    events = [line for line in lines if line.startswith('[')]
    assert len(events) == 5
    assert events[0].startswith("[0000]")
    assert "PROGRAM_CHANGE" in events[0] and events[0].endswith("data=05")
    assert "on  key= 60(C4  ) vel=100" in events[1]
    assert events[2].endswith("value=8192")
    assert events[3].endswith("data=07 64")
    assert "off key= 60(C4  ) vel=0" in events[4]
    assert "0.5000s" in events[4]
