"""
Standard MIDI File reader/writer.

Supports format 0 and 1 files. All tracks are merged into a single event list
sorted by tick. Format 2 files are accepted but merged the same way, so their
independent track timelines are not preserved.
"""

import sys
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from format_smf import MidiFormatError, merge_tracks, parse_header, parse_track
from midi_events import MidiEvent, TempoChange
from smf_writer import encode_smf
from tempo_map import TempoMap


class MidiFile:
    """A parsed MIDI file.

    Built once from raw bytes and read-only afterwards. Load failures do not
    raise; check has_error() and error instead.
    """

    def __init__(self):
        self._error = ""
        self._format = 0
        self._num_tracks = 0
        self._ticks_per_quarter = 480
        self._duration_seconds = 0.0
        self._truncated_tracks = 0
        self._tempo_map = TempoMap([], self._ticks_per_quarter)
        self._events: Tuple[MidiEvent, ...] = ()

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'MidiFile':
        """Load a MIDI file from disk."""
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            midi = cls()
            midi._error = f"Could not open file: {e}"
            return midi
        return cls.from_bytes(data, source=str(path))

    @classmethod
    def from_bytes(cls, data: bytes, source: str = "<bytes>") -> 'MidiFile':
        """Parse a complete MIDI file held in memory."""
        midi = cls()
        try:
            midi._parse(bytes(data))
        except MidiFormatError as e:
            # Discard anything parsed before the failure
            midi = cls()
            midi._error = str(e)
            return midi

        if midi._truncated_tracks:
            print(f"WARNING: {source}: {midi._truncated_tracks} truncated track(s), "
                  f"kept {len(midi._events)} events", file=sys.stderr)
        return midi

    def _parse(self, data: bytes):
        header, pos = parse_header(data)
        self._format = header.format
        self._num_tracks = header.num_tracks
        self._ticks_per_quarter = header.ticks_per_quarter

        track_events: List[List[MidiEvent]] = []
        tempo_changes: List[TempoChange] = []
        for _ in range(header.num_tracks):
            track = parse_track(data, pos)
            track_events.append(track.events)
            tempo_changes.extend(track.tempo_changes)
            if track.truncated:
                self._truncated_tracks += 1
            pos = track.end_pos

        events = merge_tracks(track_events)

        self._tempo_map = TempoMap(tempo_changes, self._ticks_per_quarter)

        self._events = tuple(
            e.with_times(e.tick_time, self._tempo_map.seconds_at(e.tick_time)) for e in events
        )
        max_tick = max((e.tick_time for e in events), default=0)
        self._duration_seconds = self._tempo_map.seconds_at(max_tick)

    def has_error(self) -> bool:
        return bool(self._error)

    @property
    def error(self) -> str:
        return self._error

    @property
    def format(self) -> int:
        return self._format

    @property
    def num_tracks(self) -> int:
        return self._num_tracks

    @property
    def ticks_per_quarter(self) -> int:
        return self._ticks_per_quarter

    @property
    def tempo(self) -> float:
        """Nominal tempo in BPM (first tempo change, 120 if none)."""
        return self._tempo_map.bpm

    @property
    def tempo_map(self) -> TempoMap:
        return self._tempo_map

    @property
    def duration_seconds(self) -> float:
        return self._duration_seconds

    @property
    def truncated_tracks(self) -> int:
        return self._truncated_tracks

    @property
    def events(self) -> Tuple[MidiEvent, ...]:
        """All channel events, sorted by tick."""
        return self._events

    def note_events(self) -> List[MidiEvent]:
        """Note-on and note-off events only (zero-velocity note-ons count as note-offs)."""
        return [e for e in self._events if e.is_note_event()]

    def seconds_at(self, tick: int) -> float:
        return self._tempo_map.seconds_at(tick)

    def tick_at(self, seconds: float) -> float:
        """Fractional tick at a wall-clock time, following the file's tempo map."""
        return self._tempo_map.tick_at(seconds)

    @staticmethod
    def save(path: Union[str, Path], events: Sequence[MidiEvent],
             tempo: float = 120.0, ticks_per_quarter: int = 480) -> bool:
        """Write events (positioned by second_time) as a format 0 file.

        Returns:
            True on success, False if the file could not be written
        """
        data = encode_smf(events, tempo, ticks_per_quarter)
        try:
            Path(path).write_bytes(data)
        except OSError as e:
            print(f"ERROR: Could not write {path}: {e}", file=sys.stderr)
            return False
        return True
