"""
Tempo map and tick/seconds conversion.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from midi_events import DEFAULT_MICROSECONDS_PER_QUARTER, TempoChange


@dataclass(frozen=True)
class TimePoint:
    """Start of a constant-tempo segment."""
    tick: int
    seconds: float
    microseconds_per_quarter: int


class TempoMap:
    """Piecewise-linear mapping from ticks to seconds.

    Built once from the tempo changes found in a file. Changes are sorted by
    tick (stable, so the last of several changes at one tick wins); an empty
    map gets a single 120 BPM entry at tick 0.
    """

    def __init__(self, tempo_changes: Iterable[TempoChange], ticks_per_quarter: int):
        if ticks_per_quarter <= 0:
            raise ValueError(f"Invalid ticks per quarter note: {ticks_per_quarter}")
        self.ticks_per_quarter = ticks_per_quarter

        changes = sorted(tempo_changes, key=lambda t: t.tick)
        if not changes:
            changes = [TempoChange(0, DEFAULT_MICROSECONDS_PER_QUARTER)]
        self.changes: Tuple[TempoChange, ...] = tuple(changes)

        self.time_points: Tuple[TimePoint, ...] = tuple(self._build_time_points())
        self._point_ticks = [tp.tick for tp in self.time_points]

    def _build_time_points(self) -> List[TimePoint]:
        current_tempo = DEFAULT_MICROSECONDS_PER_QUARTER
        points = [TimePoint(0, 0.0, current_tempo)]
        seconds = 0.0
        last_tick = 0

        for change in self.changes:
            if change.tick == 0:
                # Tempo in effect from the start
                points[0] = TimePoint(0, 0.0, change.microseconds_per_quarter)
                current_tempo = change.microseconds_per_quarter
                continue

            seconds += self._segment_seconds(change.tick - last_tick, current_tempo)
            last_tick = change.tick
            current_tempo = change.microseconds_per_quarter
            points.append(TimePoint(change.tick, seconds, current_tempo))

        return points

    def _segment_seconds(self, delta_ticks: float, microseconds_per_quarter: int) -> float:
        return (delta_ticks * microseconds_per_quarter) / (self.ticks_per_quarter * 1000000.0)

    @property
    def bpm(self) -> float:
        """Nominal tempo: the first tempo change, 120 BPM if the file has none."""
        return self.changes[0].bpm

    def seconds_at(self, tick: int) -> float:
        """Convert an absolute tick to seconds."""
        idx = max(bisect_right(self._point_ticks, tick) - 1, 0)
        tp = self.time_points[idx]
        return tp.seconds + self._segment_seconds(tick - tp.tick, tp.microseconds_per_quarter)

    def tick_at(self, seconds: float) -> float:
        """Convert seconds to a (fractional) absolute tick.

        Public inverse of seconds_at, exposed through MidiFile.tick_at for
        callers that place wall-clock events against a loaded file.
        """
        idx = 0
        for i, tp in enumerate(self.time_points):
            if tp.seconds > seconds:
                break
            idx = i
        tp = self.time_points[idx]
        ticks_per_second = self.ticks_per_quarter * 1000000.0 / tp.microseconds_per_quarter
        return tp.tick + (seconds - tp.seconds) * ticks_per_second

    def __len__(self) -> int:
        return len(self.changes)
