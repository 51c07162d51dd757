"""
Text output for parsed MIDI files.

Generates a short summary and a one-line-per-event dump.
"""

from typing import List

from midi_events import EventType


# Note names for text output
NOTE_NAMES = ["C ", "C#", "D ", "D#", "E ", "F ", "F#",
              "G ", "G#", "A ", "A#", "B "]


def note_name(key: int) -> str:
    """Note name with octave, MIDI key 60 = C4."""
    return f"{NOTE_NAMES[key % 12].strip()}{key // 12 - 1}"


def summarize(midi, source: str = "") -> str:
    """Generate a short header/tempo summary of a loaded file.

    Args:
        midi: Loaded MidiFile
        source: Optional file name for the first line

    Returns:
        Formatted summary text
    """
    output = []
    if source:
        output.append(f"MIDI file: {source}")
    if midi.has_error():
        output.append(f"  Error: {midi.error}")
        return '\n'.join(output)

    output.append(f"  Format: {midi.format}, Tracks: {midi.num_tracks}, "
                  f"Division: {midi.ticks_per_quarter} ticks/quarter")
    output.append(f"  Tempo: {midi.tempo:.1f} BPM, Duration: {midi.duration_seconds:.2f}s")
    output.append(f"  Events: {len(midi.events)}, Note events: {len(midi.note_events())}")
    if midi.truncated_tracks:
        output.append(f"  Truncated tracks: {midi.truncated_tracks}")

    if len(midi.tempo_map) > 1:
        output.append("  Tempo map:")
        for change in midi.tempo_map.changes:
            output.append(f"    tick {change.tick:8d}  {change.microseconds_per_quarter:8d} us/q  "
                          f"({change.bpm:.2f} BPM)")
    return '\n'.join(output)


def dump_events_to_text(midi) -> str:
    """Generate an event listing from a loaded file.

    Returns:
        Formatted dump text, one line per event
    """
    output: List[str] = [summarize(midi), ""]

    for idx, event in enumerate(midi.events):
        parts = [f"[{idx:04d}] {event.tick_time:8d} {event.second_time:10.4f}s "
                 f"{event.type.name:16s} ch={event.channel:2d}"]

        if event.is_note_event():
            label = "off" if event.is_note_off() else "on "
            parts.append(f" {label} key={event.data1:3d}({note_name(event.data1):4s}) vel={event.data2}")
        elif event.type == EventType.PITCH_BEND:
            parts.append(f" value={event.pitch_bend_value}")
        elif event.has_second_data_byte():
            parts.append(f" data={event.data1:02X} {event.data2:02X}")
        else:
            parts.append(f" data={event.data1:02X}")

        output.append(''.join(parts))

    return '\n'.join(output)
