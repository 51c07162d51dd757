#!/usr/bin/env python3
"""
Command-line front end for the MIDI file engine.
"""

import sys
import traceback

from midi_file import MidiFile
from output_generators import dump_events_to_text, summarize
from processor import MidiBatchProcessor


def print_usage():
    print("Usage: python midi_tool.py <command> [arguments] [options]")
    print()
    print("Commands:")
    print("  info <file.mid>                 - Show format, tempo and duration")
    print("  dump <file.mid>                 - List every channel event")
    print("  rewrite <in.mid> <out.mid>      - Re-save as a single-track format 0 file")
    print("  batch <config.yaml>             - Process all files listed in a config")
    print()
    print("Options (rewrite):")
    print("  --tempo <bpm>                   - Output tempo (default: input file tempo)")
    print("  --ppq <ticks>                   - Output ticks per quarter note (default: 480)")
    print()
    print("Examples:")
    print("  python midi_tool.py info song.mid")
    print("  python midi_tool.py rewrite song.mid out.mid --tempo 90 --ppq 960")


def load_or_exit(path: str) -> MidiFile:
    midi = MidiFile.load(path)
    if midi.has_error():
        print(f"ERROR: {path}: {midi.error}", file=sys.stderr)
        sys.exit(1)
    return midi


def run(argv) -> int:
    """Run one command; returns the process exit code."""
    tempo = None
    ticks_per_quarter = 480
    args = []

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == '--tempo' and i + 1 < len(argv):
            tempo = float(argv[i + 1])
            i += 1
        elif arg == '--ppq' and i + 1 < len(argv):
            ticks_per_quarter = int(argv[i + 1])
            i += 1
        else:
            args.append(arg)
        i += 1

    if not args:
        print_usage()
        return 1

    command = args[0]

    if command == 'info' and len(args) == 2:
        midi = load_or_exit(args[1])
        print(summarize(midi, args[1]))
        return 0

    if command == 'dump' and len(args) == 2:
        midi = load_or_exit(args[1])
        print(dump_events_to_text(midi))
        return 0

    if command == 'rewrite' and len(args) == 3:
        midi = load_or_exit(args[1])
        if not midi.note_events():
            print(f"WARNING: {args[1]}: no note events", file=sys.stderr)
        out_tempo = tempo if tempo is not None else midi.tempo
        if not MidiFile.save(args[2], midi.events, out_tempo, ticks_per_quarter):
            return 1
        print(f"Output MIDI: {args[2]} ({len(midi.events)} events)")
        return 0

    if command == 'batch' and len(args) == 2:
        processor = MidiBatchProcessor(args[1])
        return 1 if processor.process_all() else 0

    print_usage()
    return 1


def main():
    """Main entry point."""
    try:
        sys.exit(run(sys.argv[1:]))
    except Exception as e:
        print(f"\nError: {e}")
        print("\nFull traceback:")
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
