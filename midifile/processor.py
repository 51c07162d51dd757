"""
Batch processing orchestrator.
Loads MIDI files listed in a YAML config, writes text dumps and normalized
format 0 copies.
"""

import sys
import traceback
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from midi_file import MidiFile
from output_generators import dump_events_to_text, summarize


@dataclass
class FileEntry:
    """One input file from the config."""
    path: str
    title: Optional[str] = None

    @property
    def output_stem(self) -> str:
        name = self.title or Path(self.path).stem
        # Replace characters that are invalid in Windows filenames
        for char in '<>:"/\\|?*':
            name = name.replace(char, '_')
        return name


class MidiBatchProcessor:
    """Main batch processor class."""

    def __init__(self, config_path: str):
        """Initialize with YAML config file."""
        with open(config_path, 'r') as f:
            self.config = yaml.safe_load(f) or {}

        # Relative input paths resolve against the config file location
        self.base_dir = Path(config_path).parent
        self.output_dir = Path(self.config.get('output_dir', 'output'))
        if not self.output_dir.is_absolute():
            self.output_dir = self.base_dir / self.output_dir

        self.tempo: Optional[float] = self.config.get('tempo')
        self.ticks_per_quarter = int(self.config.get('ticks_per_quarter', 480))
        self.write_text = bool(self.config.get('write_text', True))
        self.write_midi = bool(self.config.get('write_midi', True))
        self.files = self._parse_file_entries(self.config.get('files', []))

    @staticmethod
    def _parse_file_entries(entries: List) -> List[FileEntry]:
        files = []
        for entry in entries:
            if isinstance(entry, dict):
                files.append(FileEntry(**entry))
            else:
                # Simple form: just a path
                files.append(FileEntry(path=str(entry)))
        return files

    def _resolve(self, path: str) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self.base_dir / p

    def process_file(self, entry: FileEntry) -> Dict:
        """Load one file and write its outputs.

        Returns:
            Dict with 'ok', 'error' and the paths written
        """
        result: Dict = {'ok': False, 'error': '', 'text': None, 'midi': None}
        self.output_dir.mkdir(parents=True, exist_ok=True)

        midi = MidiFile.load(self._resolve(entry.path))
        if midi.has_error():
            result['error'] = midi.error
            return result

        print(summarize(midi, entry.path))

        if self.write_text:
            text_file = self.output_dir / f"{entry.output_stem}.txt"
            text_file.write_text(dump_events_to_text(midi))
            result['text'] = text_file

        if self.write_midi:
            tempo = self.tempo if self.tempo is not None else midi.tempo
            midi_file = self.output_dir / f"{entry.output_stem}.mid"
            if not MidiFile.save(midi_file, midi.events, tempo, self.ticks_per_quarter):
                result['error'] = f"Could not write {midi_file}"
                return result
            result['midi'] = midi_file

        result['ok'] = True
        return result

    def process_all(self) -> int:
        """Process every file in the config.

        Returns:
            Number of files that failed
        """
        failures = 0
        for entry in self.files:
            print(f"Processing: {entry.path}")
            try:
                result = self.process_file(entry)
            except Exception as e:
                print(f"  ERROR: {entry.path}: {e}", file=sys.stderr)
                traceback.print_exc()
                failures += 1
                continue

            if not result['ok']:
                print(f"  ERROR: {entry.path}: {result['error']}", file=sys.stderr)
                failures += 1

        print(f"Done: {len(self.files) - failures}/{len(self.files)} files processed")
        return failures
