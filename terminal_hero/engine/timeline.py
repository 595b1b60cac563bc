"""Ordered note storage and chord queries for one track.

This module provides NoteTimeline, the owner of a track's PlayableNotes.
"""

from __future__ import annotations
from typing import Iterable, Iterator, List, Sequence, Tuple, Union
import logging

from ..errors import ConfigError
from ..types import Lane, PlayableNote, Resolution

NoteRow = Tuple[int, Union[Lane, int], int]


class NoteTimeline:
    """Ordered notes of one track.

    Notes are sorted by timestamp and never reordered; only their
    ``resolved`` flag changes during play. Chords are not stored: they are
    recomputed from adjacent timestamps whenever they are asked for.
    """

    def __init__(self, notes: Sequence[PlayableNote]):
        """Initialize the timeline.

        Args:
            notes: Notes sorted ascending by timestamp

        Raises:
            ConfigError: If the notes are not sorted
        """
        prev = None
        for n in notes:
            if prev is not None and n.timestamp < prev:
                raise ConfigError(f"notes must be sorted by timestamp ({n.timestamp} after {prev})")
            prev = n.timestamp
        self.notes: List[PlayableNote] = list(notes)
        self._stamps: List[int] = [n.timestamp for n in self.notes]
        self._longest_sustain = max((n.sustain_length for n in self.notes), default=0)
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_tuples(cls, rows: Iterable[NoteRow]) -> NoteTimeline:
        """Build a timeline from ``(timestamp, lane, sustain_length)`` rows."""
        notes = [
            PlayableNote(timestamp=int(ts), lane=Lane(lane), sustain_length=max(0, int(sustain)))
            for ts, lane, sustain in rows
        ]
        return cls(notes)

    def __len__(self) -> int:
        return len(self.notes)

    def __iter__(self) -> Iterator[PlayableNote]:
        return iter(self.notes)

    def __getitem__(self, index: int) -> PlayableNote:
        return self.notes[index]

    def chord_at(self, index: int) -> List[PlayableNote]:
        """Get the run of notes starting at ``index`` that share its timestamp.

        Args:
            index: Timeline index of the first chord member

        Returns:
            Chord members in chart order, or an empty list if out of bounds
        """
        return [self.notes[i] for i in self.chord_indices(index)]

    def chord_indices(self, index: int) -> range:
        if index < 0 or index >= len(self.notes):
            return range(0)
        ts = self.notes[index].timestamp
        end = index + 1
        while end < len(self.notes) and self.notes[end].timestamp == ts:
            end += 1
        return range(index, end)

    def timestamps(self) -> List[int]:
        return self._stamps

    def longest_sustain(self) -> int:
        return self._longest_sustain

    def total_note_count(self) -> int:
        """Get the note count with every chord counted once.

        This is the denominator for percentage and star rating. ``len()``
        gives the per-note count used for individual bookkeeping.
        """
        if not self.notes:
            return 0
        count = 1
        prev = self.notes[0].timestamp
        for n in self.notes[1:]:
            if n.timestamp != prev:
                count += 1
                prev = n.timestamp
        return count

    def reset(self) -> None:
        for n in self.notes:
            n.resolved = Resolution.UNRESOLVED
        self._logger.debug("Timeline reset: %d notes", len(self.notes))

    def end_time(self) -> int:
        """Song time at which the last note (including sustain) ends."""
        if not self.notes:
            return 0
        return max(n.timestamp + n.sustain_length for n in self.notes)


__all__ = ["NoteTimeline", "NoteRow"]
