"""Fret-board projection of the timeline for renderers.

The builder only reads the timeline; it never changes a note's resolution or
the judge cursor. Row 0 is the top of the board (furthest in the future) and
the strum line sits ``strum_line_offset`` rows above the bottom.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..config.schema import GameSettings
from ..types import LANES, Lane, LaneFeedback, Resolution
from .timeline import NoteTimeline

_NO_FEEDBACK = LaneFeedback()


@dataclass(frozen=True)
class NoteLine:
    time_ms: int
    note_colors: Tuple[bool, ...]
    sustain_colors: Tuple[bool, ...]
    is_strum_line: bool = False


@dataclass(frozen=True)
class VisibleNote:
    index: int
    timestamp: int
    lane: Lane
    sustain_length: int
    resolution: Resolution
    row: int


@dataclass(frozen=True)
class ViewModel:
    now_ms: int
    strum_line_index: int
    note_lines: Tuple[NoteLine, ...]
    notes: Tuple[VisibleNote, ...]
    note_states: Tuple[LaneFeedback, ...]

    def count_lane(self, lane: Lane) -> int:
        """Number of rows showing an unresolved note head in ``lane``."""
        return sum(1 for ln in self.note_lines if ln.note_colors[int(lane)])


def row_time(settings: GameSettings, now_ms: int, row: int) -> int:
    return int(now_ms) + (settings.strum_line_index - int(row)) * int(settings.line_time_ms)


def build_view_model(
    timeline: NoteTimeline,
    settings: GameSettings,
    now_ms: int,
    lane_feedback: Sequence[LaneFeedback] = (),
) -> ViewModel:
    """Project the timeline around ``now_ms`` (song time at the strum line).

    Args:
        timeline: Track being played
        settings: Board geometry (line time, height, strum offset)
        now_ms: Current song time
        lane_feedback: Last press outcome per lane, indexed by Lane

    Returns:
        An immutable ViewModel
    """
    height = int(settings.fret_board_height)
    line = int(settings.line_time_ms)
    strum = settings.strum_line_index

    bottom_t = row_time(settings, now_ms, height - 1)
    top_end = row_time(settings, now_ms, 0) + line

    heads: List[List[bool]] = [[False] * len(LANES) for _ in range(height)]
    tails: List[List[bool]] = [[False] * len(LANES) for _ in range(height)]
    visible: List[VisibleNote] = []

    stamps = timeline.timestamps()
    # sustains that started below the board can still reach into it
    longest = timeline.longest_sustain()
    lo = bisect.bisect_left(stamps, bottom_t - longest)
    hi = bisect.bisect_left(stamps, top_end)

    for i in range(lo, hi):
        n = timeline[i]
        lane_i = int(n.lane)
        head_row = _row_for(n.timestamp, bottom_t, line, height)
        if head_row is not None:
            visible.append(VisibleNote(i, n.timestamp, n.lane, n.sustain_length, n.resolved, head_row))
            if n.resolved is Resolution.UNRESOLVED:
                heads[head_row][lane_i] = True
        if n.sustain_length > 0 and n.resolved is not Resolution.MISSED:
            for r in range(height):
                t = bottom_t + (height - 1 - r) * line
                if n.timestamp < t <= n.timestamp + n.sustain_length:
                    tails[r][lane_i] = True

    rows = tuple(
        NoteLine(
            time_ms=bottom_t + (height - 1 - r) * line,
            note_colors=tuple(heads[r]),
            sustain_colors=tuple(tails[r]),
            is_strum_line=(r == strum),
        )
        for r in range(height)
    )

    states = []
    for lane in LANES:
        fb = lane_feedback[int(lane)] if int(lane) < len(lane_feedback) else _NO_FEEDBACK
        if fb.at_ms is None or int(now_ms) - fb.at_ms > int(settings.feedback_ms):
            fb = _NO_FEEDBACK
        states.append(fb)

    return ViewModel(
        now_ms=int(now_ms),
        strum_line_index=strum,
        note_lines=rows,
        notes=tuple(visible),
        note_states=tuple(states),
    )


def _row_for(ts: int, bottom_t: int, line: int, height: int) -> int | None:
    if ts < bottom_t:
        return None
    k = (ts - bottom_t) // line
    if k >= height:
        return None
    return height - 1 - int(k)
