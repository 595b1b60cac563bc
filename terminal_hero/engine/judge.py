from __future__ import annotations

import logging
from typing import List

from ..errors import TimelineInvariantError
from ..types import JudgeEvent, Lane, Outcome, Resolution
from .timeline import NoteTimeline

logger = logging.getLogger(__name__)


class JudgingEngine:
    """Forward-only judge over one NoteTimeline.

    ``last_resolved_index`` starts at -1 and only moves forward. The chord at
    ``last_resolved_index + 1`` is the only one a press can hit; chords whose
    window has fully elapsed are skipped (and missed) before anything else.
    """

    def __init__(self, timeline: NoteTimeline, hit_tolerance_ms: int):
        self.timeline = timeline
        self.tolerance = int(hit_tolerance_ms)
        self.last_resolved_index = -1

    def reset(self) -> None:
        self.timeline.reset()
        self.last_resolved_index = -1

    @property
    def next_index(self) -> int:
        return self.last_resolved_index + 1

    def exhausted(self) -> bool:
        return self.next_index >= len(self.timeline)

    def in_window(self, timestamp: int, now_ms: int) -> bool:
        return timestamp - self.tolerance <= now_ms <= timestamp + self.tolerance

    def on_tick(self, now_ms: int) -> List[JudgeEvent]:
        return self._skip_expired(int(now_ms))

    def on_lane_press(self, lane: Lane, now_ms: int) -> List[JudgeEvent]:
        now_ms = int(now_ms)
        lane = Lane(lane)
        events = self._skip_expired(now_ms)

        idx = self.next_index
        chord = self.timeline.chord_indices(idx)
        if chord and self.in_window(self.timeline[idx].timestamp, now_ms):
            for i in chord:
                n = self.timeline[i]
                if n.lane is lane and n.resolved is Resolution.UNRESOLVED:
                    n.resolved = Resolution.HIT
                    events.append(JudgeEvent(Outcome.HIT, now_ms, 1, lane, (i,)))
                    if all(self.timeline[j].resolved is Resolution.HIT for j in chord):
                        self._advance_to(chord[-1])
                        events.append(JudgeEvent(Outcome.CHORD_HIT, now_ms, len(chord), lane, tuple(chord)))
                    return events

        logger.debug("over-hit: lane=%s t=%d next=%d", lane.name, now_ms, idx)
        events.append(JudgeEvent(Outcome.OVER_HIT, now_ms, 1, lane))
        return events

    def _skip_expired(self, now_ms: int) -> List[JudgeEvent]:
        events: List[JudgeEvent] = []
        while True:
            chord = self.timeline.chord_indices(self.next_index)
            if not chord:
                break
            ts = self.timeline[chord[0]].timestamp
            if ts + self.tolerance >= now_ms:
                break
            missed = []
            for i in chord:
                n = self.timeline[i]
                if n.resolved is Resolution.UNRESOLVED:
                    n.resolved = Resolution.MISSED
                    missed.append(i)
            self._advance_to(chord[-1])
            if missed:
                logger.debug("auto-skip: t_note=%d t=%d missed=%d/%d", ts, now_ms, len(missed), len(chord))
                events.append(JudgeEvent(Outcome.MISS, now_ms, len(missed), None, tuple(missed)))
        return events

    def _advance_to(self, index: int) -> None:
        if index < self.last_resolved_index or index >= len(self.timeline):
            raise TimelineInvariantError(
                f"cursor move {self.last_resolved_index} -> {index} outside timeline of {len(self.timeline)}"
            )
        for i in range(self.last_resolved_index + 1, index + 1):
            if not self.timeline[i].is_resolved:
                raise TimelineInvariantError(f"note {i} left unresolved behind the cursor")
        self.last_resolved_index = index
