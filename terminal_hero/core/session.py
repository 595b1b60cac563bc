"""Play session: the single owner of all mutable game state.

A PlaySession ties one track's NoteTimeline to a JudgingEngine, a PlayStats
accumulator and per-lane press feedback. The host loop owns the session and
calls ``press``/``tick`` from one thread; renderers only ever see the
immutable ``SessionSnapshot`` returned by ``snapshot()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from ..config.schema import GameSettings
from ..engine.judge import JudgingEngine
from ..engine.play_stats import PlayStats
from ..engine.timeline import NoteTimeline
from ..engine.view_model import ViewModel, build_view_model
from ..types import LANES, JudgeEvent, Lane, LaneFeedback, Outcome


@dataclass(frozen=True)
class SessionSnapshot:
    """Consistent copy of the session taken between two engine calls."""

    now_ms: int
    last_resolved_index: int
    stats: PlayStats
    view: ViewModel
    finished: bool


@dataclass(frozen=True)
class SessionResult:
    score: int
    stars: int
    best_streak_grouped: int
    notes_hit_grouped: int
    notes_hit_individual: int
    total_notes: int
    percentage: float
    failed: bool


class PlaySession:
    """One play-through of one track.

    Args:
        timeline: Notes of the chosen track; must not be shared with another
            live session
        settings: Immutable game settings
        track_name: Label used in logs and results
    """

    def __init__(self, timeline: NoteTimeline, settings: Optional[GameSettings] = None, track_name: str = ""):
        self.settings = settings or GameSettings()
        self.timeline = timeline
        self.track_name = str(track_name)
        self.engine = JudgingEngine(timeline, self.settings.hit_tolerance_ms)
        self.stats = PlayStats(total_notes=timeline.total_note_count(), rules=self.settings.scoring)
        # song time runs from minus the lead-in up to the last note
        self.now_ms = -int(self.settings.lead_in_ms)
        self.lane_feedback: List[LaneFeedback] = [LaneFeedback() for _ in LANES]
        self.last_hit_chord: Tuple[Lane, ...] = ()

        self._logger = logging.getLogger(self.__class__.__name__)
        self._logger.info(
            "session start: track=%s notes=%d grouped=%d tolerance=%dms",
            self.track_name or "?",
            len(timeline),
            self.stats.total_notes,
            self.settings.hit_tolerance_ms,
        )

    def press(self, lane: Lane, now_ms: int) -> List[JudgeEvent]:
        """Feed one lane press at song time ``now_ms``."""
        lane = Lane(lane)
        self._advance_clock(now_ms)
        events = self.engine.on_lane_press(lane, self.now_ms)
        self._apply(events)
        return events

    def tick(self, now_ms: int) -> List[JudgeEvent]:
        """Advance the clock without input; expired chords are missed."""
        self._advance_clock(now_ms)
        events = self.engine.on_tick(self.now_ms)
        self._apply(events)
        return events

    def replay_last_chord(self, now_ms: int) -> List[JudgeEvent]:
        """Press every lane of the most recently completed chord at ``now_ms``.

        Repeated riffs are played this way by autoplay and tests. With no
        chord completed yet this is a single over-hit on the green lane.
        """
        lanes = self.last_hit_chord or (Lane.GREEN,)
        events: List[JudgeEvent] = []
        for lane in lanes:
            events.extend(self.press(lane, now_ms))
        return events

    @property
    def failed(self) -> bool:
        return bool(self.stats.failed)

    def finished(self) -> bool:
        return self.engine.exhausted()

    def view_model(self) -> ViewModel:
        return build_view_model(self.timeline, self.settings, self.now_ms, self.lane_feedback)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            now_ms=self.now_ms,
            last_resolved_index=self.engine.last_resolved_index,
            stats=replace(self.stats),
            view=self.view_model(),
            finished=self.finished(),
        )

    def result(self) -> SessionResult:
        s = self.stats
        return SessionResult(
            score=s.score,
            stars=s.star_count(),
            best_streak_grouped=s.best_streak_grouped,
            notes_hit_grouped=s.notes_hit_grouped,
            notes_hit_individual=s.notes_hit_individual,
            total_notes=s.total_notes,
            percentage=s.percentage(),
            failed=s.failed,
        )

    def _advance_clock(self, now_ms: int) -> None:
        now_ms = int(now_ms)
        if now_ms < self.now_ms:
            # clock must not run backwards; keep judging at the latest time seen
            self._logger.warning("clock went backwards: %d < %d", now_ms, self.now_ms)
            return
        self.now_ms = now_ms

    def _apply(self, events: List[JudgeEvent]) -> None:
        was_failed = self.stats.failed
        for ev in events:
            self.stats.apply(ev)
            if ev.outcome is Outcome.HIT and ev.lane is not None:
                self.lane_feedback[int(ev.lane)] = LaneFeedback(True, False, ev.at_ms)
            elif ev.outcome is Outcome.OVER_HIT and ev.lane is not None:
                self.lane_feedback[int(ev.lane)] = LaneFeedback(False, True, ev.at_ms)
            elif ev.outcome is Outcome.CHORD_HIT:
                self.last_hit_chord = tuple(self.timeline[i].lane for i in ev.indices)
        if self.stats.failed and not was_failed:
            self._logger.info(
                "session failed: track=%s t=%d score=%d",
                self.track_name or "?",
                self.now_ms,
                self.stats.score,
            )
