from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional
import logging

import numpy as np

from ..types import LANES, Lane
from .timeline import NoteTimeline

logger = logging.getLogger(__name__)

MODES = ("perfect", "humanized", "sloppy")


@dataclass(frozen=True)
class PressEvent:
    at_ms: int
    lane: Lane

    def __lt__(self, other: "PressEvent") -> bool:
        if self.at_ms == other.at_ms:
            return int(self.lane) < int(other.lane)
        return self.at_ms < other.at_ms


class SimulatePlayer:
    """Builds a press schedule for a timeline.

    Modes:
        perfect: every note pressed exactly on its timestamp
        humanized: gaussian timing error of ``jitter_ms`` standard deviation
        sloppy: humanized, plus dropped notes and stray presses
    """

    def __init__(
        self,
        *,
        mode: str = "perfect",
        seed: Optional[int] = None,
        jitter_ms: float = 25.0,
        drop_rate: float = 0.05,
        stray_rate: float = 0.03,
    ):
        self.mode = str(mode or "perfect").strip().lower()
        if self.mode not in MODES:
            self.mode = "perfect"
        self.jitter_ms = max(0.0, float(jitter_ms))
        self.drop_rate = min(1.0, max(0.0, float(drop_rate)))
        self.stray_rate = min(1.0, max(0.0, float(stray_rate)))
        self._rng = np.random.default_rng(seed)

    def schedule(self, timeline: NoteTimeline) -> List[PressEvent]:
        n = len(timeline)
        if n == 0:
            return []
        stamps = np.asarray(timeline.timestamps(), dtype=np.float64)
        lanes = [note.lane for note in timeline]

        if self.mode == "perfect":
            offsets = np.zeros(n)
            keep = np.ones(n, dtype=bool)
        else:
            offsets = self._rng.normal(0.0, self.jitter_ms, size=n)
            keep = np.ones(n, dtype=bool)
            if self.mode == "sloppy":
                keep = self._rng.random(n) >= self.drop_rate

        presses = [
            PressEvent(int(round(t)), lane)
            for t, lane, k in zip(stamps + offsets, lanes, keep)
            if k
        ]

        if self.mode == "sloppy" and self.stray_rate > 0.0:
            strays = int(self._rng.binomial(n, self.stray_rate))
            if strays:
                at = self._rng.uniform(stamps[0], stamps[-1], size=strays)
                pick = self._rng.integers(0, len(LANES), size=strays)
                presses.extend(PressEvent(int(t), LANES[int(p)]) for t, p in zip(at, pick))

        presses.sort()
        logger.debug("schedule: mode=%s notes=%d presses=%d", self.mode, n, len(presses))
        return presses


def drive_session(
    session: Any,
    presses: List[PressEvent],
    *,
    tick_ms: int = 16,
    start_ms: int = 0,
    end_ms: Optional[int] = None,
    stop_on_fail: bool = True,
    on_step: Optional[Callable[[Any], None]] = None,
) -> Any:
    """Run a host loop over ``session`` with a fixed tick step.

    Presses due before each tick are delivered in order, then the tick is
    issued. ``on_step`` receives the session after every step (used to push
    UI snapshots). Returns the session.
    """
    tick_ms = max(1, int(tick_ms))
    if end_ms is None:
        last_press = presses[-1].at_ms if presses else 0
        end_ms = max(session.timeline.end_time(), last_press) + session.settings.hit_tolerance_ms + tick_ms

    i = 0
    t = int(start_ms)
    while t <= end_ms:
        while i < len(presses) and presses[i].at_ms <= t:
            session.press(presses[i].lane, max(presses[i].at_ms, session.now_ms))
            i += 1
        session.tick(t)
        if on_step is not None:
            on_step(session)
        if stop_on_fail and session.failed:
            logger.info("host loop stopped: session failed at t=%d", t)
            break
        t += tick_ms
    return session
