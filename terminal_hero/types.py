from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Tuple


class Lane(IntEnum):
    GREEN = 0
    RED = 1
    YELLOW = 2
    BLUE = 3
    ORANGE = 4


LANES: Tuple[Lane, ...] = tuple(Lane)


class Resolution(Enum):
    UNRESOLVED = "unresolved"
    HIT = "hit"
    MISSED = "missed"


class Outcome(Enum):
    HIT = "hit"              # one note of the open chord
    CHORD_HIT = "chord_hit"  # every note of the chord is now hit
    MISS = "miss"
    OVER_HIT = "over_hit"


@dataclass
class PlayableNote:
    timestamp: int          # ms from song start
    lane: Lane
    sustain_length: int = 0  # ms, 0 = plain note
    resolved: Resolution = Resolution.UNRESOLVED

    @property
    def is_resolved(self) -> bool:
        return self.resolved is not Resolution.UNRESOLVED


@dataclass(frozen=True)
class JudgeEvent:
    outcome: Outcome
    at_ms: int
    size: int = 1
    lane: Lane | None = None
    # timeline indices of the notes the event is about (empty for over-hits)
    indices: Tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LaneFeedback:
    played_correctly: bool = False
    over_hit: bool = False
    at_ms: int | None = None
