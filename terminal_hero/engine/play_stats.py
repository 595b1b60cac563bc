from __future__ import annotations

from dataclasses import dataclass, field

from ..config.schema import ScoringRules
from ..types import JudgeEvent, Outcome

# (average multiplier must exceed, stars); anything lower gets STAR_FLOOR
STAR_THRESHOLDS = (
    (6.0, 9),
    (5.2, 8),
    (4.4, 7),
    (3.6, 6),
    (2.8, 5),
    (2.0, 4),
)
STAR_FLOOR = 3


def multiplier_tier(streak: int, rules: ScoringRules | None = None) -> int:
    rules = rules or ScoringRules()
    for bound, tier in rules.tier_bounds:
        if streak < bound:
            return int(tier)
    return int(rules.max_tier)


def size_multiplier(size: int, rules: ScoringRules | None = None) -> float:
    rules = rules or ScoringRules()
    if 1 <= size <= len(rules.size_multipliers):
        return float(rules.size_multipliers[size - 1])
    return 1.0


def star_count(score: int, total_notes: int, points_per_note: int = 50) -> int:
    # https://guitarhero.fandom.com/wiki/Base_score
    base = total_notes * points_per_note
    if base <= 0:
        return STAR_FLOOR
    avg = float(score) / float(base)
    for threshold, stars in STAR_THRESHOLDS:
        if avg > threshold:
            return stars
    return STAR_FLOOR


@dataclass
class PlayStats:
    total_notes: int
    rules: ScoringRules = field(default_factory=ScoringRules)

    notes_hit_grouped: int = 0
    note_streak_grouped: int = 0
    notes_hit_individual: int = 0
    note_streak_individual: int = 0
    best_streak_grouped: int = 0
    score: int = 0
    rock_meter: float | None = None  # None = rules.rock_meter_start
    failed: bool = False

    def __post_init__(self) -> None:
        if self.rock_meter is None:
            self.rock_meter = float(self.rules.rock_meter_start)

    def apply(self, ev: JudgeEvent) -> None:
        if ev.outcome is Outcome.HIT:
            self.hit_individual(ev.size)
        elif ev.outcome is Outcome.CHORD_HIT:
            self.hit_chord(ev.size)
        elif ev.outcome is Outcome.MISS:
            self.miss(ev.size)
        elif ev.outcome is Outcome.OVER_HIT:
            self.over_hit()

    def hit_individual(self, size: int = 1) -> None:
        self.notes_hit_individual += size
        self.note_streak_individual += size

    def hit_chord(self, size: int) -> None:
        self.notes_hit_grouped += 1
        self.note_streak_grouped += 1
        if self.note_streak_grouped > self.best_streak_grouped:
            self.best_streak_grouped = self.note_streak_grouped
        self._raise_meter(self.rules.rock_meter_increment * size_multiplier(size, self.rules))
        self.score += self.rules.points_per_note * size * self.multiplier()

    def miss(self, size: int) -> None:
        self._lower_meter(self.rules.rock_meter_decrement * size_multiplier(size, self.rules))
        self._break_streak()

    def over_hit(self) -> None:
        self._lower_meter(self.rules.rock_meter_decrement * size_multiplier(1, self.rules))
        self._break_streak()

    def multiplier(self) -> int:
        """Score multiplier for the current grouped streak."""
        return multiplier_tier(self.note_streak_grouped, self.rules)

    def percentage(self) -> float:
        if self.total_notes <= 0:
            return 0.0
        return float(self.notes_hit_grouped) / float(self.total_notes)

    def star_count(self) -> int:
        return star_count(self.score, self.total_notes, self.rules.points_per_note)

    def _break_streak(self) -> None:
        self.note_streak_grouped = 0
        self.note_streak_individual = 0

    def _raise_meter(self, amount: float) -> None:
        self.rock_meter = min(1.0, self.rock_meter + amount)

    def _lower_meter(self, amount: float) -> None:
        self.rock_meter -= amount
        if self.rock_meter < 0.0:
            # latched; nothing clears it for the rest of the session
            self.failed = True
