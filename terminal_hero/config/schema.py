"""Immutable game configuration.

Settings are built once before a session starts and passed explicitly to the
session, the judging engine and the view-model builder. Nothing in the core
mutates them.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple

from ..errors import ConfigError


@dataclass(frozen=True)
class ScoringRules:
    """Tunable constants of the scoring economy."""

    points_per_note: int = 50
    rock_meter_increment: float = 0.02
    rock_meter_decrement: float = 0.025
    rock_meter_start: float = 0.5

    # chord size -> rock meter multiplier (sizes 1..5)
    size_multipliers: Tuple[float, ...] = (1.0, 1.2, 1.4, 1.7, 2.0)

    # (streak upper bound, multiplier); streaks past the last bound get max_tier
    tier_bounds: Tuple[Tuple[int, int], ...] = ((10, 1), (20, 2), (30, 3))
    max_tier: int = 4

    def __post_init__(self) -> None:
        if int(self.points_per_note) <= 0:
            raise ConfigError("points_per_note must be positive")
        if float(self.rock_meter_increment) < 0.0 or float(self.rock_meter_decrement) < 0.0:
            raise ConfigError("rock meter increment/decrement must not be negative")
        if not 0.0 <= float(self.rock_meter_start) <= 1.0:
            raise ConfigError("rock_meter_start must be within [0.0, 1.0]")


@dataclass(frozen=True)
class GameSettings:
    """Settings read by the judging engine and the view model.

    Attributes:
        hit_tolerance_ms: Half width of the hit window around a note.
        line_time_ms: Song time covered by one fret-board row.
        fret_board_height: Number of rows in the view model.
        strum_line_offset: Rows between the strum line and the bottom row.
        lead_in_ms: Silence before the first note when a host loop starts.
        feedback_ms: How long a lane keeps showing its last press outcome.
    """

    hit_tolerance_ms: int = 100
    line_time_ms: int = 30
    fret_board_height: int = 30
    strum_line_offset: int = 4
    lead_in_ms: int = 3000
    feedback_ms: int = 150
    scoring: ScoringRules = field(default_factory=ScoringRules)

    def __post_init__(self) -> None:
        if int(self.hit_tolerance_ms) < 0:
            raise ConfigError("hit_tolerance_ms must not be negative")
        if int(self.line_time_ms) <= 0:
            raise ConfigError("line_time_ms must be positive")
        if int(self.fret_board_height) <= 0:
            raise ConfigError("fret_board_height must be positive")
        if int(self.strum_line_offset) < 0:
            raise ConfigError("strum_line_offset must not be negative")

    @property
    def strum_line_index(self) -> int:
        """Row index (from the top) the strum line is drawn on."""
        return max(0, int(self.fret_board_height) - 1 - int(self.strum_line_offset))

    def with_overrides(self, **overrides: Any) -> GameSettings:
        """Copy with the given fields replaced; scoring keys go to ScoringRules."""
        scoring_keys = set(ScoringRules.__dataclass_fields__)
        scoring_over: Dict[str, Any] = {k: v for k, v in overrides.items() if k in scoring_keys}
        own: Dict[str, Any] = {k: v for k, v in overrides.items() if k not in scoring_keys}
        unknown = set(own) - set(GameSettings.__dataclass_fields__)
        if unknown:
            raise ConfigError(f"unknown setting(s): {', '.join(sorted(unknown))}")
        if scoring_over:
            own["scoring"] = replace(self.scoring, **scoring_over)
        return replace(self, **own)
