"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pytest

from terminal_hero.config.schema import GameSettings
from terminal_hero.core.session import PlaySession
from terminal_hero.engine.timeline import NoteRow, NoteTimeline
from terminal_hero.types import Lane

FIXTURES = Path(__file__).parent / "fixtures"

G, R, Y, B, O = Lane.GREEN, Lane.RED, Lane.YELLOW, Lane.BLUE, Lane.ORANGE

# Single notes, a two-note chord and a three-note chord.
BASIC_ROWS: list[NoteRow] = [
    (1000, G, 0),
    (1500, R, 0),
    (2000, Y, 300),
    (2500, G, 0),
    (2500, Y, 0),
    (3000, R, 0),
    (3000, B, 0),
    (3000, O, 0),
    (3500, G, 0),
]


@pytest.fixture
def settings() -> GameSettings:
    return GameSettings(hit_tolerance_ms=100, line_time_ms=30, fret_board_height=30, strum_line_offset=4)


@pytest.fixture
def timeline() -> NoteTimeline:
    return NoteTimeline.from_tuples(BASIC_ROWS)


@pytest.fixture
def make_session(settings: GameSettings) -> Callable[..., PlaySession]:
    def _make(rows: Sequence[NoteRow] = BASIC_ROWS, **overrides: object) -> PlaySession:
        s = settings.with_overrides(**overrides) if overrides else settings
        return PlaySession(NoteTimeline.from_tuples(rows), s, track_name="test")

    return _make


@pytest.fixture
def demo_track_path() -> Iterator[str]:
    yield str(FIXTURES / "demo_track.json")
