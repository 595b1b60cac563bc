"""Note judging and scoring core of a five-lane terminal rhythm game."""

from .config.schema import GameSettings, ScoringRules
from .core.session import PlaySession, SessionResult, SessionSnapshot
from .engine.timeline import NoteTimeline
from .types import Lane, Outcome, PlayableNote, Resolution

__all__ = [
    "GameSettings",
    "Lane",
    "NoteTimeline",
    "Outcome",
    "PlayableNote",
    "PlaySession",
    "Resolution",
    "ScoringRules",
    "SessionResult",
    "SessionSnapshot",
]
