"""Game engine module.

Note timeline, judging state machine, scoring economy and the fret-board
view model.
"""

from .judge import JudgingEngine
from .play_stats import PlayStats, multiplier_tier, size_multiplier, star_count
from .timeline import NoteTimeline
from .view_model import ViewModel, build_view_model

__all__ = [
    "JudgingEngine",
    "NoteTimeline",
    "PlayStats",
    "ViewModel",
    "build_view_model",
    "multiplier_tier",
    "size_multiplier",
    "star_count",
]
