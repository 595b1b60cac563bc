"""Configuration module.

GameSettings and ScoringRules are immutable and passed explicitly through the
session; config_v2 turns JSONC files into them.
"""

from .schema import GameSettings, ScoringRules

__all__ = ["GameSettings", "ScoringRules"]
