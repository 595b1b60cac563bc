from __future__ import annotations


class TerminalHeroError(Exception):
    pass


class ConfigError(TerminalHeroError, ValueError):
    """Invalid settings value or malformed config file."""


class ChartUnavailableError(TerminalHeroError):
    """The track source could not be read or decoded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"chart unavailable: {path} ({reason})")
        self.path = path
        self.reason = reason


class TrackNotFoundError(TerminalHeroError):
    def __init__(self, path: str, track_name: str):
        super().__init__(f"track '{track_name}' not found in {path}")
        self.path = path
        self.track_name = track_name


class TimelineInvariantError(TerminalHeroError, RuntimeError):
    """Cursor or resolution bookkeeping broke; the session cannot continue."""
