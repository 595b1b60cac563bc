"""Presentation helpers fed by session snapshots."""

from .scoring import format_result, progress_ratio

__all__ = ["format_result", "progress_ratio"]
