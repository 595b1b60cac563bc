"""Reads parsed tracks handed over by the chart parser.

The chart parser (not part of this package) writes each track as a list of
``[timestamp_ms, lane, sustain_ms]`` rows. A file holds either one bare list
or ``{"tracks": {"ExpertSingle": [...], ...}}``. Lanes may be given as 0-4
or as colour names.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from ..errors import ChartUnavailableError, TrackNotFoundError
from ..engine.timeline import NoteRow, NoteTimeline
from ..types import Lane

logger = logging.getLogger(__name__)


def _parse_lane(v: Any) -> Lane:
    if isinstance(v, str):
        return Lane[v.strip().upper()]
    return Lane(int(v))


def rows_from_json(data: Any) -> List[NoteRow]:
    rows: List[NoteRow] = []
    for item in data:
        if isinstance(item, dict):
            ts, lane, sus = item.get("timestamp"), item.get("lane"), item.get("sustain", 0)
        else:
            ts, lane = item[0], item[1]
            sus = item[2] if len(item) > 2 else 0
        rows.append((int(ts), _parse_lane(lane), int(sus or 0)))
    return rows


def list_tracks(path: str) -> List[str]:
    data = _read(path)
    if isinstance(data, dict):
        return sorted((data.get("tracks") or {}).keys())
    return [""]


def load_track(path: str, track_name: Optional[str] = None) -> NoteTimeline:
    """Load one track as a fresh NoteTimeline.

    Raises:
        ChartUnavailableError: File missing, unreadable or malformed
        TrackNotFoundError: ``track_name`` is not in the file
    """
    data = _read(path)
    if isinstance(data, dict):
        tracks: Dict[str, Any] = data.get("tracks") or {}
        if not tracks:
            raise ChartUnavailableError(path, "no tracks")
        if track_name is None:
            track_name = sorted(tracks)[0]
        if track_name not in tracks:
            raise TrackNotFoundError(path, track_name)
        raw = tracks[track_name]
    else:
        raw = data

    try:
        rows = rows_from_json(raw)
        rows.sort(key=lambda r: r[0])
        timeline = NoteTimeline.from_tuples(rows)
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise ChartUnavailableError(path, f"bad note row: {e}") from e

    logger.info("loaded track %s from %s: %d notes", track_name or "(default)", path, len(timeline))
    return timeline


def _read(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ChartUnavailableError(path, "file not found") from e
    except OSError as e:
        raise ChartUnavailableError(path, str(e)) from e
    except json.JSONDecodeError as e:
        raise ChartUnavailableError(path, f"invalid JSON: {e}") from e
