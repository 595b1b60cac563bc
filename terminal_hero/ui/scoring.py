from __future__ import annotations

from typing import List, Optional

from ..core.session import SessionResult
from ..i18n import tr


def progress_ratio(t: float, chart_end: float, *, start_time: Optional[float] = None) -> float:
    display_t = float(t)
    display_end = float(chart_end)
    if start_time is not None:
        display_t -= float(start_time)
        display_end -= float(start_time)
    if display_end <= 1e-9:
        return 0.0
    r = display_t / display_end
    if r < 0.0:
        return 0.0
    if r > 1.0:
        return 1.0
    return float(r)


def format_result(result: SessionResult, *, track_name: str = "", lang: str = "en", autoplay: Optional[str] = None) -> List[str]:
    title = tr(lang, "result.failed" if result.failed else "result.title")
    out = [title]
    if track_name:
        out.append(f"{tr(lang, 'result.track')}: {track_name}")
    if autoplay:
        out.append(f"{tr(lang, 'result.autoplay')}: {autoplay}")
    out.append(f"{tr(lang, 'result.score')}: {result.score}")
    out.append(f"{tr(lang, 'result.stars')}: {result.stars}")
    out.append(
        f"{tr(lang, 'result.notes_hit')}: {result.notes_hit_grouped}/{result.total_notes}"
        f" ({result.percentage * 100.0:.1f}%)"
    )
    out.append(f"{tr(lang, 'result.best_streak')}: {result.best_streak_grouped}")
    return out
