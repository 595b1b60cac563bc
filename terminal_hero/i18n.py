from __future__ import annotations

from typing import Any, Dict, Optional


_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "result.title": "Song complete",
        "result.failed": "Song failed",
        "result.track": "Track",
        "result.score": "Score",
        "result.stars": "Stars",
        "result.notes_hit": "Notes hit",
        "result.best_streak": "Best streak",
        "result.autoplay": "Autoplay",
        "error.chart": "Cannot load track: {reason}",
        "error.config": "Invalid config: {reason}",
        "error.save_config": "Cannot write config {path}: {reason}",
    },
    "zh-CN": {
        "result.title": "演奏完成",
        "result.failed": "演奏失败",
        "result.track": "谱面",
        "result.score": "分数",
        "result.stars": "星级",
        "result.notes_hit": "命中音符",
        "result.best_streak": "最高连击",
        "result.autoplay": "自动游玩",
        "error.chart": "无法加载谱面：{reason}",
        "error.config": "配置无效：{reason}",
        "error.save_config": "无法写入配置 {path}：{reason}",
    },
}


def normalize_lang(lang: Optional[str]) -> str:
    if not lang:
        return "en"
    s = str(lang).strip()
    if not s:
        return "en"
    low = s.lower()
    if low in {"zh", "zh-cn", "zh_cn", "cn"}:
        return "zh-CN"
    if low in {"en", "en-us", "en_us", "us"}:
        return "en"
    return s


def tr(lang: str, key: str, default: Optional[str] = None, **fmt: Any) -> str:
    lng = normalize_lang(lang)
    tbl = _TRANSLATIONS.get(lng) or _TRANSLATIONS["en"]
    s = tbl.get(key) or _TRANSLATIONS["en"].get(key) or (default if default is not None else key)
    if fmt:
        s = s.format(**fmt)
    return s
