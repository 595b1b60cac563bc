from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .config.schema import GameSettings
from .errors import ConfigError
from .i18n import normalize_lang


def _strip_jsonc_comments(src: str) -> str:
    # Drops //, # and /* */ comments; string literals are copied untouched.
    out: list[str] = []
    i = 0
    n = len(src)
    quote: Optional[str] = None

    while i < n:
        ch = src[i]
        nxt = src[i + 1] if i + 1 < n else ""

        if quote is not None:
            out.append(ch)
            if ch == "\\" and nxt:
                out.append(nxt)
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue

        if ch in ("\"", "'"):
            quote = ch
            out.append(ch)
            i += 1
            continue

        if (ch == "/" and nxt == "/") or ch == "#":
            eol = src.find("\n", i)
            i = n if eol < 0 else eol
            continue

        if ch == "/" and nxt == "*":
            end = src.find("*/", i + 2)
            i = n if end < 0 else end + 2
            continue

        out.append(ch)
        i += 1

    return "".join(out)


def load_config_v2(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    raw = raw.lstrip("\ufeff")
    try:
        data = json.loads(_strip_jsonc_comments(raw))
    except json.JSONDecodeError as e:
        raise ConfigError(f"config {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be an object")
    return data


def _get_section(cfg: Dict[str, Any], key: str) -> Dict[str, Any]:
    v = cfg.get(key)
    return v if isinstance(v, dict) else {}


def flatten_config_v2(cfg: Dict[str, Any]) -> Dict[str, Any]:
    flat: Dict[str, Any] = {}

    judge = _get_section(cfg, "judge")
    scoring = _get_section(cfg, "scoring")
    board = _get_section(cfg, "board")
    ui = _get_section(cfg, "ui")
    debug = _get_section(cfg, "debug")

    def pull(dst_key: str, section: Dict[str, Any], section_key: str):
        if section_key in section:
            flat[dst_key] = section.get(section_key)

    pull("hit_tolerance_ms", judge, "hit_tolerance_ms")
    pull("lead_in_ms", judge, "lead_in_ms")

    pull("points_per_note", scoring, "points_per_note")
    pull("rock_meter_increment", scoring, "rock_meter_increment")
    pull("rock_meter_decrement", scoring, "rock_meter_decrement")
    pull("rock_meter_start", scoring, "rock_meter_start")

    pull("line_time_ms", board, "line_time_ms")
    pull("fret_board_height", board, "fret_board_height")
    pull("strum_line_offset", board, "strum_line_offset")
    pull("feedback_ms", board, "feedback_ms")

    pull("lang", ui, "lang")
    pull("tui", ui, "tui")

    pull("basic_debug", debug, "basic_debug")
    pull("quiet", debug, "quiet")

    return flat


_INT_KEYS = {
    "hit_tolerance_ms",
    "lead_in_ms",
    "line_time_ms",
    "fret_board_height",
    "strum_line_offset",
    "feedback_ms",
    "points_per_note",
}

_FLOAT_KEYS = {
    "rock_meter_increment",
    "rock_meter_decrement",
    "rock_meter_start",
}


def settings_from_flat(flat: Dict[str, Any], base: Optional[GameSettings] = None) -> GameSettings:
    """Apply the settings keys of a flat mapping on top of ``base``.

    Only the scalar keys emitted by flatten_config_v2 are read; anything
    else (lang, tui, tier_bounds, ...) and None values are ignored.
    """
    known = _INT_KEYS | _FLOAT_KEYS
    over: Dict[str, Any] = {}
    for k, v in flat.items():
        if k not in known or v is None:
            continue
        try:
            over[k] = int(v) if k in _INT_KEYS else float(v)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{k}: expected a number, got {v!r}") from e
    return (base or GameSettings()).with_overrides(**over)


def dump_config_v2(settings: GameSettings, *, lang: Optional[str] = None) -> str:
    lng = normalize_lang(lang)
    sc = settings.scoring
    cfg: Dict[str, Any] = {
        "version": 2,
        "judge": {
            "hit_tolerance_ms": int(settings.hit_tolerance_ms),
            "lead_in_ms": int(settings.lead_in_ms),
        },
        "scoring": {
            "points_per_note": int(sc.points_per_note),
            "rock_meter_increment": float(sc.rock_meter_increment),
            "rock_meter_decrement": float(sc.rock_meter_decrement),
            "rock_meter_start": float(sc.rock_meter_start),
        },
        "board": {
            "line_time_ms": int(settings.line_time_ms),
            "fret_board_height": int(settings.fret_board_height),
            "strum_line_offset": int(settings.strum_line_offset),
            "feedback_ms": int(settings.feedback_ms),
        },
        "ui": {
            "lang": lng,
            "tui": False,
        },
        "debug": {
            "basic_debug": False,
            "quiet": False,
        },
    }

    if lng == "zh-CN":
        header_lines = [
            "// terminal-hero 配置 v2（支持注释的 JSON）",
            "//",
            "// 基本用法：",
            "//   python3 -m terminal_hero --track <track.json> --config <this_file>",
            "//   python3 -m terminal_hero --save_config config.jsonc",
            "//",
            "// 说明：",
            "// - 以 // 或 # 开头的行会被当作注释忽略。",
            "// - 命令行参数优先级高于配置文件。",
            "",
        ]
    else:
        header_lines = [
            "// terminal-hero config v2 (JSON with comments)",
            "//",
            "// Basic usage:",
            "//   python3 -m terminal_hero --track <track.json> --config <this_file>",
            "//   python3 -m terminal_hero --save_config config.jsonc",
            "//",
            "// Notes:",
            "// - Lines starting with // or # are comments.",
            "// - CLI args override config values.",
            "",
        ]

    header = "\n".join(header_lines)

    body = json.dumps(cfg, ensure_ascii=False, indent=2)
    return header + body + "\n"
