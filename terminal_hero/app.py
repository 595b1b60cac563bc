from __future__ import annotations

import argparse
import logging
import sys
import threading
import time
from typing import Any, Dict, List, Optional

from .config.schema import GameSettings
from .config_v2 import dump_config_v2, flatten_config_v2, load_config_v2, settings_from_flat
from .core.session import PlaySession
from .engine.simulateplay import MODES, SimulatePlayer, drive_session
from .errors import ChartUnavailableError, ConfigError, TrackNotFoundError
from .i18n import normalize_lang, tr
from .io.track_loader import load_track
from .logging_setup import setup_logging
from .ui.scoring import format_result

# flags that mirror GameSettings fields; None means "not given on the CLI"
_SETTING_FLAGS = (
    "hit_tolerance_ms",
    "line_time_ms",
    "fret_board_height",
    "strum_line_offset",
    "lead_in_ms",
)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="terminal_hero")
    g_in = ap.add_argument_group("Input")
    g_in.add_argument("--track", type=str, default=None, help="Parsed track JSON ([[ms, lane, sustain], ...])")
    g_in.add_argument("--track_name", type=str, default=None, help="Track key inside the file, e.g. ExpertSingle")

    g_cfg = ap.add_argument_group("Config")
    g_cfg.add_argument("--config", type=str, default=None, help="Config v2 (JSONC) path")
    g_cfg.add_argument("--save_config", type=str, default=None, help="Write config v2 (JSONC) to this path")

    g_judge = ap.add_argument_group("Judge")
    g_judge.add_argument("--hit_tolerance_ms", type=int, default=None)
    g_judge.add_argument("--lead_in_ms", type=int, default=None)

    g_board = ap.add_argument_group("Board")
    g_board.add_argument("--line_time_ms", type=int, default=None)
    g_board.add_argument("--fret_board_height", type=int, default=None)
    g_board.add_argument("--strum_line_offset", type=int, default=None)

    g_play = ap.add_argument_group("Autoplay")
    g_play.add_argument("--autoplay", type=str, default="perfect", choices=list(MODES))
    g_play.add_argument("--seed", type=int, default=None)
    g_play.add_argument("--jitter_ms", type=float, default=25.0)
    g_play.add_argument("--tick_ms", type=int, default=16)
    g_play.add_argument("--no_stop_on_fail", action="store_true", help="Keep playing after the rock meter runs out")

    g_cui = ap.add_argument_group("CUI")
    g_cui.add_argument("--lang", type=str, default=None, help="Language: zh-CN / en")
    g_cui.add_argument("--tui", action="store_true", help="Show a live Textual stats panel")
    g_cui.add_argument("--quiet", action="store_true", help="Less console output")
    g_cui.add_argument("--basic_debug", action="store_true", help="Debug logging")
    return ap


def resolve_settings(args: Any, flat: Optional[Dict[str, Any]] = None) -> GameSettings:
    """Config file values first, CLI flags on top."""
    settings = settings_from_flat(flat or {})
    cli = {k: getattr(args, k, None) for k in _SETTING_FLAGS}
    return settings_from_flat(cli, base=settings)


def _apply_flat_flags(args: Any, flat: Dict[str, Any]) -> None:
    # boolean / language options from the config file unless set on the CLI
    for key in ("quiet", "basic_debug", "tui"):
        if not getattr(args, key, False) and bool(flat.get(key, False)):
            setattr(args, key, True)
    if getattr(args, "lang", None) is None and flat.get("lang"):
        args.lang = flat.get("lang")


def run(args: Any) -> int:
    logger = logging.getLogger(__name__)
    lang = normalize_lang(getattr(args, "lang", None))

    flat: Dict[str, Any] = {}
    try:
        if args.config:
            flat = flatten_config_v2(load_config_v2(args.config))
            _apply_flat_flags(args, flat)
            lang = normalize_lang(args.lang)
        settings = resolve_settings(args, flat)
    except ConfigError as e:
        logger.error(tr(lang, "error.config", reason=str(e)))
        return 2

    if args.save_config:
        try:
            with open(args.save_config, "w", encoding="utf-8") as f:
                f.write(dump_config_v2(settings, lang=lang))
        except OSError as e:
            logger.error(tr(lang, "error.save_config", path=args.save_config, reason=str(e)))
            return 2
        logger.info("config written: %s", args.save_config)
        if not args.track:
            return 0

    if not args.track:
        logger.error("--track is required")
        return 2

    try:
        timeline = load_track(args.track, args.track_name)
    except (ChartUnavailableError, TrackNotFoundError) as e:
        logger.error(tr(lang, "error.chart", reason=str(e)))
        return 1

    track_name = args.track_name or args.track
    session = PlaySession(timeline, settings, track_name=track_name)
    player = SimulatePlayer(mode=args.autoplay, seed=args.seed, jitter_ms=args.jitter_ms)
    presses = player.schedule(timeline)
    start_ms = -int(settings.lead_in_ms)

    if args.tui:
        _run_with_tui(session, presses, args, start_ms, track_name)
    else:
        drive_session(
            session,
            presses,
            tick_ms=args.tick_ms,
            start_ms=start_ms,
            stop_on_fail=not args.no_stop_on_fail,
        )

    result = session.result()
    lines: List[str] = format_result(result, track_name=track_name, lang=lang, autoplay=args.autoplay)
    for ln in lines:
        print(ln)
    return 3 if result.failed else 0


class _Aborted(Exception):
    pass


def _run_with_tui(session: PlaySession, presses: List[Any], args: Any, start_ms: int, track_name: str) -> None:
    from .ui.headless.textual import init_textual_ui, to_ui_snapshot

    handle, state = init_textual_ui()
    chart_end = session.timeline.end_time()

    def _push(s: PlaySession) -> None:
        handle.push(to_ui_snapshot(s.snapshot(), track_name=track_name, chart_end_ms=chart_end))
        if state.should_quit:
            raise _Aborted()
        # real-time pacing so the panel follows the song clock
        time.sleep(args.tick_ms / 1000.0)

    def _worker() -> None:
        try:
            drive_session(
                session,
                presses,
                tick_ms=args.tick_ms,
                start_ms=start_ms,
                stop_on_fail=not args.no_stop_on_fail,
                on_step=_push,
            )
        except _Aborted:
            logging.getLogger(__name__).info("play aborted from the UI")
        finally:
            handle.stop()

    # the session is only ever touched by the worker; the UI sees snapshots
    th = threading.Thread(target=_worker, name="host-loop", daemon=True)
    th.start()
    handle.run()
    state.should_quit = True
    th.join()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
