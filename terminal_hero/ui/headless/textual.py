from __future__ import annotations

from dataclasses import dataclass
from queue import Empty, SimpleQueue
from typing import Any, List, Optional, Tuple

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import ProgressBar, Static

from ...core.session import SessionSnapshot
from ...engine.view_model import ViewModel
from ...types import LANES
from ..scoring import progress_ratio

LANE_GLYPHS = "GRYBO"


@dataclass
class PlayUISnapshot:
    header_lines: List[str]
    progress01: float
    meter01: float
    board: List[str]
    failed: bool = False


@dataclass
class TextualUIState:
    should_quit: bool = False


def board_lines(vm: ViewModel) -> List[str]:
    """Plain-text fret board, top row first.

    Note heads show the lane letter, sustain tails ``|``, empty cells ``.``;
    the strum line uses ``=`` for empty cells. The lane feedback row is
    appended last: ``+`` for a hit, ``x`` for an over-hit.
    """
    out: List[str] = []
    for ln in vm.note_lines:
        empty = "=" if ln.is_strum_line else "."
        cells = []
        for lane in LANES:
            i = int(lane)
            if ln.note_colors[i]:
                cells.append(LANE_GLYPHS[i])
            elif ln.sustain_colors[i]:
                cells.append("|")
            else:
                cells.append(empty)
        out.append(" ".join(cells))
    fb = []
    for st in vm.note_states:
        fb.append("+" if st.played_correctly else ("x" if st.over_hit else " "))
    out.append(" ".join(fb))
    return out


def to_ui_snapshot(snap: SessionSnapshot, *, track_name: str, chart_end_ms: int) -> PlayUISnapshot:
    st = snap.stats
    header = [
        f"{track_name}  t={snap.now_ms / 1000.0:.2f}s",
        f"score {st.score}  x{st.multiplier()}  streak {st.note_streak_grouped}"
        f"  hit {st.notes_hit_grouped}/{st.total_notes}",
    ]
    if st.failed:
        header.append("FAILED")
    return PlayUISnapshot(
        header_lines=header,
        progress01=progress_ratio(snap.now_ms, chart_end_ms),
        meter01=max(0.0, min(1.0, float(st.rock_meter))),
        board=board_lines(snap.view),
        failed=bool(st.failed),
    )


class TextualUIHandle:
    def __init__(self, *, state: TextualUIState, q: SimpleQueue, app: Any):
        self.state = state
        self.q = q
        self.app = app

    def push(self, snap: PlayUISnapshot) -> None:
        self.q.put(snap)

    def stop(self) -> None:
        self.state.should_quit = True

    def run(self) -> None:
        """Run the Textual app. Must be called from the main thread."""
        self.app.run()


class PlayApp(App):
    CSS = """
    Screen { layout: vertical; }
    #header { height: auto; }
    #progress { height: 1; }
    #body { height: 1fr; }
    #board { width: 1fr; }
    #side { width: 24; }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(self, *, state: TextualUIState, q: SimpleQueue, refresh_hz: float):
        super().__init__()
        self._state = state
        self._q = q
        self._refresh_hz = max(1.0, float(refresh_hz))

    def compose(self) -> ComposeResult:
        yield Static(id="header")
        yield ProgressBar(total=1000, show_eta=False, id="progress")
        with Horizontal(id="body"):
            yield Static(id="board")
            with Vertical(id="side"):
                yield Static("rock meter")
                yield ProgressBar(total=1000, show_eta=False, id="meter")

    def on_mount(self) -> None:
        self.set_interval(1.0 / self._refresh_hz, self._poll)

    def _poll(self) -> None:
        last: Optional[PlayUISnapshot] = None
        while True:
            try:
                last = self._q.get_nowait()
            except Empty:
                break

        if last is not None:
            self.query_one("#header", Static).update("\n".join(last.header_lines))
            self.query_one("#progress", ProgressBar).update(progress=int(round(last.progress01 * 1000.0)))
            self.query_one("#meter", ProgressBar).update(progress=int(round(last.meter01 * 1000.0)))
            self.query_one("#board", Static).update("\n".join(last.board))

        if self._state.should_quit:
            self.exit()

    def action_quit(self) -> None:
        self._state.should_quit = True
        self.exit()


def init_textual_ui(*, refresh_hz: float = 30.0) -> Tuple[TextualUIHandle, TextualUIState]:
    q: SimpleQueue = SimpleQueue()
    st = TextualUIState()
    app = PlayApp(state=st, q=q, refresh_hz=float(refresh_hz))
    return TextualUIHandle(state=st, q=q, app=app), st
