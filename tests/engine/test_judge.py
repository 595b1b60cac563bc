"""Tests for JudgingEngine."""

import itertools

import pytest

from terminal_hero.engine.judge import JudgingEngine
from terminal_hero.engine.timeline import NoteTimeline
from terminal_hero.errors import TimelineInvariantError
from terminal_hero.types import Lane, Outcome, Resolution

G, R, Y, B, O = Lane.GREEN, Lane.RED, Lane.YELLOW, Lane.BLUE, Lane.ORANGE


def _outcomes(events) -> list:
    return [e.outcome for e in events]


def _engine(timeline: NoteTimeline, tol: int = 100) -> JudgingEngine:
    return JudgingEngine(timeline, tol)


class TestSinglePress:
    def test_hit_on_time(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        events = eng.on_lane_press(G, 1000)
        assert _outcomes(events) == [Outcome.HIT, Outcome.CHORD_HIT]
        assert timeline[0].resolved is Resolution.HIT
        assert eng.last_resolved_index == 0

    @pytest.mark.parametrize("t", [900, 1100])
    def test_window_edges_are_inclusive(self, timeline: NoteTimeline, t: int) -> None:
        eng = _engine(timeline)
        assert Outcome.CHORD_HIT in _outcomes(eng.on_lane_press(G, t))

    def test_too_early_is_over_hit(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        assert _outcomes(eng.on_lane_press(G, 899)) == [Outcome.OVER_HIT]
        assert timeline[0].resolved is Resolution.UNRESOLVED
        assert eng.last_resolved_index == -1

    def test_wrong_lane_is_over_hit(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        assert _outcomes(eng.on_lane_press(R, 1000)) == [Outcome.OVER_HIT]
        assert timeline[0].resolved is Resolution.UNRESOLVED

    def test_wrong_then_right_lane(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        eng.on_lane_press(B, 1000)
        assert Outcome.CHORD_HIT in _outcomes(eng.on_lane_press(G, 1010))

    def test_press_after_window_misses_then_judges_next(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        events = eng.on_lane_press(R, 1500)
        assert _outcomes(events) == [Outcome.MISS, Outcome.HIT, Outcome.CHORD_HIT]
        assert timeline[0].resolved is Resolution.MISSED
        assert timeline[1].resolved is Resolution.HIT
        assert eng.last_resolved_index == 1

    def test_double_press_single_note(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        eng.on_lane_press(G, 1000)
        assert _outcomes(eng.on_lane_press(G, 1010)) == [Outcome.OVER_HIT]
        assert eng.last_resolved_index == 0


class TestTick:
    def test_tick_inside_window_does_nothing(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        assert eng.on_tick(1100) == []
        assert eng.last_resolved_index == -1

    def test_tick_past_window_misses(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        events = eng.on_tick(1101)
        assert _outcomes(events) == [Outcome.MISS]
        assert events[0].size == 1
        assert timeline[0].resolved is Resolution.MISSED

    def test_tick_skips_several_chords(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        events = eng.on_tick(2601)
        assert [e.size for e in events] == [1, 1, 1, 2]
        assert eng.last_resolved_index == 4
        assert all(timeline[i].resolved is Resolution.MISSED for i in range(5))
        assert timeline[5].resolved is Resolution.UNRESOLVED

    def test_tick_past_end(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        eng.on_tick(10_000)
        assert eng.exhausted()
        assert eng.last_resolved_index == len(timeline) - 1
        assert eng.on_tick(20_000) == []


class TestChords:
    def test_two_note_chord(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        eng.on_tick(2450)
        first = eng.on_lane_press(Y, 2500)
        assert _outcomes(first) == [Outcome.HIT]
        assert eng.last_resolved_index == 2
        second = eng.on_lane_press(G, 2505)
        assert _outcomes(second) == [Outcome.HIT, Outcome.CHORD_HIT]
        assert second[-1].size == 2
        assert second[-1].indices == (3, 4)
        assert eng.last_resolved_index == 4

    @pytest.mark.parametrize("order", list(itertools.permutations([R, B, O])))
    def test_any_order_completes_chord(self, timeline: NoteTimeline, order: tuple) -> None:
        eng = _engine(timeline)
        eng.on_tick(2950)
        events = []
        for k, lane in enumerate(order):
            events.extend(eng.on_lane_press(lane, 3000 + k))
        assert _outcomes(events) == [Outcome.HIT, Outcome.HIT, Outcome.HIT, Outcome.CHORD_HIT]
        assert eng.last_resolved_index == 7

    def test_repress_hit_lane_in_open_chord(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        eng.on_tick(2950)
        eng.on_lane_press(O, 3000)
        assert _outcomes(eng.on_lane_press(O, 3005)) == [Outcome.OVER_HIT]
        # the chord stays open and can still be finished
        eng.on_lane_press(B, 3010)
        assert _outcomes(eng.on_lane_press(R, 3020)) == [Outcome.HIT, Outcome.CHORD_HIT]

    def test_repress_after_chord_resolved(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        eng.on_tick(2950)
        for lane in (O, B, R):
            eng.on_lane_press(lane, 3000)
        assert _outcomes(eng.on_lane_press(R, 3001)) == [Outcome.OVER_HIT]

    def test_partial_chord_expires(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        eng.on_tick(2950)
        eng.on_lane_press(R, 3000)
        events = eng.on_tick(3101)
        assert _outcomes(events) == [Outcome.MISS]
        assert events[0].size == 2
        assert [timeline[i].resolved for i in (5, 6, 7)] == [Resolution.HIT, Resolution.MISSED, Resolution.MISSED]
        assert eng.last_resolved_index == 7

    def test_skip_chord_then_hit_next_note(self) -> None:
        tl = NoteTimeline.from_tuples([(1000, Y, 0), (1000, O, 0), (1300, R, 0)])
        eng = _engine(tl)
        events = eng.on_lane_press(R, 1300)
        assert _outcomes(events) == [Outcome.MISS, Outcome.HIT, Outcome.CHORD_HIT]
        assert events[0].size == 2


class TestEdges:
    def test_empty_timeline_press_is_over_hit(self) -> None:
        eng = _engine(NoteTimeline([]))
        assert _outcomes(eng.on_lane_press(G, 0)) == [Outcome.OVER_HIT]
        assert eng.on_tick(1000) == []

    def test_exhausted_timeline_press_is_over_hit(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        eng.on_tick(10_000)
        assert _outcomes(eng.on_lane_press(G, 10_001)) == [Outcome.OVER_HIT]

    def test_press_far_ahead_of_next_chord(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        # expired chords are skipped first, then the green note at 3500 is hit
        events = eng.on_lane_press(G, 3500)
        assert _outcomes(events) == [Outcome.MISS] * 5 + [Outcome.HIT, Outcome.CHORD_HIT]
        assert [e.size for e in events[:5]] == [1, 1, 1, 2, 3]
        assert eng.last_resolved_index == 8

    def test_zero_tolerance(self) -> None:
        tl = NoteTimeline.from_tuples([(1000, G, 0)])
        eng = _engine(tl, tol=0)
        assert _outcomes(eng.on_lane_press(G, 999)) == [Outcome.OVER_HIT]
        assert Outcome.CHORD_HIT in _outcomes(eng.on_lane_press(G, 1000))

    def test_reset(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        eng.on_tick(10_000)
        eng.reset()
        assert eng.last_resolved_index == -1
        assert all(n.resolved is Resolution.UNRESOLVED for n in timeline)

    def test_cursor_past_end_is_fatal(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        with pytest.raises(TimelineInvariantError):
            eng._advance_to(len(timeline))

    def test_unresolved_note_behind_cursor_is_fatal(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        with pytest.raises(TimelineInvariantError):
            eng._advance_to(0)


class TestInvariants:
    def test_monotonic_cursor_and_exactly_once(self, timeline: NoteTimeline) -> None:
        eng = _engine(timeline)
        script = [
            ("press", G, 950), ("press", G, 960), ("tick", None, 1400),
            ("press", Y, 1600), ("tick", None, 2200), ("press", G, 2490),
            ("press", Y, 2510), ("press", O, 2990), ("tick", None, 3200),
            ("press", G, 3450), ("press", G, 3460), ("tick", None, 4000),
        ]
        prev_cursor = -1
        transitions = [0] * len(timeline)
        prev_state = [n.resolved for n in timeline]
        for kind, lane, t in script:
            if kind == "press":
                eng.on_lane_press(lane, t)
            else:
                eng.on_tick(t)
            assert eng.last_resolved_index >= prev_cursor
            prev_cursor = eng.last_resolved_index
            for i, n in enumerate(timeline):
                if i <= eng.last_resolved_index:
                    assert n.resolved is not Resolution.UNRESOLVED
                if n.resolved is not prev_state[i]:
                    assert prev_state[i] is Resolution.UNRESOLVED
                    transitions[i] += 1
                prev_state[i] = n.resolved
        assert transitions == [1] * len(timeline)
