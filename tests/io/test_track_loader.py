"""Tests for the parsed-track loader."""

import json
from pathlib import Path

import pytest

from terminal_hero.errors import ChartUnavailableError, TrackNotFoundError
from terminal_hero.io.track_loader import list_tracks, load_track
from terminal_hero.types import Lane


class TestLoadTrack:
    def test_named_track(self, demo_track_path: str) -> None:
        tl = load_track(demo_track_path, "MediumSingle")
        assert len(tl) == 7
        assert tl.total_note_count() == 6
        assert tl[2].sustain_length == 400

    def test_colour_names(self, demo_track_path: str) -> None:
        tl = load_track(demo_track_path, "ExpertSingle")
        assert [n.lane for n in tl.chord_at(0)] == [Lane.GREEN, Lane.RED]
        assert tl.total_note_count() == 5

    def test_default_track_is_first_by_name(self, demo_track_path: str) -> None:
        assert len(load_track(demo_track_path)) == 8

    def test_list_tracks(self, demo_track_path: str) -> None:
        assert list_tracks(demo_track_path) == ["ExpertSingle", "MediumSingle"]

    def test_bare_list_is_sorted(self, tmp_path: Path) -> None:
        p = tmp_path / "bare.json"
        p.write_text(json.dumps([[500, 1], [100, 0, 20]]), encoding="utf-8")
        tl = load_track(str(p))
        assert [n.timestamp for n in tl] == [100, 500]
        assert tl[0].sustain_length == 20

    def test_object_rows(self, tmp_path: Path) -> None:
        p = tmp_path / "rows.json"
        p.write_text(json.dumps([{"timestamp": 10, "lane": "orange"}]), encoding="utf-8")
        assert load_track(str(p))[0].lane is Lane.ORANGE


class TestLoadFailures:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ChartUnavailableError) as ei:
            load_track(str(tmp_path / "nope.json"))
        assert ei.value.reason == "file not found"

    def test_unknown_track(self, demo_track_path: str) -> None:
        with pytest.raises(TrackNotFoundError):
            load_track(demo_track_path, "HardDoubleBass")

    def test_invalid_json(self, tmp_path: Path) -> None:
        p = tmp_path / "bad.json"
        p.write_text("{", encoding="utf-8")
        with pytest.raises(ChartUnavailableError):
            load_track(str(p))

    @pytest.mark.parametrize("row", [[10, 7, 0], [10, "purple", 0], [10]])
    def test_bad_rows(self, tmp_path: Path, row: list) -> None:
        p = tmp_path / "rows.json"
        p.write_text(json.dumps([row]), encoding="utf-8")
        with pytest.raises(ChartUnavailableError):
            load_track(str(p))

    def test_no_tracks(self, tmp_path: Path) -> None:
        p = tmp_path / "empty.json"
        p.write_text(json.dumps({"tracks": {}}), encoding="utf-8")
        with pytest.raises(ChartUnavailableError):
            load_track(str(p))
