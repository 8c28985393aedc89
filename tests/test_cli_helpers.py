"""Tests for pure-logic helpers and commands in cli.py."""

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path

import pytest

from painlogger.cli import _calendar_lines, _cell_text, _format_record, _parse_level, _parse_slot, main
from painlogger.model import PainLevel, TimeSlot
from painlogger.store import PainLogStore

TODAY = date(2025, 4, 18)

# ---- _parse_level ----


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("0", PainLevel.NONE),
        ("3", PainLevel.SEVERE),
        ("mild", PainLevel.MILD),
        ("Moderate", PainLevel.MODERATE),
        (" none ", PainLevel.NONE),
        ("Severe Pain", PainLevel.SEVERE),
    ],
)
def test_parse_level(raw, expected):
    assert _parse_level(raw) is expected


@pytest.mark.parametrize("raw", ["4", "-1", "awful", "", None])
def test_parse_level_bad_raises(raw):
    with pytest.raises(SystemExit):
        _parse_level(raw)


# ---- _parse_slot ----


def test_parse_slot_case_insensitive():
    assert _parse_slot("morning") is TimeSlot.MORNING
    assert _parse_slot("NIGHT") is TimeSlot.NIGHT


def test_parse_slot_bad_raises():
    with pytest.raises(SystemExit):
        _parse_slot("Evening")


# ---- formatting ----


def test_format_record_marks_unlogged():
    line = _format_record({TimeSlot.MORNING: PainLevel.MODERATE})
    assert "Morning: Moderate Pain (2)" in line
    assert "Afternoon: —" in line


def test_cell_text_logged_day():
    rec = {TimeSlot.MORNING: PainLevel.MILD, TimeSlot.NIGHT: PainLevel.NONE}
    assert _cell_text(rec, date(2025, 4, 3), TODAY, trained=False) == " 3 1.0"


def test_cell_text_today_trained():
    assert _cell_text({}, TODAY, TODAY, trained=True) == "18*..."


def test_cell_text_future_is_blank():
    assert _cell_text({}, TODAY + timedelta(days=1), TODAY, trained=True) == "19    "


def test_calendar_lines_layout(tmp_path):
    store = PainLogStore.open(tmp_path / "prefs.json")
    store.record_entry(TODAY, TimeSlot.AFTERNOON, PainLevel.SEVERE)
    lines = _calendar_lines(store, 2025, 4, TODAY)
    assert lines[0] == "April 2025"
    assert lines[1].startswith("Mon")
    assert "18 .3." in "\n".join(lines)
    # 2025-04-01 is a Tuesday: first week row starts with one blank cell
    assert lines[2].startswith(" " * 7 + " 1 ...")


# ---- commands ----


def _run(tmp_path: Path, *argv: str) -> None:
    main(["--data", str(tmp_path / "prefs.json"), *argv])


def test_log_and_history(tmp_path, capsys):
    _run(tmp_path, "log", "--slot", "Morning", "--level", "moderate", "--day", "2025-04-18")
    _run(tmp_path, "history")
    out = capsys.readouterr().out
    assert "2025-04-18  Morning: Moderate Pain (2)" in out


def test_log_future_day_refused(tmp_path):
    tomorrow = (date.today() + timedelta(days=2)).isoformat()
    with pytest.raises(SystemExit):
        _run(tmp_path, "log", "--slot", "Night", "--level", "1", "--day", tomorrow)
    assert PainLogStore.open(tmp_path / "prefs.json").history() == []


def test_log_bad_day_exits(tmp_path):
    with pytest.raises(SystemExit):
        _run(tmp_path, "log", "--slot", "Night", "--level", "1", "--day", "someday")


def test_train_on_off(tmp_path, capsys):
    _run(tmp_path, "train", "--on")
    assert PainLogStore.open(tmp_path / "prefs.json").trained is True
    _run(tmp_path, "train")
    assert PainLogStore.open(tmp_path / "prefs.json").trained is False
    assert "Training today: no" in capsys.readouterr().out


def test_export_command_writes_file(tmp_path, capsys):
    _run(tmp_path, "log", "--slot", "Morning", "--level", "2", "--day", "2025-04-18")
    _run(tmp_path, "export", "--dir", str(tmp_path / "out"))
    text = (tmp_path / "out" / "PainLog.csv").read_text(encoding="utf-8")
    assert text == "Date,Morning,Afternoon,Night,Exercise\n2025-04-18,2,0,0,0\n"
    assert "Exported 1 day →" in capsys.readouterr().out


def test_export_command_failure_exits(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        _run(tmp_path, "export", "--dir", str(blocker))
    assert "Export failed" in str(exc.value)


def test_show_unlogged_day(tmp_path, capsys):
    _run(tmp_path, "show", "--day", "2025-01-02")
    assert "Nothing logged." in capsys.readouterr().out


def test_export_command_pluralizes(tmp_path, capsys):
    _run(tmp_path, "log", "--slot", "Morning", "--level", "1", "--day", "2025-04-17")
    _run(tmp_path, "log", "--slot", "Morning", "--level", "2", "--day", "2025-04-18")
    _run(tmp_path, "export", "--dir", str(tmp_path / "out"))
    assert "Exported 2 days →" in capsys.readouterr().out


def test_show_day_too_far_back_exits_with_message(tmp_path):
    with pytest.raises(SystemExit) as exc:
        _run(tmp_path, "show", "--day", "99999999999 days ago")
    assert "too far back" in str(exc.value)


def test_calendar_offset_out_of_range_exits_with_message(tmp_path):
    with pytest.raises(SystemExit) as exc:
        _run(tmp_path, "calendar", "--offset", "200000")
    assert "out of range" in str(exc.value)


def test_calendar_prints_month(tmp_path, capsys):
    _run(tmp_path, "calendar")
    out = capsys.readouterr().out
    assert out.splitlines()[1].startswith("Mon")
