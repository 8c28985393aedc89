"""Persisted-blob and CSV encodings of a PainLog."""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import date, datetime
from typing import Any

from .model import TIME_SLOTS, PainLevel, PainLog, TimeSlot, day_key

log = logging.getLogger(__name__)

CSV_FIELDS = ["Date", "Morning", "Afternoon", "Night", "Exercise"]


def serialize(pain_log: PainLog) -> bytes:
    """day -> {slot: raw level}, as UTF-8 JSON with sorted keys."""
    payload = {
        d.isoformat(): {slot.value: int(level) for slot, level in rec.items()}
        for d, rec in pain_log.items()
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


def _level_from_raw(raw: Any) -> PainLevel | None:
    # bool is an int subclass; True must not become MILD
    if isinstance(raw, bool) or not isinstance(raw, int):
        return None
    try:
        return PainLevel(raw)
    except ValueError:
        return None


def deserialize(blob: bytes | str | None) -> PainLog:
    """
    Decode a blob written by serialize().
    Never raises on bad data:
    - empty -> empty log
    - malformed -> empty log (warning logged)
    - bad day keys -> that day skipped (warning logged)
    - unknown slots / levels -> dropped from that day only
    """
    pain_log = PainLog()
    if not blob:
        return pain_log

    try:
        data = json.loads(blob)
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        log.warning("Discarding unreadable pain log blob (%d bytes): %s", len(blob), e)
        return pain_log

    if not isinstance(data, dict):
        log.warning("Discarding pain log blob: expected an object, got %s", type(data).__name__)
        return pain_log

    dropped = 0
    for raw_day, raw_rec in data.items():
        try:
            d = date.fromisoformat(str(raw_day))
        except ValueError:
            log.warning("Skipping pain log entry with bad day key %r", raw_day)
            continue

        if not isinstance(raw_rec, dict):
            log.warning("Skipping pain log entry for %s: not a slot mapping", d.isoformat())
            continue

        for raw_slot, raw_level in raw_rec.items():
            try:
                slot = TimeSlot(raw_slot)
            except ValueError:
                dropped += 1
                continue
            level = _level_from_raw(raw_level)
            if level is None:
                dropped += 1
                continue
            pain_log.record_entry(d, slot, level)

    if dropped:
        log.info("Dropped %d unrecognized slot/level values while loading pain log", dropped)
    return pain_log


def export_csv(pain_log: PainLog, training_flag: bool, today: date | datetime) -> str:
    """
    One row per logged day, ascending.
    Unlogged slots are written as 0, the same value as an explicit NONE entry.
    Exercise is 1 only on today's row, and only when the (undated) training flag is set.
    """
    today_key = day_key(today)
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=CSV_FIELDS, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    w.writeheader()

    for d, rec in pain_log.items():
        if not rec:
            continue
        row: dict[str, Any] = {"Date": d.isoformat()}
        for slot in TIME_SLOTS:
            level = rec.get(slot)
            row[slot.value] = int(level) if level is not None else 0
        row["Exercise"] = 1 if (training_flag and d == today_key) else 0
        w.writerow(row)

    return buf.getvalue()
