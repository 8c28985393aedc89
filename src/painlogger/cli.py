from __future__ import annotations

import argparse
import logging
import stat
from datetime import date

from ._util import _fmt_day, _today
from .calendar_grid import WEEKDAY_HEADERS, month_cells, month_title, shift_month
from .config import assert_safe_data_path, resolve_data_path
from .export import ExportError
from .model import TIME_SLOTS, DayRecord, PainLevel, TimeSlot
from .storage import load_json, save_json
from .store import PainLogStore
from .timeparse import parse_day


# -------------------------
# Input helpers
# -------------------------

def _parse_level(raw: str | None) -> PainLevel:
    """
    Accepts the raw value (0-3) or a name: none, mild, moderate, severe.
    """
    s = str(raw or "").strip().lower()
    if s.isdigit():
        try:
            return PainLevel(int(s))
        except ValueError:
            pass
    for level in PainLevel:
        if s in (level.name.lower(), level.label.lower()):
            return level
    names = ", ".join(f"{lv.value}={lv.name.lower()}" for lv in PainLevel)
    raise SystemExit(f"Bad --level {raw!r}. Use one of: {names}")


def _parse_slot(raw: str | None) -> TimeSlot:
    s = str(raw or "").strip().lower()
    for slot in TIME_SLOTS:
        if s == slot.value.lower():
            return slot
    raise SystemExit(f"Bad --slot {raw!r}. Use one of: {', '.join(t.value for t in TIME_SLOTS)}")


def _parse_day_arg(raw: str | None, today: date) -> date:
    try:
        return parse_day(raw, today=today)
    except ValueError as e:
        raise SystemExit(str(e)) from e


def _format_record(rec: DayRecord) -> str:
    parts = []
    for slot in TIME_SLOTS:
        level = rec.get(slot)
        parts.append(f"{slot.value}: {level.label} ({int(level)})" if level is not None else f"{slot.value}: —")
    return "  |  ".join(parts)


def _cell_text(rec: DayRecord, d: date, today: date, trained: bool) -> str:
    """
    Fixed-width cell: day number + one char per slot.
    '.' = not logged, digit = level, blank = future. '*' marks today when trained.
    """
    if d > today:
        marks = "   "
    else:
        marks = "".join(str(int(rec[s])) if s in rec else "." for s in TIME_SLOTS)
    flag = "*" if (d == today and trained) else " "
    return f"{d.day:>2}{flag}{marks}"


def _calendar_lines(store: PainLogStore, year: int, month: int, today: date) -> list[str]:
    cells = month_cells(year, month)
    width = 6
    lines = [month_title(year, month), " ".join(h.ljust(width) for h in WEEKDAY_HEADERS)]
    row: list[str] = []
    for d in cells:
        row.append(" " * width if d is None else _cell_text(store.lookup(d), d, today, store.trained))
        if len(row) == 7:
            lines.append(" ".join(row).rstrip())
            row = []
    if row:
        lines.append(" ".join(row).rstrip())
    return lines


# -------------------------
# Pain commands
# -------------------------

def cmd_log(args: argparse.Namespace) -> None:
    today = _today()
    day = _parse_day_arg(args.day, today)
    if day > today:
        raise SystemExit(f"Can't log pain for a future day ({day.isoformat()}).")

    slot = _parse_slot(args.slot)
    level = _parse_level(args.level)

    store = PainLogStore.open(args.data_path)
    store.record_entry(day, slot, level)
    print(f"🩹 Logged: {slot.value} → {level.label} on {day.isoformat()}")


def cmd_show(args: argparse.Namespace) -> None:
    today = _today()
    day = _parse_day_arg(args.day, today)
    store = PainLogStore.open(args.data_path)
    rec = store.lookup(day)

    print(_fmt_day(day))
    if not rec:
        print("Nothing logged.")
    else:
        print(_format_record(rec))
    if day == today:
        print(f"Training: {'yes' if store.trained else 'no'}")


def cmd_history(args: argparse.Namespace) -> None:
    store = PainLogStore.open(args.data_path)
    rows = store.history()
    if not rows:
        print("No pain entries yet.")
        return
    for d, rec in rows:
        print(f"{d.isoformat()}  {_format_record(rec)}")


def cmd_train(args: argparse.Namespace) -> None:
    store = PainLogStore.open(args.data_path)
    if args.on:
        store.set_training(True)
    elif args.off:
        store.set_training(False)
    else:
        store.toggle_training()
    print(f"🏋️ Training today: {'yes' if store.trained else 'no'}")


def cmd_calendar(args: argparse.Namespace) -> None:
    today = _today()
    year, month = shift_month(today, args.offset)
    store = PainLogStore.open(args.data_path)
    try:
        lines = _calendar_lines(store, year, month, today)
    except (ValueError, OverflowError) as e:
        raise SystemExit(f"Bad --offset {args.offset}: month {year}-{month:02d} is out of range ({e})") from e
    for line in lines:
        print(line)


def cmd_export(args: argparse.Namespace) -> None:
    store = PainLogStore.open(args.data_path)
    try:
        out_path = store.export_file(_today(), args.dir)
    except ExportError as e:
        raise SystemExit(f"❌ Export failed: {e}") from e

    n = len(store.history())
    if n:
        print(f"📄 Exported {n} day{'s' if n != 1 else ''} → {out_path}")
    else:
        print(f"📄 Exported header-only CSV (nothing logged yet) → {out_path}")


# -------------------------
# Core commands
# -------------------------

def cmd_init(args: argparse.Namespace) -> None:
    save_json(args.data_path, load_json(args.data_path))
    print(f"✅ Initialized data file: {args.data_path}")


def cmd_where(args: argparse.Namespace) -> None:
    print(args.data_path)
    print(f"↳ using {args.data_reason}")


def cmd_doctor(args: argparse.Namespace) -> None:
    print("=== Pain Logger Doctor ===")

    assert_safe_data_path(args.data_path, args.allow_repo_data_path)
    print("✅ Data path safety guard: OK")

    if not args.data_path.exists():
        print("⚠️ Data file missing (run `painlog init`)")
        print("=== Done ===")
        return

    store = PainLogStore.open(args.data_path)
    n = len(store.history())
    print(f"✅ Pain log readable: {n} logged day{'s' if n != 1 else ''}")

    mode = args.data_path.stat().st_mode
    perms = stat.S_IMODE(mode)
    print(f"🔐 File permissions: {oct(perms)} (target 0o600)")

    print("=== Done ===")


def main(argv=None) -> None:
    p = argparse.ArgumentParser(prog="painlog", description="Daily pain logger")
    p.add_argument("--data", default=None, help="Path to data JSON (overrides env/default)")
    p.add_argument("--profile", default=None, help="Profile name (e.g. dev/test)")
    p.add_argument("--allow-repo-data-path", action="store_true", help="Override safety guard (not recommended)")
    p.add_argument("-v", "--verbose", action="store_true", help="Show informational log messages")

    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("init", help="Initialize data store safely").set_defaults(func=cmd_init)
    sub.add_parser("where", help="Show which data file is active and why").set_defaults(func=cmd_where)
    sub.add_parser("doctor", help="Run safety + health checks").set_defaults(func=cmd_doctor)

    log_p = sub.add_parser("log", help="Log a pain level for a time slot")
    log_p.add_argument("--slot", required=True, help="Morning, Afternoon or Night")
    log_p.add_argument("--level", required=True, help="0-3 or none/mild/moderate/severe")
    log_p.add_argument("--day", default=None, help="today (default), yesterday, '3 days ago', 2025-04-18")
    log_p.set_defaults(func=cmd_log)

    show = sub.add_parser("show", help="Show one day's entries")
    show.add_argument("--day", default=None, help="today (default), yesterday, '3 days ago', 2025-04-18")
    show.set_defaults(func=cmd_show)

    sub.add_parser("history", help="List every logged day, oldest first").set_defaults(func=cmd_history)

    train = sub.add_parser("train", help="Toggle (or set) today's training flag")
    grp = train.add_mutually_exclusive_group()
    grp.add_argument("--on", action="store_true")
    grp.add_argument("--off", action="store_true")
    train.set_defaults(func=cmd_train)

    cal = sub.add_parser("calendar", help="Print a month calendar of logged levels")
    cal.add_argument("--offset", type=int, default=0, help="Months from now (e.g. -1 = last month)")
    cal.set_defaults(func=cmd_calendar)

    export = sub.add_parser("export", help="Write PainLog.csv")
    export.add_argument("--dir", default=None, help="Output directory (default: system temp dir)")
    export.set_defaults(func=cmd_export)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    args.data_path, args.data_reason = resolve_data_path(args.data, args.profile)

    assert_safe_data_path(args.data_path, args.allow_repo_data_path)

    args.func(args)


if __name__ == "__main__":
    main()
