from __future__ import annotations

import logging
import tkinter as tk
from datetime import date
from tkinter import messagebox, ttk

from ._util import _fmt_day, _today
from .calendar_grid import WEEKDAY_HEADERS, month_cells, month_title, shift_month
from .config import assert_safe_data_path, resolve_data_path
from .export import ExportError, reveal
from .model import TIME_SLOTS, EMPTY_SLOT_COLOR, PainLevel, TimeSlot
from .store import PainLogStore

log = logging.getLogger(__name__)

CELL_SIZE = 34
RING_WIDTH = 6
TRAINED_FILL = "#bfdbfe"  # light blue
PLAIN_FILL = "#ffffff"
RING_EDGE = "#e5e7eb"


def _tk_arc(start: int, end: int) -> tuple[float, float]:
    # clockwise-from-3-o'clock degrees -> tk (counter-clockwise start, extent)
    return float(-end), float(end - start)


def draw_day_circle(
    canvas: tk.Canvas,
    x: float,
    y: float,
    colors: tuple[str, str, str] | list[str],
    trained: bool,
    label: str = "",
) -> None:
    """Three-arc ring (one arc per time slot) with a filled centre."""
    r = CELL_SIZE / 2 - 1
    box = (x - r + RING_WIDTH / 2, y - r + RING_WIDTH / 2, x + r - RING_WIDTH / 2, y + r - RING_WIDTH / 2)

    for slot, color in zip(TIME_SLOTS, colors):
        if color == EMPTY_SLOT_COLOR:
            continue
        start, extent = _tk_arc(*slot.arc)
        canvas.create_arc(*box, start=start, extent=extent, style="arc", outline=color, width=RING_WIDTH)

    inner = r - RING_WIDTH
    canvas.create_oval(
        x - inner,
        y - inner,
        x + inner,
        y + inner,
        outline="",
        fill=TRAINED_FILL if trained else PLAIN_FILL,
    )
    canvas.create_oval(x - r, y - r, x + r, y + r, outline=RING_EDGE)
    if label:
        canvas.create_text(x, y, text=label, fill="#000", font=("TkDefaultFont", 8))


class PainLoggerApp(tk.Tk):
    def __init__(self, store: PainLogStore):
        super().__init__()
        self.title("Pain Logger")
        self.geometry("460x720")
        self.store = store

        self.month_offset = 0
        self.slot_var = tk.StringVar(value=TimeSlot.MORNING.value)
        self.level_var = tk.IntVar(value=int(PainLevel.NONE))

        self._build_header()
        self._build_pickers()
        self._build_actions()
        self._build_calendar()
        self._build_export()

        self.store.subscribe(self._refresh)
        self._refresh()

    # -------- Crash guard --------

    def report_callback_exception(self, exc, val, tb):  # type: ignore[override]
        log.error("Unhandled GUI error", exc_info=(exc, val, tb))
        try:
            messagebox.showerror("Crash prevented", f"{exc.__name__}: {val}")
        except tk.TclError:
            pass

    def _safe_cmd(self, fn):
        def wrapped(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                log.exception("Command %s failed", getattr(fn, "__name__", fn))
                try:
                    messagebox.showerror("Crash prevented", f"{type(e).__name__}: {e}")
                except tk.TclError:
                    pass
                return None

        return wrapped

    # -------------------------
    # Layout
    # -------------------------

    def _build_header(self) -> None:
        frm = ttk.Frame(self, padding=(12, 10, 12, 4))
        frm.pack(fill="x")
        ttk.Label(frm, text="Log Pain", font=("TkDefaultFont", 18, "bold")).pack(anchor="w")
        self.date_var = tk.StringVar(value=_fmt_day(_today()))
        ttk.Label(frm, textvariable=self.date_var, font=("TkDefaultFont", 10, "bold")).pack(anchor="w")

    def _build_pickers(self) -> None:
        frm = ttk.Frame(self, padding=(12, 4))
        frm.pack(fill="x")

        ttk.Label(frm, text="Time of Day", font=("TkDefaultFont", 11, "bold")).pack(anchor="w")
        slots = ttk.Frame(frm)
        slots.pack(fill="x", pady=(2, 8))
        for slot in TIME_SLOTS:
            ttk.Radiobutton(
                slots,
                text=slot.value,
                value=slot.value,
                variable=self.slot_var,
                command=self._draw_preview,
            ).pack(side="left", padx=(0, 10))

        ttk.Label(frm, text="Pain Level", font=("TkDefaultFont", 11, "bold")).pack(anchor="w")
        levels = ttk.Frame(frm)
        levels.pack(fill="x", pady=(2, 8))
        for level in PainLevel:
            ttk.Radiobutton(
                levels,
                text=level.label,
                value=int(level),
                variable=self.level_var,
                command=self._draw_preview,
            ).pack(side="left", padx=(0, 6))

        row = ttk.Frame(frm)
        row.pack(fill="x")
        self.preview_canvas = tk.Canvas(row, width=CELL_SIZE, height=CELL_SIZE, highlightthickness=0)
        self.preview_canvas.pack(side="left")
        self.preview_var = tk.StringVar()
        ttk.Label(row, textvariable=self.preview_var).pack(side="left", padx=8)

    def _build_actions(self) -> None:
        frm = ttk.Frame(self, padding=(12, 8))
        frm.pack(fill="x")
        ttk.Button(frm, text="Log Entry", command=self._safe_cmd(self._log_entry)).pack(fill="x", pady=(0, 6))
        self.train_btn = ttk.Button(frm, text="Training", command=self._safe_cmd(self._toggle_training))
        self.train_btn.pack(fill="x")

    def _build_calendar(self) -> None:
        nav = ttk.Frame(self, padding=(12, 8, 12, 0))
        nav.pack(fill="x")
        ttk.Button(nav, text="◀", width=3, command=self._safe_cmd(lambda: self._shift_month(-1))).pack(side="left")
        ttk.Button(nav, text="▶", width=3, command=self._safe_cmd(lambda: self._shift_month(1))).pack(side="right")
        self.month_var = tk.StringVar()
        ttk.Label(nav, textvariable=self.month_var, font=("TkDefaultFont", 13, "bold")).pack(side="top")

        frm = ttk.Frame(self, padding=(12, 4))
        frm.pack(fill="x")
        ttk.Label(frm, text="Pain Calendar", font=("TkDefaultFont", 11, "bold")).pack(anchor="w")

        self.cal_pitch = CELL_SIZE + 18
        self.cal_canvas = tk.Canvas(
            frm,
            width=self.cal_pitch * 7,
            height=20 + self.cal_pitch * 6,
            highlightthickness=0,
            bg="#ffffff",
        )
        self.cal_canvas.pack(anchor="w", pady=4)

    def _build_export(self) -> None:
        frm = ttk.Frame(self, padding=(12, 4, 12, 12))
        frm.pack(fill="x")
        ttk.Button(frm, text="Export CSV", command=self._safe_cmd(self._export_csv)).pack(fill="x")
        self.export_status = tk.StringVar(value="")
        ttk.Label(frm, textvariable=self.export_status, foreground="#555", wraplength=420).pack(anchor="w", pady=(6, 0))

    # -------------------------
    # Actions
    # -------------------------

    def _selected_slot(self) -> TimeSlot:
        return TimeSlot(self.slot_var.get())

    def _selected_level(self) -> PainLevel:
        return PainLevel(self.level_var.get())

    def _log_entry(self) -> None:
        # entries only ever go to today
        self.store.record_entry(_today(), self._selected_slot(), self._selected_level())

    def _toggle_training(self) -> None:
        self.store.toggle_training()

    def _shift_month(self, delta: int) -> None:
        self.month_offset += delta
        self._draw_calendar()

    def _export_csv(self) -> None:
        try:
            path = self.store.export_file(_today())
        except ExportError as e:
            messagebox.showerror("Export failed", f"Could not export CSV:\n{e}")
            return

        self.export_status.set(f"Saved: {path}")
        if messagebox.askyesno("Exported", f"Saved {path.name} to:\n{path.parent}\n\nOpen the folder?"):
            if not reveal(path):
                messagebox.showinfo("Export location", str(path))

    # -------------------------
    # Drawing
    # -------------------------

    def _refresh(self) -> None:
        self.date_var.set(_fmt_day(_today()))
        self.train_btn.configure(text="Training ✓" if self.store.trained else "Training")
        self._draw_preview()
        self._draw_calendar()

    def _draw_preview(self) -> None:
        slot = self._selected_slot()
        level = self._selected_level()
        colors = [level.color if s == slot else EMPTY_SLOT_COLOR for s in TIME_SLOTS]
        c = self.preview_canvas
        c.delete("all")
        draw_day_circle(c, CELL_SIZE / 2, CELL_SIZE / 2, colors, trained=False)
        self.preview_var.set(f"You selected: {level.label}")

    def _draw_calendar(self) -> None:
        today = _today()
        year, month = shift_month(today, self.month_offset)
        self.month_var.set(month_title(year, month))

        c = self.cal_canvas
        c.delete("all")
        pitch = self.cal_pitch

        for i, name in enumerate(WEEKDAY_HEADERS):
            c.create_text(i * pitch + pitch / 2, 10, text=name, fill="#666")

        for idx, d in enumerate(month_cells(year, month)):
            if d is None:
                continue
            col, row = idx % 7, idx // 7
            x = col * pitch + pitch / 2
            y = 20 + row * pitch + pitch / 2
            self._draw_day(c, x, y, d, today)

    def _draw_day(self, c: tk.Canvas, x: float, y: float, d: date, today: date) -> None:
        colors = self.store.colors_for_day(d, today)
        is_today = d == today
        draw_day_circle(c, x, y, colors, trained=is_today and self.store.trained, label=str(d.day))
        if is_today:
            r = CELL_SIZE / 2 + 2
            c.create_oval(x - r, y - r, x + r, y + r, outline="#2563eb")


# -------------------------
# GUI Entrypoint
# -------------------------


def run_gui(argv=None) -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    data_path, _reason = resolve_data_path(None, None)
    assert_safe_data_path(data_path, allow_repo_data_path=False)
    app = PainLoggerApp(PainLogStore.open(data_path))
    app.mainloop()


if __name__ == "__main__":
    run_gui()
