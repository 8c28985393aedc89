from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Callable

from .export import write_export
from .model import DayRecord, PainLevel, PainLog, TimeSlot
from .serializers import deserialize, export_csv, serialize
from .storage import LOG_KEY, TRAINED_KEY, Preferences

log = logging.getLogger(__name__)

Observer = Callable[[], None]


class PainLogStore:
    """
    The PainLog plus the training flag, bound to a Preferences file.

    Every mutation is written back synchronously, then observers are called.
    The training flag is a single undated boolean; it only ever applies to today.
    """

    def __init__(self, prefs: Preferences):
        self.prefs = prefs
        self.log = PainLog()
        self.trained = False
        self._observers: list[Observer] = []

    @classmethod
    def open(cls, data_path: Path) -> PainLogStore:
        store = cls(Preferences(data_path))
        store.load()
        return store

    def load(self) -> None:
        self.log = deserialize(self.prefs.get(LOG_KEY))
        self.trained = self.prefs.get_bool(TRAINED_KEY, False)
        log.debug("Loaded %d logged days from %s", len(self.log), self.prefs.path)

    # -------- observers --------

    def subscribe(self, callback: Observer) -> None:
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback: Observer) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self) -> None:
        for cb in list(self._observers):
            cb()

    # -------- mutations --------

    def record_entry(self, day: date | datetime, slot: TimeSlot | str, level: PainLevel | int) -> None:
        self.log.record_entry(day, slot, level)
        self.prefs.set(LOG_KEY, serialize(self.log))
        self._notify()

    def set_training(self, value: bool) -> None:
        self.trained = bool(value)
        self.prefs.set_bool(TRAINED_KEY, self.trained)
        self._notify()

    def toggle_training(self) -> bool:
        self.set_training(not self.trained)
        return self.trained

    # -------- queries --------

    def lookup(self, day: date | datetime) -> DayRecord:
        return self.log.lookup(day)

    def history(self) -> list[tuple[date, DayRecord]]:
        return list(self.log.items())

    def colors_for_day(self, day: date | datetime, today: date | datetime) -> tuple[str, str, str]:
        return self.log.colors_for_day(day, today)

    def export_csv(self, today: date | datetime) -> str:
        return export_csv(self.log, self.trained, today)

    def export_file(self, today: date | datetime, directory: Path | str | None = None) -> Path:
        return write_export(self.export_csv(today), directory)
