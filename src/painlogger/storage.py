from __future__ import annotations

import base64
import binascii
import json
import logging
import os
import time
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

LOG_KEY = "loggedPainData"
TRAINED_KEY = "didTrainToday"


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def load_json(path: Path) -> dict[str, Any]:
    """
    Safe load:
    - creates parent dirs
    - if missing/empty -> writes {}
    - if corrupt (bad JSON or not UTF-8) -> backs up raw bytes then resets to {}
    Always returns a dict.
    """
    path = Path(path)
    _ensure_parent(path)

    if not path.exists():
        save_json(path, {})
        return {}

    raw = path.read_bytes()
    if not raw.strip():
        save_json(path, {})
        return {}

    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError):
        backup = path.with_suffix(f".corrupt-{int(time.time())}.json")
        backup.write_bytes(raw)
        log.warning("Preferences file %s was corrupt; backed up to %s and reset", path, backup)
        save_json(path, {})
        return {}
    return data if isinstance(data, dict) else {}


def save_json(path: Path, data: Any) -> None:
    """
    Atomic-ish save: temp file in the same dir, fsync, os.replace, chmod 0600.
    """
    path = Path(path)
    _ensure_parent(path)

    tmp = path.with_name(path.name + ".tmp")

    payload = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"

    with open(tmp, "w", encoding="utf-8") as f:
        f.write(payload)
        f.flush()
        os.fsync(f.fileno())

    os.replace(tmp, path)

    try:
        os.chmod(path, 0o600)
    except OSError:
        pass


class Preferences:
    """Key/value preferences backed by one JSON file. Byte values are stored base64."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self, key: str) -> bytes | None:
        raw = load_json(self.path).get(key)
        if raw is None:
            return None
        if not isinstance(raw, str):
            log.warning("Preference %r is not an encoded blob; ignoring it", key)
            return None
        try:
            return base64.b64decode(raw.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError):
            log.warning("Preference %r holds invalid base64; ignoring it", key)
            return None

    def set(self, key: str, value: bytes) -> None:
        data = load_json(self.path)
        data[key] = base64.b64encode(value).decode("ascii")
        save_json(self.path, data)

    def get_bool(self, key: str, default: bool = False) -> bool:
        raw = load_json(self.path).get(key)
        return raw if isinstance(raw, bool) else default

    def set_bool(self, key: str, value: bool) -> None:
        data = load_json(self.path)
        data[key] = bool(value)
        save_json(self.path, data)
