from __future__ import annotations

import logging
import os
import subprocess
import sys
import tempfile
from pathlib import Path

log = logging.getLogger(__name__)

EXPORT_FILENAME = "PainLog.csv"


class ExportError(Exception):
    """Writing the CSV export failed."""


def write_export(text: str, directory: Path | str | None = None) -> Path:
    """Write PainLog.csv into directory (default: system temp dir) and return its path."""
    base = Path(directory).expanduser() if directory else Path(tempfile.gettempdir())
    out = base / EXPORT_FILENAME
    try:
        base.mkdir(parents=True, exist_ok=True)
        with out.open("w", newline="", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ExportError(f"Could not write {out}: {e}") from e

    log.info("Wrote CSV export to %s", out)
    return out.resolve()


def reveal(path: Path) -> bool:
    """Open the folder holding path in the platform file browser. Returns False if that failed."""
    folder = Path(path).parent
    try:
        if sys.platform.startswith("win"):
            os.startfile(str(folder))  # type: ignore[attr-defined]
        elif sys.platform == "darwin":
            subprocess.run(["open", str(folder)], check=False)
        else:
            subprocess.run(["xdg-open", str(folder)], check=False)
    except OSError as e:
        log.warning("Could not open %s: %s", folder, e)
        return False
    return True
