"""Where the preferences file lives, and the guard that keeps it out of git checkouts."""

from __future__ import annotations

import os
import sys
from pathlib import Path

DATA_ENV = "PAINLOGGER_DATA"
CONFIG_DIR = Path.home() / ".config" / "painlogger"


def default_data_path(profile: str | None = None) -> Path:
    return CONFIG_DIR / (f"{profile}.json" if profile else "prefs.json")


def resolve_data_path(data_arg: str | None, profile: str | None) -> tuple[Path, str]:
    """
    Returns (path, reason). Order: --data, $PAINLOGGER_DATA, --profile, default.
    """
    env = os.environ.get(DATA_ENV)
    if data_arg:
        raw, reason = Path(data_arg), "because you passed --data"
    elif env:
        raw, reason = Path(env), f"because {DATA_ENV} is set"
    elif profile:
        raw, reason = default_data_path(profile), f"because you used --profile {profile!r}"
    else:
        raw, reason = default_data_path(), "default XDG config location"
    return raw.expanduser().resolve(), reason


def find_git_root(start: Path) -> Path | None:
    for cur in (start, *start.parents):
        if (cur / ".git").exists():
            return cur
    return None


def assert_safe_data_path(data_path: Path, allow_repo_data_path: bool) -> None:
    # pain history is personal; keep it out of anything that might get pushed
    git_root = find_git_root(data_path.parent)
    if git_root is None or allow_repo_data_path:
        return
    print("🚫 Refusing to keep the pain log inside a git repo.", file=sys.stderr)
    print(f"   data_path: {data_path}", file=sys.stderr)
    print(f"   repo_root: {git_root}", file=sys.stderr)
    print("   Fix: use ~/.config/painlogger/*.json or pass --allow-repo-data-path", file=sys.stderr)
    raise SystemExit(2)
