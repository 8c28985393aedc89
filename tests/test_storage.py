"""Tests for storage.load_json, storage.save_json and Preferences."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from painlogger.storage import Preferences, load_json, save_json


@pytest.fixture()
def tmp_json(tmp_path: Path) -> Path:
    return tmp_path / "prefs.json"


# ---- save_json ----


def test_save_writes_valid_json(tmp_json):
    save_json(tmp_json, {"didTrainToday": True, "loggedPainData": "e30="})
    assert json.loads(tmp_json.read_text()) == {"didTrainToday": True, "loggedPainData": "e30="}


def test_save_creates_parent_dirs(tmp_path):
    deep = tmp_path / "a" / "b" / "prefs.json"
    save_json(deep, {})
    assert deep.exists()


def test_save_is_atomic_no_tmp_left(tmp_json):
    save_json(tmp_json, {"x": 1})
    assert not tmp_json.with_name(tmp_json.name + ".tmp").exists()


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_save_sets_permissions(tmp_json):
    save_json(tmp_json, {})
    assert oct(os.stat(tmp_json).st_mode & 0o777) == "0o600"


# ---- load_json ----


def test_load_missing_returns_empty_and_creates_file(tmp_json):
    assert load_json(tmp_json) == {}
    assert tmp_json.exists()


def test_load_empty_file_returns_empty_dict(tmp_json):
    tmp_json.write_text("", encoding="utf-8")
    assert load_json(tmp_json) == {}


def test_load_corrupt_returns_empty_and_backs_up(tmp_json):
    tmp_json.write_text("not valid json {{{{", encoding="utf-8")
    assert load_json(tmp_json) == {}
    assert len(list(tmp_json.parent.glob("*.corrupt-*.json"))) == 1


def test_load_non_dict_json_returns_empty(tmp_json):
    tmp_json.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert load_json(tmp_json) == {}


# ---- Preferences ----


def test_prefs_missing_key(tmp_json):
    prefs = Preferences(tmp_json)
    assert prefs.get("loggedPainData") is None
    assert prefs.get_bool("didTrainToday") is False
    assert prefs.get_bool("didTrainToday", default=True) is True


def test_prefs_bytes_roundtrip(tmp_json):
    prefs = Preferences(tmp_json)
    blob = b'{"2025-04-18":{"Morning":2}}\x00\xff'
    prefs.set("loggedPainData", blob)
    assert Preferences(tmp_json).get("loggedPainData") == blob


def test_prefs_keys_independent(tmp_json):
    prefs = Preferences(tmp_json)
    prefs.set("loggedPainData", b"abc")
    prefs.set_bool("didTrainToday", True)
    assert prefs.get("loggedPainData") == b"abc"
    assert prefs.get_bool("didTrainToday") is True


def test_prefs_bad_base64_ignored(tmp_json):
    save_json(tmp_json, {"loggedPainData": "@@not base64@@"})
    assert Preferences(tmp_json).get("loggedPainData") is None


def test_prefs_non_string_blob_ignored(tmp_json):
    save_json(tmp_json, {"loggedPainData": {"2025-04-18": {"Morning": 2}}})
    assert Preferences(tmp_json).get("loggedPainData") is None


def test_prefs_non_bool_flag_uses_default(tmp_json):
    save_json(tmp_json, {"didTrainToday": "yes"})
    assert Preferences(tmp_json).get_bool("didTrainToday") is False


def test_load_non_utf8_returns_empty_and_backs_up_bytes(tmp_json):
    raw = b'{"didTrainToday": true}\xff\xfe'
    tmp_json.write_bytes(raw)
    assert load_json(tmp_json) == {}
    backups = list(tmp_json.parent.glob("*.corrupt-*.json"))
    assert len(backups) == 1
    assert backups[0].read_bytes() == raw
    assert json.loads(tmp_json.read_text(encoding="utf-8")) == {}


def test_load_deeply_nested_returns_empty(tmp_json):
    tmp_json.write_text("[" * 200000, encoding="utf-8")
    assert load_json(tmp_json) == {}
