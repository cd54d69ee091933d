"""
Unit tests for draft and export storage.
"""
from __future__ import annotations

import json

import pytest

from packages.shared import storage
from tests.fixtures.discharge_fixture import make_discharge_data, make_investigations


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "DATA_DIR", tmp_path)
    return tmp_path


def test_load_without_draft_returns_none():
    assert storage.load_draft() is None


def test_save_and_load_round_trip():
    data = make_discharge_data(investigations=make_investigations("LABS", 3))
    path = storage.save_draft(data)
    assert path.exists()
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["patientName"] == "Ravi Kumar"
    assert isinstance(raw["treatmentGiven"], list)
    assert storage.load_draft() == data


def test_legacy_draft_is_ignored():
    storage.ensure_dirs()
    storage.get_draft_path().write_text(json.dumps({"patientName": "Old", "investigations": "CBC normal"}), encoding="utf-8")
    assert storage.load_draft() is None


def test_corrupt_draft_is_ignored():
    storage.ensure_dirs()
    storage.get_draft_path().write_text("{not json", encoding="utf-8")
    assert storage.load_draft() is None


def test_invalid_draft_is_ignored():
    storage.ensure_dirs()
    payload = {"investigations": [{"id": "a"}, {"id": "a"}], "treatmentGiven": []}
    storage.get_draft_path().write_text(json.dumps(payload), encoding="utf-8")
    assert storage.load_draft() is None


def test_clear_draft():
    storage.save_draft(make_discharge_data())
    assert storage.clear_draft() is True
    assert storage.clear_draft() is False
    assert storage.load_draft() is None


def test_save_export(data_dir):
    path = storage.save_export("exp-1", "Ravi_Discharge_Summary.docx", b"PK\x03\x04")
    assert path == data_dir / "exports" / "exp-1" / "Ravi_Discharge_Summary.docx"
    assert path.read_bytes() == b"PK\x03\x04"
