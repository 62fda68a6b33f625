"""Tests for the quick-contacts command line."""
from __future__ import annotations

import json

import pytest

from quick_contacts.contacts import list_contacts
from quick_contacts.interfaces import capture_cli


@pytest.fixture
def file_backends(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("QC_CONTACTS_FORCE_FILE", "1")
    monkeypatch.setenv("QC_CONTACTS_DIR", str(tmp_path / "contacts"))
    monkeypatch.setenv("QC_ACTIVITY_FORCE_FILE", "1")
    monkeypatch.setenv("QC_ACTIVITY_LOG", str(tmp_path / "activity.jsonl"))
    monkeypatch.setenv("QC_SEED_COUNT", "0")
    monkeypatch.delenv("QC_USER_EMAIL", raising=False)
    return tmp_path


def test_preview_prints_tags_and_drafts(capsys):
    assert capture_cli.main(["preview", "Alice #friend, Bob"]) == 0

    out = capsys.readouterr().out
    assert "Tags: #friend" in out
    assert "+ Alice" in out
    assert "+ Bob" in out


def test_preview_of_nothing(capsys):
    assert capture_cli.main(["preview", " , "]) == 0

    assert "(nothing parsed)" in capsys.readouterr().out


def test_add_saves_and_logs(file_backends, capsys):
    assert capture_cli.main(["add", "Alice #friend, Bob"]) == 0

    out = capsys.readouterr().out
    assert out.count("Saved ") == 2
    saved = sorted(c.name for c in list_contacts())
    assert saved == ["Alice", "Bob"]

    lines = (file_backends / "activity.jsonl").read_text(encoding="utf-8").splitlines()
    entry = json.loads(lines[0])
    assert entry["source"] == "add"
    assert entry["names"] == ["Alice", "Bob"]


def test_add_without_names(file_backends, capsys):
    assert capture_cli.main(["add", "#onlytag"]) == 0

    assert "No contacts found" in capsys.readouterr().out
    assert not (file_backends / "activity.jsonl").exists()


def test_list_and_delete(file_backends, capsys):
    capture_cli.main(["add", "Alice #friend"])
    contact_id = list_contacts()[0].id
    capsys.readouterr()

    assert capture_cli.main(["list"]) == 0
    out = capsys.readouterr().out
    assert contact_id in out
    assert "#friend" in out

    assert capture_cli.main(["delete", contact_id]) == 0
    assert capture_cli.main(["delete", contact_id]) == 1
    assert "Contact not found" in capsys.readouterr().err


def test_list_empty(file_backends, capsys):
    assert capture_cli.main(["list"]) == 0

    assert "No contacts saved yet." in capsys.readouterr().out


def test_capture_loop_commits_each_line(file_backends, monkeypatch, capsys):
    lines = iter(["Alice, Bob #gym", "Carol", ":q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    assert capture_cli.main(["capture", "--seed", "2"]) == 0

    out = capsys.readouterr().out
    assert "+ Carol" in out
    assert sorted(c.name for c in list_contacts()) == ["Alice", "Bob", "Carol"]


def test_capture_loop_stops_on_eof(file_backends, monkeypatch):
    def eof(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)

    assert capture_cli.main(["capture"]) == 0


def test_bad_config_exits_with_error(file_backends, monkeypatch, capsys):
    monkeypatch.setenv("QC_SEED_COUNT", "lots")

    assert capture_cli.main(["list"]) == 1
    assert "Configuration error" in capsys.readouterr().err
