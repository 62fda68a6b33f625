import json

from quick_contacts.contacts import ContactRecord
from quick_contacts.logs import activity as activity_log
from quick_contacts.logs.activity import fetch_activity_entries, log_commit_event


def _sample_records() -> list[ContactRecord]:
    return [
        ContactRecord(id="c-1", name="Alice", tags=["friend", "work"]),
        ContactRecord(id="c-2", name="Bob", tags=["friend", "work"]),
    ]


def test_log_commit_event_writes_jsonl(tmp_path, monkeypatch):
    log_file = tmp_path / "log.jsonl"
    monkeypatch.setenv("QC_ACTIVITY_LOG", str(log_file))
    monkeypatch.setenv("QC_ACTIVITY_FORCE_FILE", "1")

    log_commit_event(_sample_records(), environment="local", source="capture")

    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["count"] == 2
    assert record["names"] == ["Alice", "Bob"]
    assert record["contact_ids"] == ["c-1", "c-2"]
    assert record["tags"] == ["friend", "work"]
    assert record["source"] == "capture"


def test_fetch_activity_entries_newest_first(tmp_path, monkeypatch):
    log_file = tmp_path / "log.jsonl"
    monkeypatch.setenv("QC_ACTIVITY_LOG", str(log_file))
    monkeypatch.setenv("QC_ACTIVITY_FORCE_FILE", "1")

    log_commit_event([ContactRecord(id="1", name="First")], environment="local", source="add")
    log_commit_event([ContactRecord(id="2", name="Second")], environment="local", source="add")
    with log_file.open("a", encoding="utf-8") as handle:
        handle.write("garbage\n")

    entries = fetch_activity_entries(limit=10)

    assert [e["names"] for e in entries] == [["Second"], ["First"]]


def test_fetch_activity_entries_missing_file(tmp_path, monkeypatch):
    monkeypatch.setenv("QC_ACTIVITY_LOG", str(tmp_path / "missing.jsonl"))
    monkeypatch.setenv("QC_ACTIVITY_FORCE_FILE", "1")

    assert fetch_activity_entries() == []


def test_log_commit_event_calls_firestore(monkeypatch):
    captured = {}

    class FakeCollection:
        def add(self, payload):
            captured["payload"] = payload

    class FakeClient:
        def collection(self, name):
            captured["collection"] = name
            return FakeCollection()

    monkeypatch.delenv("QC_ACTIVITY_FORCE_FILE", raising=False)
    monkeypatch.setenv("QC_ACTIVITY_COLLECTION", "activity_log")
    monkeypatch.setattr(activity_log, "get_firestore_client", lambda: FakeClient())

    log_commit_event(
        _sample_records(),
        environment="prod",
        source="add",
        user_email="me@example.com",
    )

    assert captured["collection"] == "activity_log"
    assert captured["payload"]["count"] == 2
    assert captured["payload"]["user_email"] == "me@example.com"
