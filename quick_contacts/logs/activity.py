"""Commit activity logging to Firestore with file fallback."""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ..contacts.store import ContactRecord
from ..firestore import get_firestore_client

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path(__file__).resolve().parents[2] / "activity_log.jsonl"


def _activity_collection() -> str:
    return os.getenv("QC_ACTIVITY_COLLECTION", "activity_log")


def _force_file_fallback() -> bool:
    return os.getenv("QC_ACTIVITY_FORCE_FILE", "0") == "1"


def log_commit_event(
    records: Iterable[ContactRecord],
    *,
    environment: str,
    source: str,
    user_email: Optional[str] = None,
) -> Dict[str, Any]:
    """Record one committed batch and return the stored entry."""

    records = list(records)
    tags: list[str] = []
    for record in records:
        for tag in record.tags:
            if tag not in tags:
                tags.append(tag)

    entry: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "count": len(records),
        "contact_ids": [r.id for r in records],
        "names": [r.name for r in records],
        "tags": tags,
        "user_email": user_email,
        "environment": environment,
        "source": source,
    }

    if _force_file_fallback():
        _write_file(entry)
        return entry

    try:
        client = get_firestore_client()
        client.collection(_activity_collection()).add(entry)
    except Exception as exc:  # pragma: no cover - network/auth path
        _write_file(entry)
        logger.warning(
            "[ActivityLog] Firestore write failed, wrote to local log instead: %s", exc
        )
    return entry


def fetch_activity_entries(limit: int = 50) -> list[Dict[str, Any]]:
    """Return recent activity entries, newest first."""

    if _force_file_fallback():
        return _read_file_entries(limit)

    try:
        client = get_firestore_client()
        from firebase_admin import firestore as fb_firestore  # type: ignore

        query = (
            client.collection(_activity_collection())
            .order_by("ts", direction=fb_firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [doc.to_dict() for doc in query.stream()]
    except Exception as exc:  # pragma: no cover - network/auth path
        logger.warning(
            "[ActivityLog] Firestore read failed, falling back to local log: %s", exc
        )
        return _read_file_entries(limit)


def _write_file(entry: Dict[str, Any]) -> None:
    path = _get_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(entry))
        handle.write("\n")


def _get_log_path() -> Path:
    override = os.getenv("QC_ACTIVITY_LOG")
    if override:
        return Path(override)
    return DEFAULT_LOG_PATH


def _read_file_entries(limit: int) -> list[Dict[str, Any]]:
    path = _get_log_path()
    if not path.exists():
        return []
    lines = path.read_text(encoding="utf-8").splitlines()
    entries: list[Dict[str, Any]] = []
    for line in lines[-limit:]:
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    return list(reversed(entries))
