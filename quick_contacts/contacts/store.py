"""Persistent storage for committed contacts.

Firestore Structure:
    contacts/{contact_id} -> ContactRecord document

File Storage (dev mode):
    contacts_log/{contact_id}.json

Environment Variables:
    QC_CONTACTS_FORCE_FILE: Set to "1" to use local file storage
    QC_CONTACTS_DIR: Directory for file-based storage (default: contacts_log/)
    QC_CONTACTS_COLLECTION: Firestore collection name (default: contacts)
"""
from __future__ import annotations

import json
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..firestore import get_firestore_client
from ..parsing import ContactDraft

logger = logging.getLogger(__name__)


def _contacts_collection() -> str:
    return os.getenv("QC_CONTACTS_COLLECTION", "contacts")


def _force_file_fallback() -> bool:
    return os.getenv("QC_CONTACTS_FORCE_FILE", "0") == "1"


def _contacts_dir() -> Path:
    return Path(
        os.getenv(
            "QC_CONTACTS_DIR",
            Path(__file__).resolve().parents[2] / "contacts_log",
        )
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ContactNote:
    """A free-text note attached to a contact."""
    content: str
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"content": self.content, "created_at": self.created_at}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ContactNote:
        return cls(
            content=data.get("content", ""),
            created_at=data.get("created_at", ""),
        )


@dataclass
class ContactRecord:
    """A committed contact. Tags are stored by name."""
    id: str
    name: str
    summary: str = ""
    met_long_ago: bool = False
    group: str = ""
    tags: List[str] = field(default_factory=list)
    notes: List[ContactNote] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
    user_email: Optional[str] = None  # Owner of this contact

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "summary": self.summary,
            "met_long_ago": self.met_long_ago,
            "group": self.group,
            "tags": list(self.tags),
            "notes": [note.to_dict() for note in self.notes],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "user_email": self.user_email,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ContactRecord:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            summary=data.get("summary", ""),
            met_long_ago=bool(data.get("met_long_ago", False)),
            group=data.get("group", ""),
            tags=list(data.get("tags", [])),
            notes=[ContactNote.from_dict(n) for n in data.get("notes", [])],
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            user_email=data.get("user_email"),
        )

    @classmethod
    def from_draft(
        cls,
        draft: ContactDraft,
        user_email: Optional[str] = None,
    ) -> ContactRecord:
        """Build a new record (fresh id and timestamps) from a parsed draft."""
        now = _now()
        return cls(
            id=str(uuid.uuid4()),
            name=draft.name,
            tags=draft.tag_names,
            created_at=now,
            updated_at=now,
            user_email=user_email,
        )

    def add_note(self, content: str) -> ContactNote:
        note = ContactNote(content=content, created_at=_now())
        self.notes.append(note)
        self.updated_at = note.created_at
        return note

    def to_markdown(self) -> str:
        """Format contact as markdown."""
        lines = [f"**{self.name}**"]
        if self.tags:
            lines.append(" ".join(f"#{tag}" for tag in self.tags))
        if self.group:
            lines.append(f"Group: {self.group}")
        if self.summary:
            lines.append(self.summary)
        for note in self.notes:
            lines.append(f"- {note.content}")
        return "\n".join(lines)


def save_contact(contact: ContactRecord) -> ContactRecord:
    """Save or overwrite a contact by its id.

    Returns:
        The saved contact, with ``updated_at`` refreshed.
    """
    if not contact.created_at:
        contact.created_at = _now()
    contact.updated_at = _now()

    if _force_file_fallback():
        _save_to_file(contact)
        return contact

    try:
        _save_to_firestore(get_firestore_client(), contact)
    except Exception as exc:
        logger.warning("[Contacts] Firestore write failed, falling back to local: %s", exc)
        _save_to_file(contact)

    return contact


def save_contacts(contacts: Iterable[ContactRecord]) -> List[ContactRecord]:
    """Save a committed batch, preserving its order."""
    return [save_contact(contact) for contact in contacts]


def get_contact(contact_id: str) -> Optional[ContactRecord]:
    """Get a contact by ID."""
    if _force_file_fallback():
        return _load_from_file(contact_id)

    try:
        return _load_from_firestore(get_firestore_client(), contact_id)
    except Exception as exc:
        logger.warning("[Contacts] Firestore read failed, falling back to local: %s", exc)
        return _load_from_file(contact_id)


def list_contacts(
    user_email: Optional[str] = None,
    limit: int = 100,
) -> List[ContactRecord]:
    """List contacts, most recently updated first.

    Args:
        user_email: Filter by owner email
        limit: Maximum number of contacts to return
    """
    if _force_file_fallback():
        return _list_from_files(user_email, limit)

    try:
        return _list_from_firestore(get_firestore_client(), user_email, limit)
    except Exception as exc:
        logger.warning("[Contacts] Firestore list failed, falling back to local: %s", exc)
        return _list_from_files(user_email, limit)


def delete_contact(contact_id: str) -> bool:
    """Delete a contact by ID.

    Returns:
        True if deleted, False if not found
    """
    if _force_file_fallback():
        return _delete_from_file(contact_id)

    try:
        return _delete_from_firestore(get_firestore_client(), contact_id)
    except Exception as exc:
        logger.warning("[Contacts] Firestore delete failed, falling back to local: %s", exc)
        return _delete_from_file(contact_id)


# --- Firestore helpers ---

def _save_to_firestore(db: Any, contact: ContactRecord) -> None:
    db.collection(_contacts_collection()).document(contact.id).set(contact.to_dict())


def _load_from_firestore(db: Any, contact_id: str) -> Optional[ContactRecord]:
    doc = db.collection(_contacts_collection()).document(contact_id).get()
    if doc.exists:
        return ContactRecord.from_dict(doc.to_dict())
    return None


def _list_from_firestore(
    db: Any,
    user_email: Optional[str],
    limit: int,
) -> List[ContactRecord]:
    query = db.collection(_contacts_collection())
    if user_email:
        query = query.where("user_email", "==", user_email)
    contacts = [ContactRecord.from_dict(doc.to_dict()) for doc in query.stream()]
    contacts.sort(key=lambda c: c.updated_at, reverse=True)
    return contacts[:limit]


def _delete_from_firestore(db: Any, contact_id: str) -> bool:
    doc_ref = db.collection(_contacts_collection()).document(contact_id)
    if doc_ref.get().exists:
        doc_ref.delete()
        return True
    return False


# --- File helpers ---

def _contacts_file(contact_id: str) -> Path:
    directory = _contacts_dir()
    directory.mkdir(parents=True, exist_ok=True)
    safe_id = contact_id.replace("/", "_").replace("\\", "_")
    return directory / f"{safe_id}.json"


def _save_to_file(contact: ContactRecord) -> None:
    filepath = _contacts_file(contact.id)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(contact.to_dict(), f, indent=2)


def _load_from_file(contact_id: str) -> Optional[ContactRecord]:
    filepath = _contacts_file(contact_id)
    if not filepath.exists():
        return None

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return ContactRecord.from_dict(json.load(f))
    except (json.JSONDecodeError, IOError):
        return None


def _list_from_files(
    user_email: Optional[str],
    limit: int,
) -> List[ContactRecord]:
    directory = _contacts_dir()
    if not directory.exists():
        return []

    contacts = []
    for filepath in directory.glob("*.json"):
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                contact = ContactRecord.from_dict(json.load(f))
        except (json.JSONDecodeError, IOError):
            continue
        if user_email is None or contact.user_email == user_email:
            contacts.append(contact)

    # Sort by updated_at descending
    contacts.sort(key=lambda c: c.updated_at, reverse=True)
    return contacts[:limit]


def _delete_from_file(contact_id: str) -> bool:
    filepath = _contacts_file(contact_id)
    if filepath.exists():
        filepath.unlink()
        return True
    return False
