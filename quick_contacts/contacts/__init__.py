"""Committed contact records and their storage."""
from .store import (
    ContactNote,
    ContactRecord,
    save_contact,
    save_contacts,
    get_contact,
    list_contacts,
    delete_contact,
)

__all__ = [
    "ContactNote",
    "ContactRecord",
    "save_contact",
    "save_contacts",
    "get_contact",
    "list_contacts",
    "delete_contact",
]
