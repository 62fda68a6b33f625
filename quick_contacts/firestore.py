"""Lazily initialised Firestore client shared by the storage backends.

Credentials come from Application Default Credentials. ``QC_FIREBASE_PROJECT``
pins the project id when the credentials do not carry one.
"""
from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

_firestore_client = None


def get_firestore_client():
    """Return a cached Firestore client, initialising firebase-admin once."""

    global _firestore_client
    if _firestore_client is not None:
        return _firestore_client

    try:
        import firebase_admin
        from firebase_admin import firestore
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise RuntimeError(
            "firebase-admin is required for Firestore storage. "
            "Install it or set QC_CONTACTS_FORCE_FILE=1 and QC_ACTIVITY_FORCE_FILE=1."
        ) from exc

    if not firebase_admin._apps:
        project_id = os.getenv("QC_FIREBASE_PROJECT")
        options = {"projectId": project_id} if project_id else None
        firebase_admin.initialize_app(options=options)
        logger.debug("Initialised firebase-admin (project=%s)", project_id or "default")
    _firestore_client = firestore.client()
    return _firestore_client
