"""Logging utilities for Quick Contacts."""

from .activity import fetch_activity_entries, log_commit_event

__all__ = ["log_commit_event", "fetch_activity_entries"]
