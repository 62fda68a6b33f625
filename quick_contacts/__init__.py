"""Quick Contacts: capture new contacts by typing comma-separated names."""

from .capture import CaptureSession
from .parsing import ContactDraft, ParseResult, Tag, parse

__all__ = ["CaptureSession", "ContactDraft", "ParseResult", "Tag", "parse"]
