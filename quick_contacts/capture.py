"""Capture session: committed contacts plus a live preview of typed text."""
from __future__ import annotations

import logging
import random
import string
from typing import Callable, Iterable, List, Optional, Tuple

from .contacts.store import ContactRecord
from .parsing import ContactDraft, ParseResult, Tag, parse

logger = logging.getLogger(__name__)

COMMIT_TRIGGER = "\n"

CommitCallback = Callable[[List[ContactRecord]], None]


def placeholder_name(length: int = 10) -> str:
    """Random lowercase name used to seed demo sessions."""
    return "".join(random.choice(string.ascii_lowercase) for _ in range(length))


class CaptureSession:
    """Owns the input text, the committed contacts and the parsed preview.

    Every edit replaces the preview with a fresh parse of the whole text.
    Text ending in a newline commits the preview: the drafts become
    ``ContactRecord`` objects appended to ``committed`` and the text is
    cleared.
    """

    def __init__(
        self,
        committed: Optional[Iterable[ContactRecord]] = None,
        *,
        on_commit: Optional[CommitCallback] = None,
        user_email: Optional[str] = None,
    ) -> None:
        self._committed: List[ContactRecord] = list(committed or [])
        self._on_commit = on_commit
        self._user_email = user_email
        self._text = ""
        self._result = ParseResult()

    @classmethod
    def seeded(cls, count: int, **kwargs) -> CaptureSession:
        """Session pre-filled with ``count`` placeholder contacts."""
        records = [
            ContactRecord.from_draft(ContactDraft(name=placeholder_name()))
            for _ in range(count)
        ]
        return cls(records, **kwargs)

    @property
    def text(self) -> str:
        return self._text

    @property
    def committed(self) -> List[ContactRecord]:
        return list(self._committed)

    @property
    def preview(self) -> Tuple[ContactDraft, ...]:
        return self._result.drafts

    @property
    def tags(self) -> Tuple[Tag, ...]:
        return self._result.tags

    def update_text(self, text: str) -> ParseResult:
        """Replace the input text, committing if it ends with a newline."""
        if text.endswith(COMMIT_TRIGGER):
            self._text = text[: -len(COMMIT_TRIGGER)]
            self.commit()
        else:
            self._text = text
            self._result = parse(text)
        return self._result

    def commit(self) -> List[ContactRecord]:
        """Move the drafts parsed from the current text into ``committed``.

        The text is parsed again first so the committed batch always matches
        the latest input.
        """
        result = parse(self._text)
        records = [
            ContactRecord.from_draft(draft, user_email=self._user_email)
            for draft in result.drafts
        ]
        self._committed.extend(records)
        self._text = ""
        self._result = ParseResult()

        if not records:
            logger.debug("Commit with no drafts; input cleared")
            return []

        logger.info(
            "Committed %d contact(s) with tags %s",
            len(records),
            [tag.name for tag in result.tags],
        )
        if self._on_commit is not None:
            self._on_commit(records)
        return records

    def all_names(self) -> List[str]:
        """Committed names followed by preview names, in display order."""
        return [c.name for c in self._committed] + [d.name for d in self.preview]
