"""Turn free-form capture text into contact drafts and shared hashtags.

Input like ``"Alice #friend, Bob #work"`` is split on commas into one entry
per prospective contact. Hashtags are collected from the whole text and
attached to every draft, so the example yields two drafts (Alice, Bob) that
both carry the tags ``friend`` and ``work``.

Parsing is a total function: any string, including an empty one, produces a
(possibly empty) ``ParseResult``.
"""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import List, Tuple

HASHTAG_PREFIX = "#"
ENTRY_SEPARATOR = ","
WORD_SEPARATOR = " "


@dataclass(frozen=True, slots=True)
class Tag:
    """A hashtag found in the capture text, without its leading ``#``."""

    name: str


@dataclass(frozen=True, slots=True)
class ContactDraft:
    """A parsed contact that has not been committed yet."""

    name: str
    tags: Tuple[Tag, ...] = ()

    @property
    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.tags]


@dataclass(frozen=True, slots=True)
class ParseResult:
    tags: Tuple[Tag, ...] = ()
    drafts: Tuple[ContactDraft, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.tags and not self.drafts


def parse(text: str) -> ParseResult:
    """Parse capture text into shared tags and ordered contact drafts.

    Args:
        text: Raw input, e.g. the current contents of the capture field.

    Returns:
        ParseResult whose ``tags`` follow first occurrence in ``text`` and
        whose ``drafts`` follow the order of the non-empty comma entries.
    """

    tags = _discover_tags(text)

    drafts: List[ContactDraft] = []
    for entry in _split_entries(text):
        name = _entry_name(entry)
        if name:
            drafts.append(ContactDraft(name=name, tags=tags))

    return ParseResult(tags=tags, drafts=tuple(drafts))


def _discover_tags(text: str) -> Tuple[Tag, ...]:
    tags: List[Tag] = []
    seen = set()
    for word in _split_words(text):
        if not _is_hashtag(word):
            continue
        name = _strip_punctuation(word[len(HASHTAG_PREFIX):])
        if name and name not in seen:
            seen.add(name)
            tags.append(Tag(name=name))
    return tuple(tags)


def _split_entries(text: str) -> List[str]:
    """Split on commas, dropping empty pieces and trimming each entry."""

    return [
        _trim_whitespace(part)
        for part in text.split(ENTRY_SEPARATOR)
        if part
    ]


def _entry_name(entry: str) -> str:
    words = [word for word in _split_words(entry) if not _is_hashtag(word)]
    return WORD_SEPARATOR.join(words)


def _split_words(text: str) -> List[str]:
    # Only the space character separates words; tabs and newlines stay
    # inside a token.
    return [word for word in text.split(WORD_SEPARATOR) if word]


def _is_hashtag(word: str) -> bool:
    return word.startswith(HASHTAG_PREFIX)


def _is_punctuation(char: str) -> bool:
    return unicodedata.category(char).startswith("P")


def _is_horizontal_space(char: str) -> bool:
    return char == "\t" or unicodedata.category(char) == "Zs"


def _strip_punctuation(value: str) -> str:
    start, end = 0, len(value)
    while start < end and _is_punctuation(value[start]):
        start += 1
    while end > start and _is_punctuation(value[end - 1]):
        end -= 1
    return value[start:end]


def _trim_whitespace(value: str) -> str:
    start, end = 0, len(value)
    while start < end and _is_horizontal_space(value[start]):
        start += 1
    while end > start and _is_horizontal_space(value[end - 1]):
        end -= 1
    return value[start:end]
