"""Case handling, ordered dedup and range extraction for misspelled words."""

from __future__ import annotations

import unicodedata
from typing import Callable, Hashable, Iterable, TypeVar

from lsprotocol.types import Range

from spellfix.documents import TextDocumentLike

T = TypeVar("T", bound=Hashable)


def _letter_categories(word: str) -> list[str]:
    # Combining marks ride along with the letter they follow.
    return [
        category
        for category in (unicodedata.category(ch) for ch in word)
        if not category.startswith("M")
    ]


def is_lower_case(word: str) -> bool:
    categories = _letter_categories(word)
    return bool(categories) and all(category == "Ll" for category in categories)


def is_upper_case(word: str) -> bool:
    categories = _letter_categories(word)
    return bool(categories) and all(category == "Lu" for category in categories)


def is_first_character_upper(word: str) -> bool:
    return word[:1].isupper()


def is_first_character_lower(word: str) -> bool:
    return word[:1].islower()


def _is_capitalized(word: str) -> bool:
    categories = _letter_categories(word)
    return (
        len(categories) > 1
        and categories[0] == "Lu"
        and all(category == "Ll" for category in categories[1:])
    )


def ucfirst(word: str) -> str:
    return word[:1].upper() + word[1:]


def lcfirst(word: str) -> str:
    return word[:1].lower() + word[1:]


def match_case(example: str, word: str) -> str:
    """Recase `word` after the case pattern of `example`.

    "Teh" -> "The", "TEH" -> "THE", "teh" -> "the". Mixed-case examples only
    carry over the case of their first character.
    """
    if _is_capitalized(example):
        return word[:1].upper() + word[1:].lower()
    if is_lower_case(example):
        return word.lower()
    if is_upper_case(example):
        return word.upper()
    if is_first_character_upper(example):
        return ucfirst(word)
    if is_first_character_lower(example):
        return lcfirst(word)
    return word


def unique_filter() -> Callable[[T], bool]:
    """Return a stateful predicate that is true only on first sight of a value."""
    seen: set[Hashable] = set()

    def _first_sight(value: T) -> bool:
        if value in seen:
            return False
        seen.add(value)
        return True

    return _first_sight


def unique(values: Iterable[T]) -> list[T]:
    return list(filter(unique_filter(), values))


def extract_text(document: TextDocumentLike, range: Range) -> str:
    start = document.offset_at_position(range.start)
    end = document.offset_at_position(range.end)
    return document.source[start:end]
