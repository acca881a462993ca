"""Effective settings and the dictionary built from them.

Settings for a document are the merge of the configured base settings, the
words registered for the document's language id, and overrides written in the
document itself:

    spellfix: words pygls lsprotocol
    spellfix: ignore asdf
    spellfix: locale fr

The dictionary wraps pyspellchecker. Construction loads a compressed word
list, so it runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from spellchecker import SpellChecker

from spellfix.text import unique

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_SCHEMAS: Tuple[str, ...] = ("file", "untitled")
DEFAULT_NUM_SUGGESTIONS = 8

_IN_DOCUMENT_DIRECTIVE = re.compile(
    r"\bspellfix\s*:\s*(?P<directive>words|ignore|locale)\b(?P<args>[^\r\n]*)",
    re.IGNORECASE,
)
_WORD_SPLIT = re.compile(r"[\s,]+")


class SpellSettings(BaseModel):
    """Spell-check configuration. Instances are frozen snapshots."""

    model_config = ConfigDict(frozen=True)

    language: str = "en"
    words: Tuple[str, ...] = ()
    user_words: Tuple[str, ...] = ()
    ignore_words: Tuple[str, ...] = ()
    flag_words: Tuple[str, ...] = ()
    allowed_schemas: Tuple[str, ...] = DEFAULT_ALLOWED_SCHEMAS
    num_suggestions: int = Field(default=DEFAULT_NUM_SUGGESTIONS, ge=0)
    language_id: Optional[str] = None
    language_settings: Dict[str, Tuple[str, ...]] = {}


def _directive_words(args: str) -> list[str]:
    return [word for word in _WORD_SPLIT.split(args.strip()) if word]


def construct_settings_for_text(
    settings: SpellSettings, text: str, language_id: str | None
) -> SpellSettings:
    words = list(settings.words)
    ignore_words = list(settings.ignore_words)
    language = settings.language
    if language_id:
        words.extend(settings.language_settings.get(language_id, ()))
    for match in _IN_DOCUMENT_DIRECTIVE.finditer(text):
        directive = match.group("directive").lower()
        args = _directive_words(match.group("args"))
        if directive == "words":
            words.extend(args)
        elif directive == "ignore":
            ignore_words.extend(args)
        elif args:
            language = args[0]
    return settings.model_copy(
        update={
            "words": tuple(unique(words)),
            "ignore_words": tuple(unique(ignore_words)),
            "language": language,
            "language_id": language_id,
        }
    )


def _base_language(locale: str) -> str | None:
    base = re.split(r"[-_]", locale.strip(), maxsplit=1)[0].lower()
    return base or None


@dataclass(frozen=True)
class SpellingDictionary:
    """A built dictionary; read-only once constructed."""

    checker: SpellChecker
    custom_words: Dict[str, str]
    ignore_words: frozenset[str]
    flag_words: frozenset[str]

    def suggest(self, word: str, limit: int) -> list[str]:
        """Return up to `limit` candidates, custom words first, then by frequency."""
        if limit <= 0 or not word:
            return []
        candidates = self.checker.candidates(word) or set()
        counts = self.checker.word_frequency.dictionary
        ranked = sorted(
            (
                candidate
                for candidate in candidates
                if candidate not in self.flag_words and candidate not in self.ignore_words
            ),
            key=lambda candidate: (
                candidate not in self.custom_words,
                -counts.get(candidate, 0),
                candidate,
            ),
        )
        return [self.custom_words.get(candidate, candidate) for candidate in ranked[:limit]]


def _build_dictionary(settings: SpellSettings) -> SpellingDictionary:
    checker = SpellChecker(language=_base_language(settings.language))
    custom = [*settings.words, *settings.user_words]
    if custom:
        checker.word_frequency.load_words([word.lower() for word in custom])
    flag_words = frozenset(word.lower() for word in settings.flag_words)
    if flag_words:
        checker.word_frequency.remove_words(list(flag_words))
    return SpellingDictionary(
        checker=checker,
        custom_words={word.lower(): word for word in custom},
        ignore_words=frozenset(word.lower() for word in settings.ignore_words),
        flag_words=flag_words,
    )


async def get_dictionary(settings: SpellSettings) -> SpellingDictionary:
    logger.debug(
        "building dictionary language=%s words=%d",
        settings.language,
        len(settings.words) + len(settings.user_words),
    )
    return await asyncio.to_thread(_build_dictionary, settings)


class SpellOracle:
    """Bundles settings construction and dictionary loading.

    Handlers depend on this object rather than on module functions so that a
    different dictionary backend can be substituted.
    """

    def construct_settings_for_text(
        self, settings: SpellSettings, text: str, language_id: str | None
    ) -> SpellSettings:
        return construct_settings_for_text(settings, text, language_id)

    async def get_dictionary(self, settings: SpellSettings) -> SpellingDictionary:
        return await get_dictionary(settings)
