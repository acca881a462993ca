from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from spellfix.documents import TextDocumentLike
from spellfix.settings_cache import SettingsDictPair
from spellfix.text import is_lower_case, match_case, unique

MAX_WORD_LENGTH_FOR_SUGGESTIONS = 20
WORD_LENGTH_FOR_LIMITING_SUGGESTIONS = 15
MAX_NUMBER_OF_SUGGESTIONS_FOR_LONG_WORDS = 1


def adjust_suggestions(word: str, suggestions: list[str]) -> list[str]:
    """Recase lowercase suggestions after `word` and drop repeats, keeping order."""
    return unique(
        match_case(word, suggestion) if is_lower_case(suggestion) else suggestion
        for suggestion in suggestions
    )


class SuggestionGenerator:
    """Suggestions for a misspelled word against the document's resolved dictionary.

    Holds no cache of its own; the expensive dictionary comes from get_settings.
    """

    def __init__(
        self, get_settings: Callable[[TextDocumentLike], Awaitable[SettingsDictPair]]
    ) -> None:
        self._get_settings = get_settings

    async def gen_word_suggestions(self, document: TextDocumentLike, word: str) -> list[str]:
        return await self.suggestions_for(await self._get_settings(document), word)

    async def suggestions_for(self, pair: SettingsDictPair, word: str) -> list[str]:
        """Suggestions from an already resolved pair."""
        if len(word) > MAX_WORD_LENGTH_FOR_SUGGESTIONS:
            return []
        limit = (
            MAX_NUMBER_OF_SUGGESTIONS_FOR_LONG_WORDS
            if len(word) > WORD_LENGTH_FOR_LIMITING_SUGGESTIONS
            else pair.settings.num_suggestions
        )
        raw = await asyncio.to_thread(pair.dictionary.suggest, word, limit)
        return adjust_suggestions(word, raw)
