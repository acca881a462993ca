"""Per-document cache of resolved settings and dictionaries.

Entries hold the in-flight task, not its result, so concurrent requests for
the same (uri, version, settings generation) share one construction. An entry
is reused only when both the document version and the settings generation
match exactly; anything else replaces it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol

from spellfix.dictionary import SpellSettings, SpellingDictionary
from spellfix.documents import TextDocumentLike
from spellfix.exceptions import SettingsResolutionError

logger = logging.getLogger(__name__)


class SettingsOracle(Protocol):
    def construct_settings_for_text(
        self, settings: SpellSettings, text: str, language_id: str | None
    ) -> SpellSettings: ...

    async def get_dictionary(self, settings: SpellSettings) -> SpellingDictionary: ...


@dataclass(frozen=True)
class SettingsDictPair:
    settings: SpellSettings
    dictionary: SpellingDictionary


@dataclass(frozen=True)
class CacheEntry:
    doc_version: int | None
    settings_version: int
    settings: asyncio.Future[SettingsDictPair]


class SettingsCache:
    def __init__(
        self,
        fn_settings: Callable[[TextDocumentLike], Awaitable[SpellSettings]],
        fn_settings_version: Callable[[TextDocumentLike], int],
        oracle: SettingsOracle,
    ) -> None:
        self._fn_settings = fn_settings
        self._fn_settings_version = fn_settings_version
        self._oracle = oracle
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, uri: object) -> bool:
        return uri in self._entries

    def lookup(self, document: TextDocumentLike) -> asyncio.Future[SettingsDictPair]:
        """Return the pending or settled resolution for the document's current state.

        Must be called from within a running event loop.
        """
        settings_version = self._fn_settings_version(document)
        cached = self._entries.get(document.uri)
        if (
            cached is None
            or cached.doc_version != document.version
            or cached.settings_version != settings_version
        ):
            logger.debug(
                "settings cache miss %s version=%s generation=%s",
                document.uri,
                document.version,
                settings_version,
            )
            # pygls mutates open documents in place, so the text is captured now.
            task = asyncio.ensure_future(
                self._construct(
                    document,
                    document.source,
                    document.language_id,
                    document.version,
                    settings_version,
                )
            )
            cached = CacheEntry(
                doc_version=document.version,
                settings_version=settings_version,
                settings=task,
            )
            self._entries[document.uri] = cached
        return cached.settings

    async def resolve(self, document: TextDocumentLike) -> SettingsDictPair:
        # Cancelling one caller must not cancel the build other callers share.
        return await asyncio.shield(self.lookup(document))

    def evict(self, uri: str) -> None:
        if self._entries.pop(uri, None) is not None:
            logger.debug("settings cache evicted %s", uri)

    async def _construct(
        self,
        document: TextDocumentLike,
        text: str,
        language_id: str | None,
        doc_version: int | None,
        settings_version: int,
    ) -> SettingsDictPair:
        try:
            base = await self._fn_settings(document)
            settings = self._oracle.construct_settings_for_text(base, text, language_id)
            dictionary = await self._oracle.get_dictionary(settings)
        except Exception as exc:
            raise SettingsResolutionError(
                document.uri,
                -1 if doc_version is None else doc_version,
                settings_version,
                str(exc) or type(exc).__name__,
            ) from exc
        return SettingsDictPair(settings=settings, dictionary=dictionary)
