from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable, Protocol, Sequence

from lsprotocol.types import CodeAction, CodeActionKind, CodeActionParams, WorkspaceFolder

from spellfix.actions import FixAction, synthesize_actions
from spellfix.dictionary import SpellSettings
from spellfix.document_settings import is_uri_allowed as _default_is_uri_allowed
from spellfix.documents import DocumentStore, TextDocumentLike
from spellfix.settings_cache import SettingsCache, SettingsOracle
from spellfix.suggestions import SuggestionGenerator

logger = logging.getLogger(__name__)


class FolderProvider(Protocol):
    async def folders(self) -> list[WorkspaceFolder]: ...


def _kind_value(kind: object) -> str:
    return str(getattr(kind, "value", kind))


def accepts_quick_fix(only: Sequence[object] | None) -> bool:
    """Whether a `context.only` filter admits quick-fix actions.

    Kinds are hierarchical, so a requested kind admits quick fixes when it is
    "", "quickfix" itself, or a parent of "quickfix". A refinement such as
    "quickfix.spelling" is narrower than our actions and does not match.
    """
    if not only:
        return True
    quick_fix = CodeActionKind.QuickFix.value
    for kind in only:
        value = _kind_value(kind)
        if value == "" or value == quick_fix or quick_fix.startswith(value + "."):
            return True
    return False


class CodeActionHandler:
    """Answers textDocument/codeAction for spelling diagnostics.

    Owns the per-document settings cache for the life of the server.
    """

    def __init__(
        self,
        documents: DocumentStore,
        fn_settings: Callable[[TextDocumentLike], Awaitable[SpellSettings]],
        fn_settings_version: Callable[[TextDocumentLike], int],
        document_settings: FolderProvider,
        oracle: SettingsOracle,
        is_uri_allowed: Callable[[str, Iterable[str]], bool] = _default_is_uri_allowed,
    ) -> None:
        self.documents = documents
        self.document_settings = document_settings
        self.settings_cache = SettingsCache(fn_settings, fn_settings_version, oracle)
        self.suggestion_generator = SuggestionGenerator(self.settings_cache.resolve)
        self._is_uri_allowed = is_uri_allowed

    async def __call__(self, params: CodeActionParams) -> list[CodeAction]:
        return [action.to_code_action() for action in await self.handle(params)]

    async def handle(self, params: CodeActionParams) -> list[FixAction]:
        context = params.context
        uri = params.text_document.uri
        diagnostics = context.diagnostics
        logger.debug("CodeAction Only: %s Num: %d %s", context.only, len(diagnostics), uri)
        document = self.documents.get(uri)
        if document is None or not diagnostics:
            return []
        version = document.version
        if not accepts_quick_fix(context.only):
            return []
        pair = await self.settings_cache.resolve(document)
        if not self._is_uri_allowed(uri, pair.settings.allowed_schemas):
            return []
        folders = await self.document_settings.folders()

        async def _suggest(word: str) -> list[str]:
            return await self.suggestion_generator.suggestions_for(pair, word)

        return await synthesize_actions(
            document,
            diagnostics,
            _suggest,
            len(folders or ()),
            params.range,
            version=version,
        )


def on_code_action_handler(
    documents: DocumentStore,
    fn_settings: Callable[[TextDocumentLike], Awaitable[SpellSettings]],
    fn_settings_version: Callable[[TextDocumentLike], int],
    document_settings: FolderProvider,
    oracle: SettingsOracle,
) -> CodeActionHandler:
    return CodeActionHandler(
        documents,
        fn_settings,
        fn_settings_version,
        document_settings,
        oracle,
    )
