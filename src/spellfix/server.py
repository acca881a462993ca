from __future__ import annotations

import logging
from typing import Callable

from pygls.lsp.server import LanguageServer
from lsprotocol.types import (
    INITIALIZED,
    TEXT_DOCUMENT_CODE_ACTION,
    TEXT_DOCUMENT_DID_CLOSE,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    WORKSPACE_DID_CHANGE_WATCHED_FILES,
    WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS,
    CodeAction,
    CodeActionKind,
    CodeActionOptions,
    CodeActionParams,
    DidChangeConfigurationParams,
    DidChangeWatchedFilesParams,
    DidChangeWatchedFilesRegistrationOptions,
    DidChangeWorkspaceFoldersParams,
    DidCloseTextDocumentParams,
    FileSystemWatcher,
    InitializedParams,
    Registration,
    RegistrationParams,
)

from spellfix import __version__
from spellfix.config import DEFAULT_CONFIG_NAME
from spellfix.dictionary import SpellOracle
from spellfix.document_settings import DocumentSettings
from spellfix.documents import WorkspaceDocuments
from spellfix.handler import on_code_action_handler

logger = logging.getLogger(__name__)

server = LanguageServer("spellfix", __version__)
document_settings = DocumentSettings()
code_action_handler = on_code_action_handler(
    WorkspaceDocuments(server),
    document_settings.get_settings,
    document_settings.settings_version,
    document_settings,
    SpellOracle(),
)


def _refresh_folders(ls: LanguageServer) -> None:
    workspace = ls.workspace
    folders = list(workspace.folders.values())
    document_settings.set_folders(folders, workspace.root_path)
    logger.info("workspace folders: %d", len(folders))


CONFIG_WATCHER_ID = "spellfix.watchConfig"


def _can_watch_files(ls: LanguageServer) -> bool:
    workspace = getattr(ls.client_capabilities, "workspace", None)
    watched = getattr(workspace, "did_change_watched_files", None)
    return bool(getattr(watched, "dynamic_registration", False))


def _watch_config_files(ls: LanguageServer) -> None:
    if not _can_watch_files(ls):
        return
    ls.client_register_capability(
        RegistrationParams(
            registrations=[
                Registration(
                    id=CONFIG_WATCHER_ID,
                    method=WORKSPACE_DID_CHANGE_WATCHED_FILES,
                    register_options=DidChangeWatchedFilesRegistrationOptions(
                        watchers=[FileSystemWatcher(glob_pattern=f"**/{DEFAULT_CONFIG_NAME}")]
                    ),
                )
            ]
        )
    )


@server.feature(INITIALIZED)
def initialized(ls: LanguageServer, params: InitializedParams) -> None:
    _refresh_folders(ls)
    _watch_config_files(ls)


@server.feature(
    TEXT_DOCUMENT_CODE_ACTION,
    CodeActionOptions(code_action_kinds=[CodeActionKind.QuickFix]),
)
async def code_action(ls: LanguageServer, params: CodeActionParams) -> list[CodeAction]:
    return await code_action_handler(params)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageServer, params: DidCloseTextDocumentParams) -> None:
    code_action_handler.settings_cache.evict(params.text_document.uri)


@server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: LanguageServer, params: DidChangeConfigurationParams
) -> None:
    if document_settings.update_client_settings(params.settings):
        logger.info(
            "configuration changed, settings generation %d",
            document_settings.settings_version(),
        )


@server.feature(WORKSPACE_DID_CHANGE_WATCHED_FILES)
def did_change_watched_files(
    ls: LanguageServer, params: DidChangeWatchedFilesParams
) -> None:
    if document_settings.config_changed(change.uri for change in params.changes):
        logger.info(
            "config file changed, settings generation %d",
            document_settings.settings_version(),
        )


@server.feature(WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)
def did_change_workspace_folders(
    ls: LanguageServer, params: DidChangeWorkspaceFoldersParams
) -> None:
    _refresh_folders(ls)


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Start the language server over stdio."""
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
