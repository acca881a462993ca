"""Read-only access to the documents the editor currently has open."""

from __future__ import annotations

from typing import Mapping, Protocol

from lsprotocol.types import Position


class TextDocumentLike(Protocol):
    """The slice of pygls' TextDocument that spellfix reads.

    `version` is assigned by the editor on every edit and is the only signal
    used to decide whether the text changed.
    """

    uri: str
    version: int | None
    language_id: str | None

    @property
    def source(self) -> str: ...

    def offset_at_position(self, position: Position) -> int: ...


class DocumentStore(Protocol):
    def get(self, uri: str) -> TextDocumentLike | None: ...


class _WorkspaceLike(Protocol):
    @property
    def text_documents(self) -> Mapping[str, TextDocumentLike]: ...


class _ServerLike(Protocol):
    @property
    def workspace(self) -> _WorkspaceLike: ...


class WorkspaceDocuments:
    """DocumentStore over the workspace of a pygls server.

    The workspace is looked up per call; it only exists once the client has
    initialized the server.

    Workspace.get_text_document() fabricates a document for unknown uris by
    reading from disk; this adapter only reports documents the client opened.
    """

    def __init__(self, server: _ServerLike) -> None:
        self._server = server

    def get(self, uri: str) -> TextDocumentLike | None:
        return self._server.workspace.text_documents.get(uri)
