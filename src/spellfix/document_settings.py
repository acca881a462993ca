"""Per-document settings, the settings generation token, and workspace folders."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Sequence
from urllib.parse import unquote, urlparse

from lsprotocol.types import WorkspaceFolder
from pydantic import ValidationError

from spellfix.config import (
    DEFAULT_CONFIG_NAME,
    TomlTable,
    merge_payload,
    normalize_spell_section,
    spell_defaults,
)
from spellfix.dictionary import DEFAULT_ALLOWED_SCHEMAS, SpellSettings
from spellfix.documents import TextDocumentLike

logger = logging.getLogger(__name__)


def is_uri_allowed(uri: str, allowed_schemas: Iterable[str] | None = None) -> bool:
    schemes = DEFAULT_ALLOWED_SCHEMAS if allowed_schemas is None else tuple(allowed_schemas)
    return urlparse(uri).scheme in schemes


def _uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


def _folder_for_uri(uri: str, folders: Sequence[WorkspaceFolder]) -> WorkspaceFolder | None:
    best: WorkspaceFolder | None = None
    for folder in folders:
        prefix = folder.uri.rstrip("/") + "/"
        if uri.startswith(prefix) and (best is None or len(folder.uri) > len(best.uri)):
            best = folder
    return best


class DocumentSettings:
    """Settings provider for the code action handler.

    The generation token changes whenever anything that feeds get_settings()
    changes (client settings, workspace folders, a spellfix.toml on disk);
    document edits do not touch it.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path
        self._client_settings: TomlTable = {}
        self._folders: list[WorkspaceFolder] = []
        self._root: Path | None = None
        self._generation = 0

    def settings_version(self, document: TextDocumentLike | None = None) -> int:
        return self._generation

    def _bump(self) -> None:
        self._generation += 1

    def reset(self) -> None:
        self._client_settings = {}
        self._bump()

    def invalidate(self) -> None:
        """Start a new generation without changing any stored settings."""
        self._bump()

    def config_changed(self, uris: Iterable[str]) -> bool:
        """Invalidate if any of `uris` names a spellfix config file."""
        changed = [uri for uri in uris if _uri_to_path(uri).name == DEFAULT_CONFIG_NAME]
        if not changed:
            return False
        logger.info("config file changed: %s", ", ".join(changed))
        self.invalidate()
        return True

    def set_folders(
        self, folders: Iterable[WorkspaceFolder], root_path: str | None = None
    ) -> None:
        self._folders = list(folders)
        self._root = Path(root_path) if root_path else None
        self._bump()

    def update_client_settings(self, payload: object) -> bool:
        """Store settings pushed by the client; returns False if they were rejected."""
        section = payload.get("spellfix", payload) if isinstance(payload, dict) else None
        normalized = normalize_spell_section(section)
        try:
            SpellSettings.model_validate(normalized)
        except ValidationError as exc:
            logger.warning("ignoring invalid client settings: %s", exc)
            return False
        self._client_settings = normalized
        self._bump()
        return True

    async def folders(self) -> list[WorkspaceFolder]:
        return list(self._folders)

    def _config_root(self, uri: str) -> Path | None:
        folder = _folder_for_uri(uri, self._folders)
        if folder is not None:
            return _uri_to_path(folder.uri)
        return self._root

    async def get_settings(self, document: TextDocumentLike) -> SpellSettings:
        root = self._config_root(document.uri)
        if root is None and self._config_path is None:
            file_settings: TomlTable = {}
        else:
            raw = await asyncio.to_thread(spell_defaults, root, self._config_path)
            file_settings = normalize_spell_section(raw)
        merged = merge_payload(self._client_settings, file_settings)
        return SpellSettings.model_validate(merged)
