"""Turn spelling diagnostics into quick-fix actions.

For every diagnostic produced by the spellfix validator this emits one
replace action per suggestion, bound to that diagnostic alone. After those
come the add-to-dictionary actions for the first misspelled word found:
user always, folder when the workspace has a root folder, workspace when it
has more than one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from lsprotocol.types import (
    CodeAction,
    CodeActionKind,
    Command,
    Diagnostic,
    Range,
    TextEdit,
)

from spellfix.documents import TextDocumentLike
from spellfix.schema import AddWordCommand, DictionaryScope, EditTextCommand, FixCommand
from spellfix.text import extract_text

DIAGNOSTIC_SOURCE = "spellfix"

_ADD_WORD_TITLES = {
    DictionaryScope.USER: "user dictionary",
    DictionaryScope.FOLDER: "folder dictionary",
    DictionaryScope.WORKSPACE: "workspace dictionary",
}


@dataclass(frozen=True)
class FixAction:
    title: str
    command: FixCommand
    diagnostics: tuple[Diagnostic, ...]
    kind: CodeActionKind = CodeActionKind.QuickFix

    def to_code_action(self) -> CodeAction:
        return CodeAction(
            title=self.title,
            kind=self.kind,
            diagnostics=list(self.diagnostics),
            command=Command(
                title=self.title,
                command=self.command.command_id,
                arguments=self.command.arguments(),
            ),
        )


def is_spell_diagnostic(diagnostic: Diagnostic) -> bool:
    return diagnostic.source == DIAGNOSTIC_SOURCE


def replace_action(
    document: TextDocumentLike, diagnostic: Diagnostic, suggestion: str, version: int
) -> FixAction:
    return FixAction(
        title=suggestion,
        command=EditTextCommand(
            uri=document.uri,
            version=version,
            edits=(TextEdit(range=diagnostic.range, new_text=suggestion),),
        ),
        diagnostics=(diagnostic,),
    )


def add_word_action(
    document: TextDocumentLike,
    word: str,
    scope: DictionaryScope,
    diagnostics: Sequence[Diagnostic],
) -> FixAction:
    return FixAction(
        title=f'Add: "{word}" to {_ADD_WORD_TITLES[scope]}',
        command=AddWordCommand(scope=scope, word=word, uri=document.uri),
        diagnostics=tuple(diagnostics),
    )


async def synthesize_actions(
    document: TextDocumentLike,
    diagnostics: Sequence[Diagnostic],
    suggest: Callable[[str], Awaitable[list[str]]],
    folder_count: int,
    fallback_range: Range | None = None,
    *,
    version: int,
) -> list[FixAction]:
    """Build the actions for one request.

    `version` is the document version the request was resolved against; the
    document object itself may be edited in place while suggestions load.
    """
    spell_diags = [diag for diag in diagnostics if is_spell_diagnostic(diag)]
    actions: list[FixAction] = []
    diag_word = ""
    for diag in spell_diags:
        word = extract_text(document, diag.range)
        diag_word = diag_word or word
        for suggestion in await suggest(word):
            actions.append(replace_action(document, diag, suggestion, version))
    word = diag_word
    if not word and fallback_range is not None:
        word = extract_text(document, fallback_range)
    # Only offer to add when a word was found under one of our diagnostics.
    if word and spell_diags:
        actions.append(add_word_action(document, word, DictionaryScope.USER, spell_diags))
        if folder_count > 0:
            actions.append(add_word_action(document, word, DictionaryScope.FOLDER, spell_diags))
        if folder_count > 1:
            actions.append(
                add_word_action(document, word, DictionaryScope.WORKSPACE, spell_diags)
            )
    return actions
