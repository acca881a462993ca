from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Optional, Tuple, Union

from lsprotocol import converters
from lsprotocol.types import TextEdit
from pydantic import BaseModel, ConfigDict, Field

from spellfix.json_types import JSONValue

EDIT_TEXT_COMMAND = "spellfix.editText"
ADD_WORD_TO_USER_COMMAND = "spellfix.addWordToUserDictionarySilent"
ADD_WORD_TO_FOLDER_COMMAND = "spellfix.addWordToDictionarySilent"
ADD_WORD_TO_WORKSPACE_COMMAND = "spellfix.addWordToWorkspaceDictionarySilent"

_converter = converters.get_converter()


class DictionaryScope(str, Enum):
    USER = "user"
    FOLDER = "folder"
    WORKSPACE = "workspace"


_ADD_WORD_COMMANDS = {
    DictionaryScope.USER: ADD_WORD_TO_USER_COMMAND,
    DictionaryScope.FOLDER: ADD_WORD_TO_FOLDER_COMMAND,
    DictionaryScope.WORKSPACE: ADD_WORD_TO_WORKSPACE_COMMAND,
}


class EditTextCommand(BaseModel):
    """Replace text in one exact document version."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["edit_text"] = "edit_text"
    uri: str
    version: Optional[int]
    edits: Tuple[TextEdit, ...]

    @property
    def command_id(self) -> str:
        return EDIT_TEXT_COMMAND

    def arguments(self) -> List[JSONValue]:
        return [
            self.uri,
            self.version,
            [_converter.unstructure(edit, TextEdit) for edit in self.edits],
        ]


class AddWordCommand(BaseModel):
    """Add a word to the dictionary of one scope, relative to a document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["add_word"] = "add_word"
    scope: DictionaryScope
    word: str
    uri: str

    @property
    def command_id(self) -> str:
        return _ADD_WORD_COMMANDS[self.scope]

    def arguments(self) -> List[JSONValue]:
        return [self.word, self.uri]


FixCommand = Annotated[Union[EditTextCommand, AddWordCommand], Field(discriminator="kind")]
