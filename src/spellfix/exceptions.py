"""Exception types raised by spellfix."""

from __future__ import annotations


class SpellfixError(RuntimeError):
    pass


class SettingsResolutionError(SpellfixError):
    """Settings or dictionary construction failed for one document state.

    The failure is bound to the (uri, version, settings generation) it was
    produced for; a later request against the same state observes the same
    error until the document or the configuration changes.
    """

    def __init__(self, uri: str, doc_version: int, settings_version: int, reason: str):
        super().__init__(f"{uri}@{doc_version}/{settings_version}: {reason}")
        self.uri = uri
        self.doc_version = doc_version
        self.settings_version = settings_version
        self.reason = reason

