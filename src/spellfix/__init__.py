"""spellfix package root."""

from spellfix.exceptions import SettingsResolutionError, SpellfixError

__all__ = ["__version__", "SettingsResolutionError", "SpellfixError"]

__version__ = "0.1.0"
