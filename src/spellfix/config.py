from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "spellfix.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def spell_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("spell", {})
    return section if isinstance(section, dict) else {}


def _normalize_name_list(value: TomlValue) -> list[str]:
    items: list[str] = []
    if value is None:
        return items
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple, set)):
        for item in value:
            if isinstance(item, str):
                items.extend([part.strip() for part in item.split(",") if part.strip()])
    return [item for item in items if item]


def _as_int(value: TomlValue, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def normalize_spell_section(section: TomlTable | None) -> TomlTable:
    """Coerce a raw `[spell]` table into the field shapes of SpellSettings.

    Unknown keys are dropped. Missing keys stay missing so that
    merge_payload can fall back to defaults.
    """
    if not isinstance(section, dict):
        return {}
    normalized: TomlTable = {}
    if isinstance(section.get("language"), str):
        normalized["language"] = str(section["language"]).strip()
    for key in ("words", "user_words", "ignore_words", "flag_words", "allowed_schemas"):
        if key in section:
            normalized[key] = _normalize_name_list(section.get(key))
    if "num_suggestions" in section:
        normalized["num_suggestions"] = _as_int(section.get("num_suggestions"), 8)
    raw_languages = section.get("language_settings")
    if isinstance(raw_languages, dict):
        normalized["language_settings"] = {
            str(language_id): _normalize_name_list(words)
            for language_id, words in raw_languages.items()
        }
    return normalized


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged
