from __future__ import annotations

from pathlib import Path
import textwrap

from spellfix.config import (
    _normalize_name_list,
    load_config,
    merge_payload,
    normalize_spell_section,
    spell_defaults,
)


def test_spell_defaults_reads_toml(tmp_path: Path) -> None:
    (tmp_path / "spellfix.toml").write_text(
        textwrap.dedent(
            """
            [spell]
            language = "en-GB"
            words = ["pygls", "lsprotocol"]
            ignore_words = "asdf, qwer"
            num_suggestions = 4

            [spell.language_settings]
            python = ["kwargs"]
            """
        ).strip()
        + "\n"
    )
    section = normalize_spell_section(spell_defaults(root=tmp_path))
    assert section["language"] == "en-GB"
    assert section["words"] == ["pygls", "lsprotocol"]
    assert section["ignore_words"] == ["asdf", "qwer"]
    assert section["num_suggestions"] == 4
    assert section["language_settings"] == {"python": ["kwargs"]}


def test_load_config_missing_or_invalid_is_empty(tmp_path: Path) -> None:
    assert load_config(root=tmp_path) == {}
    broken = tmp_path / "broken.toml"
    broken.write_text("[spell\nwords = 1\n")
    assert load_config(config_path=broken) == {}


def test_normalize_spell_section_drops_unknown_keys() -> None:
    assert normalize_spell_section({"colour": "red", "words": "a,b"}) == {"words": ["a", "b"]}
    assert normalize_spell_section(None) == {}
    assert normalize_spell_section({"num_suggestions": "many"}) == {"num_suggestions": 8}


def test_name_list_helper() -> None:
    assert _normalize_name_list(None) == []
    assert _normalize_name_list(["a, b", 3, "c"]) == ["a", "b", "c"]


def test_merge_payload_prefers_explicit_values() -> None:
    merged = merge_payload({"words": ["x"], "language": None}, {"words": ["y"], "language": "en"})
    assert merged == {"words": ["x"], "language": "en"}
