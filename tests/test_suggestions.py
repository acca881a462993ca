from __future__ import annotations

import asyncio

import pytest

from spellfix.dictionary import SpellSettings
from spellfix.settings_cache import SettingsDictPair
from spellfix.suggestions import SuggestionGenerator, adjust_suggestions
from tests.fakes import FakeDictionary, make_document


def _generator(
    suggestions: dict[str, list[str]], settings: SpellSettings | None = None
) -> tuple[SuggestionGenerator, FakeDictionary]:
    dictionary = FakeDictionary(suggestions)
    pair = SettingsDictPair(settings=settings or SpellSettings(), dictionary=dictionary)

    async def _get_settings(document):
        return pair

    return SuggestionGenerator(_get_settings), dictionary


def test_lowercase_candidates_follow_the_misspelling_case() -> None:
    generator, _ = _generator({"Teh": ["the", "Ten"]})
    result = asyncio.run(generator.gen_word_suggestions(make_document("Teh"), "Teh"))
    assert result == ["The", "Ten"]


def test_duplicates_after_recasing_keep_first_occurrence() -> None:
    generator, _ = _generator({"Teh": ["the", "The", "ten", "Ten", "tEn"]})
    result = asyncio.run(generator.gen_word_suggestions(make_document("Teh"), "Teh"))
    assert result == ["The", "Ten", "tEn"]


def test_no_candidates_is_an_empty_list() -> None:
    generator, _ = _generator({})
    assert asyncio.run(generator.gen_word_suggestions(make_document(""), "")) == []


def test_limit_comes_from_settings_and_word_length() -> None:
    long_word = "internationalizashun"
    too_long = "internationalizashunly"
    generator, dictionary = _generator(
        {"wrod": ["word", "wood"], long_word: ["internationalization", "x"]},
        SpellSettings(num_suggestions=1),
    )
    document = make_document("wrod")
    assert asyncio.run(generator.gen_word_suggestions(document, "wrod")) == ["word"]
    assert asyncio.run(generator.gen_word_suggestions(document, long_word)) == [
        "internationalization"
    ]
    assert asyncio.run(generator.gen_word_suggestions(document, too_long)) == []
    assert dictionary.lookups == [("wrod", 1), (long_word, 1)]


@pytest.mark.parametrize(
    ("word", "raw", "expected"),
    [
        ("TEH", ["the", "tea"], ["THE", "TEA"]),
        ("teh", ["the", "THE", "GitHub"], ["the", "THE", "GitHub"]),
        ("Teh", ["the", "the"], ["The"]),
    ],
)
def test_adjust_suggestions(word: str, raw: list[str], expected: list[str]) -> None:
    assert adjust_suggestions(word, raw) == expected
