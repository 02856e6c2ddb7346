"""Tests for Japanese kana romanization and romaji validation."""

import pytest

from mcpdict_search.orthography.base import Canonical, Rejected
from mcpdict_search.orthography.japanese import canonicalize, is_kana, kana_to_romaji, spell_out_long_vowels


pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("kana", "expected"),
    [
        ("めい", "mei"),
        ("ガク", "gaku"),
        ("みょう", "myou"),
        ("しゅう", "shuu"),
        ("がっこう", "gakkou"),
    ],
)
def test_kana_to_romaji(kana, expected):
    assert kana_to_romaji(kana) == expected


@pytest.mark.parametrize("kana", ["っ", "ー", "ゃ", "がっ", "明", "めa", ""])
def test_kana_to_romaji_rejects_unspellable_input(kana):
    assert kana_to_romaji(kana) is None


@pytest.mark.parametrize(
    ("romaji", "expected"),
    [("Kō", "koo"), ("ko-", "koo"), ("koー", "koo"), ("kûki", "kuuki"), ("kan'on", "kanon"), ("myou", "myou")],
)
def test_spell_out_long_vowels(romaji, expected):
    assert spell_out_long_vowels(romaji) == expected


def test_spell_out_long_vowels_needs_a_vowel_to_lengthen():
    assert spell_out_long_vowels("-") == ""
    assert spell_out_long_vowels("n-") == ""


def test_is_kana():
    assert is_kana("め")
    assert is_kana("メ")
    assert is_kana("ー")
    assert not is_kana("m")
    assert not is_kana("明")


def test_canonicalize_romaji():
    assert canonicalize("Mei") == Canonical("mei")
    assert canonicalize("kan'on") == Canonical("kanon")
    assert canonicalize("gakkou") == Canonical("gakkou")


def test_canonicalize_kana():
    assert canonicalize("めい") == Canonical("mei")
    assert canonicalize("ミョウ") == Canonical("myou")


@pytest.mark.parametrize("token", ["xyz", "ming2", "っ"])
def test_canonicalize_rejects(token):
    assert isinstance(canonicalize(token), Rejected)
