"""Korean canonicalization: Hangul syllables are romanized, romanizations are validated."""

from __future__ import annotations

from itertools import product

from korean_romanizer.romanizer import Romanizer

from mcpdict_search.orthography.base import Canonical, CanonicalResult, Rejected


_SYLLABLE_FIRST = 0xAC00
_SYLLABLE_LAST = 0xD7A3

# Revised Romanization spellings, used to validate Latin input
INITIALS = ("g", "kk", "n", "d", "tt", "r", "m", "b", "pp", "s", "ss", "", "j", "jj", "ch", "k", "t", "p", "h")
MEDIALS = (
    "a", "ae", "ya", "yae", "eo", "e", "yeo", "ye", "o", "wa", "wae",
    "oe", "yo", "u", "wo", "we", "wi", "yu", "eu", "ui", "i",
)  # fmt: skip
# Final consonants in their unreleased pronunciation
FINALS = ("", "k", "n", "t", "l", "m", "p", "ng")

_JAMO_RANGES: tuple[tuple[int, int], ...] = (
    (0x1100, 0x11FF),  # Hangul Jamo
    (0x3130, 0x318F),  # Compatibility Jamo
    (0xA960, 0xA97F),  # Jamo Extended-A
    (0xD7B0, 0xD7FF),  # Jamo Extended-B
)

_ROMANIZED_SYLLABLES = frozenset(
    initial + medial + final for initial, medial, final in product(INITIALS, MEDIALS, FINALS)
)


def is_syllable(char: str) -> bool:
    return len(char) == 1 and _SYLLABLE_FIRST <= ord(char) <= _SYLLABLE_LAST


def is_hangul(char: str) -> bool:
    """Return True for precomposed Hangul syllables and Hangul jamo."""
    if len(char) != 1:
        return False
    if is_syllable(char):
        return True
    codepoint = ord(char)
    return any(start <= codepoint <= end for start, end in _JAMO_RANGES)


def romanize(syllable: str) -> str:
    """Romanize one precomposed Hangul syllable."""
    return Romanizer(syllable).romanize().strip().lower()


def canonicalize(token: str) -> CanonicalResult:
    text = token.lower()
    if len(text) == 1 and is_hangul(text):
        if not is_syllable(text):
            return Rejected(token, "bare jamo is not a syllable")
        romanized = romanize(text)
        if romanized not in _ROMANIZED_SYLLABLES:
            return Rejected(token, f"unexpected romanization {romanized!r}")
        return Canonical(romanized)
    if text in _ROMANIZED_SYLLABLES:
        return Canonical(text)
    return Rejected(token, "not a Korean syllable")
