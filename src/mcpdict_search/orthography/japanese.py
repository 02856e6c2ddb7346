"""Japanese on'yomi canonicalization.

Readings are stored in lowercase Hepburn-style romaji without macrons, so long
vowels are spelled out (``myou``, ``kuu``). Kana input (hiragana or katakana)
is romanized with pykakasi; romaji input is validated mora by mora. All
Japanese reading columns share this canonicalizer.
"""

from __future__ import annotations

import re
import threading

import pykakasi

from mcpdict_search.orthography.base import Canonical, CanonicalResult, Rejected


_HIRAGANA = (0x3041, 0x3096)
_KATAKANA = (0x30A1, 0x30FA)
_CHOONPU = "ー"
# Kana that only modify the mora before or after them
_DEPENDENT_KANA = frozenset("っッゃゅょャュョぁぃぅぇぉァィゥェォー")
_SOKUON = frozenset("っッ")
_MACRONS = str.maketrans(
    {"ā": "aa", "ī": "ii", "ū": "uu", "ē": "ee", "ō": "oo", "â": "aa", "î": "ii", "û": "uu", "ê": "ee", "ô": "oo"}
)

_ROMAJI = re.compile(
    r"^(?:"
    r"(?:([kgsztdhbpmrfcj])(?=\1)|t(?=ch))?"  # sokuon doubling
    r"(?:ky|gy|sh|ch|ts|ny|hy|by|py|my|ry|j|[kgsztdnhbpmyrwfv])?[aeiou]"
    r"|n'?"
    r")+$"
)

# One converter per process; conversions are serialized
_kakasi_holder: dict[str, pykakasi.kakasi] = {}
_kakasi_lock = threading.Lock()


def _hepburn(text: str) -> str:
    with _kakasi_lock:
        kks = _kakasi_holder.get("kakasi")
        if kks is None:
            kks = _kakasi_holder["kakasi"] = pykakasi.kakasi()
        converted = kks.convert(text)
    return "".join(item["hepburn"] for item in converted)


def is_kana(char: str) -> bool:
    codepoint = ord(char)
    return (
        _HIRAGANA[0] <= codepoint <= _HIRAGANA[1]
        or _KATAKANA[0] <= codepoint <= _KATAKANA[1]
        or char == _CHOONPU
    )


def spell_out_long_vowels(romaji: str) -> str:
    """Lowercase ``romaji`` and write long vowels as doubled letters.

    Macrons and circumflexes double their vowel, and a long-vowel mark (``ー``
    or ``-``) repeats the vowel before it. Returns an empty string when a mark
    has no vowel to lengthen.
    """
    text = romaji.lower().translate(_MACRONS).replace("'", "")
    spelled: list[str] = []
    for char in text:
        if char in (_CHOONPU, "-"):
            if not spelled or spelled[-1] not in "aeiou":
                return ""
            char = spelled[-1]
        spelled.append(char)
    return "".join(spelled)


def kana_to_romaji(text: str) -> str | None:
    """Romanize a kana string; returns None when it cannot be spelled."""
    if not text or not all(is_kana(char) for char in text):
        return None
    if text[0] in _DEPENDENT_KANA or text[-1] in _SOKUON:
        return None
    romaji = spell_out_long_vowels(_hepburn(text))
    if not romaji or not _ROMAJI.match(romaji):
        return None
    return romaji


def canonicalize(token: str) -> CanonicalResult:
    if any(is_kana(char) for char in token):
        romaji = kana_to_romaji(token)
        if romaji is None:
            return Rejected(token, "kana cannot be romanized")
        return Canonical(romaji)
    text = token.lower()
    if not _ROMAJI.match(text):
        return Rejected(token, "not a romaji reading")
    return Canonical(text.replace("'", ""))
