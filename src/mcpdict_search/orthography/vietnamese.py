"""Vietnamese canonicalization to Telex spelling.

Diacritics are rewritten the way Telex types them (``â`` -> ``aa``, ``ơ`` ->
``ow``, ``đ`` -> ``dd``) and the tone moves to the end of the syllable as a
letter: ``s`` (sắc), ``f`` (huyền), ``r`` (hỏi), ``x`` (ngã), ``j`` (nặng).
A level-tone syllable carries no tone letter. Text that is already in Telex is
accepted as-is.
"""

from __future__ import annotations

import re
import unicodedata

from mcpdict_search.orthography.base import Canonical, CanonicalResult, Rejected


TONE_LETTERS = ("s", "f", "r", "x", "j")

_TONE_BY_MARK = {
    "\u0301": "s",
    "\u0300": "f",
    "\u0309": "r",
    "\u0303": "x",
    "\u0323": "j",
}
_CIRCUMFLEX = "\u0302"
_BREVE = "\u0306"
_HORN = "\u031B"
_D_STROKE = "đ"

_SYLLABLE = re.compile(
    r"^(?:ngh|ng|nh|ch|gh|gi|kh|ph|qu|th|tr|dd|[bcdghklmnprstvx])?"
    r"[aeiouyw]*[aeiouy][aeiouyw]*"
    r"(?:ch|nh|ng|[cmnpt])?$"
)
# Syllables closed by a stop only take the sắc and nặng tones
_CHECKED_ENDINGS = ("ch", "c", "p", "t")


def _to_telex(token: str) -> tuple[str, str] | None:
    letters: list[str] = []
    tone = ""
    for char in unicodedata.normalize("NFD", token.lower()):
        if char in _TONE_BY_MARK:
            if tone:
                return None
            tone = _TONE_BY_MARK[char]
        elif char == _CIRCUMFLEX:
            if not letters or letters[-1] not in "aeo":
                return None
            letters.append(letters[-1])
        elif char in (_BREVE, _HORN):
            if not letters or letters[-1] not in "aou":
                return None
            letters.append("w")
        elif char == _D_STROKE:
            letters.append("dd")
        elif "a" <= char <= "z":
            letters.append(char)
        else:
            return None
    return "".join(letters), tone


def split_tone(token: str) -> tuple[str, str]:
    """Split a Telex syllable into base and trailing tone letter."""
    if len(token) > 1 and token[-1] in TONE_LETTERS and _SYLLABLE.match(token[:-1]):
        return token[:-1], token[-1]
    return token, ""


def canonicalize(token: str) -> CanonicalResult:
    converted = _to_telex(token)
    if converted is None:
        return Rejected(token, "unexpected diacritic or character")
    letters, tone = converted
    if tone:
        base = letters
    else:
        base, tone = split_tone(letters)
    if not _SYLLABLE.match(base):
        return Rejected(token, "not a Vietnamese syllable")
    return Canonical(base + tone)


def all_tones(token: str) -> list[str]:
    base, _ = split_tone(token)
    if base.endswith(_CHECKED_ENDINGS):
        return [base + "s", base + "j"]
    return [base, *(base + letter for letter in TONE_LETTERS)]
