"""Mandarin pinyin canonicalization.

Canonical form is the toneless syllable followed by a tone digit, ``ming2``.
The neutral tone is written ``5``. ``ü`` is written ``v``. A syllable typed
without any tone stays bare (``ming``) and only matches through tone-insensitive
expansion.
"""

from __future__ import annotations

import re
import unicodedata

from mcpdict_search.orthography.base import Canonical, CanonicalResult, Rejected


TONES: tuple[str, ...] = ("1", "2", "3", "4", "5")

_TONE_BY_MARK = {
    "\u0304": "1",  # macron
    "\u0301": "2",  # acute
    "\u030C": "3",  # caron
    "\u0306": "3",  # breve, a common stand-in for the caron
    "\u0300": "4",  # grave
}
_DIAERESIS = "\u0308"

_INITIALS = "zh|ch|sh|[bpmfdtnlgkhjqxrzcsyw]"
_FINALS = (
    "iang|iong|uang|ueng|ang|eng|ing|ong|uai|iao|ian|uan|van|ai|ei|ao|ou|an|en|er|ia|ie|iu|in|ua|uo|ui|un|ue|ve|vn|"
    "a|o|e|i|u|v"
)
_SYLLABLE = re.compile(rf"^(?:(?:{_INITIALS})?(?:{_FINALS})|m|n|ng|hm|hng)$")


def canonicalize(token: str) -> CanonicalResult:
    """Normalize tone-marked or tone-numbered pinyin."""
    text = unicodedata.normalize("NFD", token.lower()).replace("u:", "v")
    tone: str | None = None
    if text and text[-1].isdigit():
        digit = text[-1]
        text = text[:-1]
        if digit not in "012345":
            return Rejected(token, f"invalid tone digit {digit!r}")
        tone = "5" if digit == "0" else digit

    letters: list[str] = []
    for char in text:
        if char in _TONE_BY_MARK:
            if tone is not None:
                return Rejected(token, "more than one tone")
            tone = _TONE_BY_MARK[char]
        elif char == _DIAERESIS:
            if not letters or letters[-1] != "u":
                return Rejected(token, "diaeresis outside of ü")
            letters[-1] = "v"
        elif "a" <= char <= "z":
            letters.append(char)
        else:
            return Rejected(token, f"unexpected character {char!r}")

    base = "".join(letters)
    if not _SYLLABLE.match(base):
        return Rejected(token, "not a pinyin syllable")
    return Canonical(base + (tone or ""))


def strip_tone(token: str) -> str:
    if token and token[-1].isdigit():
        return token[:-1]
    return token


def all_tones(token: str) -> list[str]:
    base = strip_tone(token)
    return [base + tone for tone in TONES]
