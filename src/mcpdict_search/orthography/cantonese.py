"""Cantonese romanization canonicalization.

Input may be typed in any of the supported romanization systems; it is always
converted to Jyutping with a numeric tone (1-6), which is how the store indexes
Cantonese readings.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from mcpdict_search.orthography.base import Canonical, CanonicalResult, CantoneseRomanization, Rejected


TONES: tuple[str, ...] = ("1", "2", "3", "4", "5", "6")

JYUTPING_INITIALS = ("b", "p", "m", "f", "d", "t", "n", "l", "g", "k", "ng", "h", "gw", "kw", "w", "z", "c", "s", "j")
JYUTPING_FINALS = (
    "aa", "aai", "aau", "aam", "aan", "aang", "aap", "aat", "aak",
    "a", "ai", "au", "am", "an", "ang", "ap", "at", "ak",
    "e", "ei", "eu", "em", "en", "eng", "ep", "et", "ek",
    "i", "iu", "im", "in", "ing", "ip", "it", "ik",
    "o", "oi", "ou", "on", "ong", "ot", "ok",
    "oe", "oeng", "oet", "oek", "eoi", "eon", "eot",
    "u", "ui", "un", "ung", "ut", "uk",
    "yu", "yun", "yut",
    "m", "ng",
)  # fmt: skip

_SHARED_INITIALS = {name: name for name in JYUTPING_INITIALS if name not in ("z", "c", "j")}
_IDENTITY_FINALS = {name: name for name in JYUTPING_FINALS}


@dataclass(frozen=True, slots=True)
class _System:
    """Spelling tables of one romanization, keyed by its own spelling."""

    initials: dict[str, str]
    finals: dict[str, str]
    tones: dict[str, str]
    # y + u-final spells a Jyutping j + yu-final in Yale and Sidney Lau
    y_glide: bool = False


_SIX_TONES = {tone: tone for tone in TONES}

_SYSTEMS: dict[CantoneseRomanization, _System] = {
    CantoneseRomanization.JYUTPING: _System(
        initials={**_SHARED_INITIALS, "z": "z", "c": "c", "j": "j"},
        finals=_IDENTITY_FINALS,
        tones=_SIX_TONES,
    ),
    CantoneseRomanization.CANTONESE_PINYIN: _System(
        initials={**_SHARED_INITIALS, "dz": "z", "ts": "c", "j": "j"},
        finals={
            **{name: name for name in JYUTPING_FINALS if not name.startswith(("eo", "yu"))},
            "oey": "eoi",
            "oen": "eon",
            "oet": "eot",
            "y": "yu",
            "yn": "yun",
            "yt": "yut",
        },
        # Checked syllables use 7/8/9 for the high, mid and low entering tones
        tones={**_SIX_TONES, "7": "1", "8": "3", "9": "6"},
    ),
    CantoneseRomanization.YALE: _System(
        initials={**_SHARED_INITIALS, "j": "z", "ch": "c", "y": "j"},
        finals={
            **{name: name for name in JYUTPING_FINALS if not name.startswith(("aa", "oe", "eo", "eu"))},
            "a": "aa",
            "aai": "aai",
            "aau": "aau",
            "aam": "aam",
            "aan": "aan",
            "aang": "aang",
            "aap": "aap",
            "aat": "aat",
            "aak": "aak",
            "eu": "oe",
            "eung": "oeng",
            "euk": "oek",
            "eut": "eot",
            "eui": "eoi",
            "eun": "eon",
        },
        tones=_SIX_TONES,
        y_glide=True,
    ),
    CantoneseRomanization.SIDNEY_LAU: _System(
        initials={**_SHARED_INITIALS, "j": "z", "ch": "c", "y": "j"},
        finals={
            "a": "aa", "aai": "aai", "aau": "aau", "aam": "aam", "aan": "aan", "aang": "aang",
            "aap": "aap", "aat": "aat", "aak": "aak",
            "ai": "ai", "au": "au", "am": "am", "an": "an", "ang": "ang", "ap": "ap", "at": "at", "ak": "ak",
            "e": "e", "ei": "ei", "eng": "eng", "ek": "ek",
            "ee": "i", "iu": "iu", "im": "im", "in": "in", "ing": "ing", "ip": "ip", "it": "it", "ik": "ik",
            "oh": "o", "oi": "oi", "o": "ou", "on": "on", "ong": "ong", "ot": "ot", "ok": "ok",
            "euh": "oe", "eung": "oeng", "euk": "oek", "ui": "eoi", "un": "eon", "ut": "eot",
            "oo": "u", "ooi": "ui", "oon": "un", "ung": "ung", "oot": "ut", "uk": "uk",
            "ue": "yu", "uen": "yun", "uet": "yut",
            "m": "m", "ng": "ng",
        },  # fmt: skip
        tones=_SIX_TONES,
    ),
}

_TOKEN = re.compile(r"^([a-z]+)([0-9]?)$")


def _split(letters: str, system: _System) -> tuple[str, str] | None:
    """Split a toneless syllable into Jyutping initial and final."""
    candidates = sorted(system.initials, key=len, reverse=True)
    for initial in [*candidates, ""]:
        if not letters.startswith(initial):
            continue
        rest = letters[len(initial) :]
        if system.y_glide and initial == "y" and rest in ("u", "un", "ut"):
            return "j", "y" + rest
        final = system.finals.get(rest)
        if final is None:
            continue
        return (system.initials[initial] if initial else ""), final
    return None


def canonicalize(token: str, system: CantoneseRomanization = CantoneseRomanization.JYUTPING) -> CanonicalResult:
    """Convert a romanized syllable to toned Jyutping."""
    match = _TOKEN.match(token.lower())
    if not match:
        return Rejected(token, "not a romanized syllable")
    letters, digit = match.groups()
    rules = _SYSTEMS[system]

    tone = ""
    if digit:
        if digit not in rules.tones:
            return Rejected(token, f"invalid tone {digit!r} for {system.value}")
        tone = rules.tones[digit]

    parts = _split(letters, rules)
    if parts is None:
        return Rejected(token, f"not a {system.value} syllable")
    initial, final = parts
    return Canonical(initial + final + tone)


def strip_tone(token: str) -> str:
    if token and token[-1].isdigit():
        return token[:-1]
    return token


def all_tones(token: str) -> list[str]:
    base = strip_tone(token)
    return [base + tone for tone in TONES]
