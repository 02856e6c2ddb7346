"""Middle Chinese canonicalization for a Polyhedron-style orthography.

Readings are lowercase ASCII. The rising tone is marked by a trailing ``x`` and
the departing tone by a trailing ``h``; level-tone syllables are unmarked and
entering-tone syllables end in ``p``, ``t`` or ``k``.
"""

from __future__ import annotations

import re

from mcpdict_search.orthography.base import Canonical, CanonicalResult, Rejected


RISING = "x"
DEPARTING = "h"

# Nasal codas pair with the stop coda of their entering-tone counterpart
_CHECKED_BY_NASAL = {"ng": "k", "m": "p", "n": "t"}
_NASAL_BY_CHECKED = {stop: nasal for nasal, stop in _CHECKED_BY_NASAL.items()}

_SYLLABLE = re.compile(r"^[a-z']*[aeiouy][a-z']*$")


def split_tone(token: str) -> tuple[str, str]:
    """Return ``(base, tone_mark)``; the mark is empty for level/entering tones."""
    if len(token) > 1 and token[-1] in (RISING, DEPARTING):
        return token[:-1], token[-1]
    return token, ""


def canonicalize(token: str) -> CanonicalResult:
    text = token.lower()
    base, _ = split_tone(text)
    if not _SYLLABLE.match(base):
        return Rejected(token, "not a Middle Chinese syllable")
    return Canonical(text)


def _coda_pair(base: str) -> tuple[str, str] | None:
    """Return the nasal and checked spellings of a syllable with a consonant coda."""
    for nasal, stop in _CHECKED_BY_NASAL.items():
        if base.endswith(nasal):
            return base, base[: -len(nasal)] + stop
    if base and base[-1] in _NASAL_BY_CHECKED:
        return base[:-1] + _NASAL_BY_CHECKED[base[-1]], base
    return None


def all_tones(token: str) -> list[str]:
    """Expand a reading into its level, rising, departing and entering forms.

    Open syllables have no entering tone. A checked syllable expands through
    its nasal counterpart, so ``mjaek`` and ``mjaeng`` produce the same list.
    """
    base, _ = split_tone(token)
    pair = _coda_pair(base)
    if pair is None:
        return [base, base + RISING, base + DEPARTING]
    nasal, checked = pair
    return [nasal, nasal + RISING, nasal + DEPARTING, checked]
