"""Shared types for the script rules provider.

Every canonicalizer returns an explicit two-case result: ``Canonical`` carrying
the normalized reading, or ``Rejected`` carrying the offending token and a short
reason. Callers never have to guess whether an empty string means "invalid".
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Script(str, Enum):
    """Reading systems that have their own canonicalization rules."""

    MIDDLE_CHINESE = "middle_chinese"
    MANDARIN = "mandarin"
    CANTONESE = "cantonese"
    KOREAN = "korean"
    VIETNAMESE = "vietnamese"
    JAPANESE = "japanese"

    @property
    def is_tonal(self) -> bool:
        """Whether readings in this script carry a tone dimension."""
        return self in _TONAL_SCRIPTS


_TONAL_SCRIPTS = frozenset({Script.MIDDLE_CHINESE, Script.MANDARIN, Script.CANTONESE, Script.VIETNAMESE})


class CantoneseRomanization(str, Enum):
    """Romanization systems accepted for Cantonese input."""

    JYUTPING = "jyutping"
    CANTONESE_PINYIN = "cantonese_pinyin"
    YALE = "yale"
    SIDNEY_LAU = "sidney_lau"


@dataclass(frozen=True, slots=True)
class Canonical:
    """A token that was accepted and normalized."""

    value: str


@dataclass(frozen=True, slots=True)
class Rejected:
    """A token that is not a valid reading in the requested script."""

    token: str
    reason: str


CanonicalResult = Canonical | Rejected


class ScriptRules(Protocol):
    """Protocol implemented by script rules providers."""

    def is_ideograph(self, codepoint: int) -> bool:  # pragma: no cover - interface definition
        ...

    def is_hangul(self, char: str) -> bool:  # pragma: no cover - interface definition
        ...

    def variants_of(self, char: str) -> Sequence[str]:  # pragma: no cover - interface definition
        ...

    def canonicalize(
        self,
        token: str,
        script: Script,
        romanization: CantoneseRomanization = CantoneseRomanization.JYUTPING,
    ) -> CanonicalResult:  # pragma: no cover - interface definition
        ...

    def all_tones_of(self, token: str, script: Script) -> Sequence[str]:  # pragma: no cover - interface definition
        ...
