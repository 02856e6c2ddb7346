"""
Script rules provider.

Pure, side-effect-free rules used by the query engine:
- hanzi: ideograph classification, code forms, OpenCC variant lookup
- middle_chinese / mandarin / cantonese / korean / vietnamese / japanese:
  per-script canonicalization and tone enumeration

``DefaultScriptRules`` bundles them behind the ``ScriptRules`` protocol.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from mcpdict_search.orthography import cantonese, hanzi, japanese, korean, mandarin, middle_chinese, vietnamese
from mcpdict_search.orthography.base import (
    Canonical,
    CanonicalResult,
    CantoneseRomanization,
    Rejected,
    Script,
    ScriptRules,
)


_CANONICALIZERS: dict[Script, Callable[[str], CanonicalResult]] = {
    Script.MIDDLE_CHINESE: middle_chinese.canonicalize,
    Script.MANDARIN: mandarin.canonicalize,
    Script.KOREAN: korean.canonicalize,
    Script.VIETNAMESE: vietnamese.canonicalize,
    Script.JAPANESE: japanese.canonicalize,
}

_TONE_EXPANDERS: dict[Script, Callable[[str], list[str]]] = {
    Script.MIDDLE_CHINESE: middle_chinese.all_tones,
    Script.MANDARIN: mandarin.all_tones,
    Script.CANTONESE: cantonese.all_tones,
    Script.VIETNAMESE: vietnamese.all_tones,
}


class DefaultScriptRules:
    """Rules provider backed by the bundled rule tables.

    ``variants`` maps a character to extra variant forms searched alongside its
    OpenCC simplified/traditional conversions.
    """

    def __init__(self, variants: Mapping[str, tuple[str, ...]] | None = None) -> None:
        self._variants = hanzi.VariantTable(variants)

    def is_ideograph(self, codepoint: int) -> bool:
        return hanzi.is_ideograph(codepoint)

    def is_hangul(self, char: str) -> bool:
        return korean.is_hangul(char)

    def variants_of(self, char: str) -> tuple[str, ...]:
        return self._variants.variants_of(char)

    def canonicalize(
        self,
        token: str,
        script: Script,
        romanization: CantoneseRomanization = CantoneseRomanization.JYUTPING,
    ) -> CanonicalResult:
        if script is Script.CANTONESE:
            return cantonese.canonicalize(token, romanization)
        return _CANONICALIZERS[script](token)

    def all_tones_of(self, token: str, script: Script) -> list[str]:
        """Return every tone variant of ``token``; atonal scripts return the token alone."""
        expander = _TONE_EXPANDERS.get(script)
        if expander is None:
            return [token]
        return expander(token)


__all__ = [
    "Canonical",
    "CanonicalResult",
    "CantoneseRomanization",
    "DefaultScriptRules",
    "Rejected",
    "Script",
    "ScriptRules",
]
