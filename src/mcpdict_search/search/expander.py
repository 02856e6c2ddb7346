"""Turn raw tokens into ranked keywords.

Each token keeps the rank of its position in the input. Expansion (character
variants, tone variants) can produce several keywords for one token; they all
share that token's rank.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging

from mcpdict_search.domain.search import Keyword, SearchMode, SearchOptions
from mcpdict_search.orthography.base import Rejected, Script, ScriptRules
from mcpdict_search.orthography.hanzi import to_code_form
from mcpdict_search.search.tokenizer import RawToken


logger = logging.getLogger(__name__)

SCRIPT_BY_MODE: dict[SearchMode, Script] = {
    SearchMode.MIDDLE_CHINESE: Script.MIDDLE_CHINESE,
    SearchMode.MANDARIN: Script.MANDARIN,
    SearchMode.CANTONESE: Script.CANTONESE,
    SearchMode.KOREAN: Script.KOREAN,
    SearchMode.VIETNAMESE: Script.VIETNAMESE,
    SearchMode.JAPANESE_GO: Script.JAPANESE,
    SearchMode.JAPANESE_KAN: Script.JAPANESE,
    SearchMode.JAPANESE_ANY: Script.JAPANESE,
}


class KeywordExpander:
    """Canonicalizes tokens and applies variant or tone expansion."""

    def __init__(self, rules: ScriptRules) -> None:
        self.rules = rules

    def expand(self, tokens: Sequence[RawToken], mode: SearchMode, options: SearchOptions) -> list[Keyword]:
        """Return keywords ordered by rank; rejected tokens are skipped."""
        keywords: list[Keyword] = []
        for token in tokens:
            rank = token.position
            terms = self._terms_for(token, mode, options)
            keywords.extend(Keyword(text=term, rank=rank) for term in _unique(terms))
        return keywords

    def _terms_for(self, token: RawToken, mode: SearchMode, options: SearchOptions) -> list[str]:
        if mode is SearchMode.IDEOGRAPH:
            chars = self.rules.variants_of(token.text) if options.expand_variants else (token.text,)
            return [to_code_form(char) for char in chars]

        script = SCRIPT_BY_MODE[mode]
        result = self.rules.canonicalize(token.text, script, options.cantonese_romanization)
        if isinstance(result, Rejected):
            logger.debug("Skipping token %r in %s mode: %s", token.text, mode.value, result.reason)
            return []

        if options.tone_insensitive and script.is_tonal:
            return list(self.rules.all_tones_of(result.value, script))
        return [result.value]


def _unique(terms: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(terms))
