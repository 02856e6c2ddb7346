"""Split raw user input into tokens according to the search mode."""

from __future__ import annotations

from dataclasses import dataclass
import re
import unicodedata

from mcpdict_search.domain.search import SearchMode
from mcpdict_search.orthography.base import ScriptRules


# Alphanumeric characters or apostrophes; underscore is a separator
WORD_RUN = re.compile(r"(?:[^\W_]|')+")


@dataclass(frozen=True, slots=True)
class RawToken:
    """A substring of the input that has not been validated yet."""

    text: str
    position: int
    start_char: int
    end_char: int


def _ideograph_tokens(text: str, rules: ScriptRules) -> list[RawToken]:
    tokens: list[RawToken] = []
    for index, char in enumerate(text):
        if rules.is_ideograph(ord(char)):
            tokens.append(RawToken(text=char, position=len(tokens), start_char=index, end_char=index + 1))
    return tokens


def _isolate_hangul(text: str, rules: ScriptRules) -> str:
    return "".join(f" {char} " if rules.is_hangul(char) else char for char in text)


def tokenize(text: str, mode: SearchMode, rules: ScriptRules) -> list[RawToken]:
    """Return the ordered tokens of ``text``.

    Ideograph mode keeps each ideograph as its own token and drops everything
    else. Other modes split on anything that is not a word character or an
    apostrophe and lower-case each run. In Korean mode every Hangul character
    is isolated first so it forms a run on its own.
    """
    if mode is SearchMode.IDEOGRAPH:
        return _ideograph_tokens(text, rules)

    # Compose combining marks so accented letters stay inside their run
    normalized = unicodedata.normalize("NFC", text)
    if mode is SearchMode.KOREAN:
        normalized = _isolate_hangul(normalized, rules)

    return [
        RawToken(text=match.group(0).lower(), position=position, start_char=match.start(), end_char=match.end())
        for position, match in enumerate(WORD_RUN.finditer(normalized))
    ]
