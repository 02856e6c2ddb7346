"""Domain models for dictionary lookup.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- No infrastructure dependencies

Every object here is built fresh for a single search call and discarded
afterwards.
"""

from __future__ import annotations

from enum import Enum
import re

from pydantic import BaseModel, ConfigDict, Field

from mcpdict_search.orthography.base import CantoneseRomanization


class SearchMode(str, Enum):
    """The script or reading the user is typing in."""

    IDEOGRAPH = "hz"
    MIDDLE_CHINESE = "mc"
    MANDARIN = "pu"
    CANTONESE = "ct"
    KOREAN = "kr"
    VIETNAMESE = "vn"
    JAPANESE_GO = "jp_go"
    JAPANESE_KAN = "jp_kan"
    JAPANESE_ANY = "jp_any"

    @classmethod
    def parse(cls, value: str | SearchMode) -> SearchMode:
        """Accept either the short code (``pu``) or the member name (``mandarin``)."""
        if isinstance(value, SearchMode):
            return value
        text = value.strip().lower()
        try:
            return cls(text)
        except ValueError:
            try:
                return cls[text.upper()]
            except KeyError:
                raise ValueError(f"Unknown search mode: {value!r}") from None


class Column(str, Enum):
    """Reading fields of a dictionary record, in declaration order."""

    UNICODE = "unicode"
    MIDDLE_CHINESE = "mc"
    MANDARIN = "pu"
    CANTONESE = "ct"
    KOREAN = "kr"
    VIETNAMESE = "vn"
    JAPANESE_GO = "jp_go"
    JAPANESE_KAN = "jp_kan"
    JAPANESE_TOU = "jp_tou"
    JAPANESE_KWAN = "jp_kwan"
    JAPANESE_OTHER = "jp_other"


READING_SEPARATORS = re.compile(r"[,\s]+")


class SearchOptions(BaseModel):
    """Immutable snapshot of the user-facing search settings."""

    model_config = ConfigDict(frozen=True)

    restrict_to_middle_chinese: bool = False
    expand_variants: bool = True
    tone_insensitive: bool = False
    cantonese_romanization: CantoneseRomanization = CantoneseRomanization.JYUTPING


class Keyword(BaseModel):
    """A canonicalized search term and the rank of the token it came from."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    rank: int = Field(ge=0)


class Record(BaseModel):
    """One dictionary entry: an ideograph and its readings.

    Each reading cell may hold several readings separated by commas or
    whitespace. Every field except ``unicode`` may be empty.
    """

    model_config = ConfigDict(frozen=True)

    unicode: str = Field(min_length=4, pattern=r"^[0-9A-F]+$")
    mc: str | None = None
    pu: str | None = None
    ct: str | None = None
    kr: str | None = None
    vn: str | None = None
    jp_go: str | None = None
    jp_kan: str | None = None
    jp_tou: str | None = None
    jp_kwan: str | None = None
    jp_other: str | None = None

    @property
    def character(self) -> str:
        return chr(self.codepoint)

    @property
    def codepoint(self) -> int:
        return int(self.unicode, 16)

    def value(self, column: Column) -> str | None:
        return getattr(self, column.value)

    def readings(self, column: Column) -> list[str]:
        """Split a reading cell into individual readings."""
        raw = self.value(column)
        if not raw:
            return []
        return [reading for reading in READING_SEPARATORS.split(raw) if reading]


class ResultRow(BaseModel):
    """A matched record annotated with the best rank it matched at."""

    model_config = ConfigDict(frozen=True)

    record: Record
    rank: int = Field(ge=0)


class NoQuery(BaseModel):
    """Signals that the input held nothing searchable.

    Distinct from an empty result list, which means "searched, found nothing".
    """

    model_config = ConfigDict(frozen=True)

    reason: str = "input contains no searchable keywords"


NO_QUERY = NoQuery()

SearchOutcome = list[ResultRow] | NoQuery
