"""Tests for the dictionary domain models."""

from pydantic import ValidationError
import pytest

from mcpdict_search.domain.search import NO_QUERY, Column, Keyword, NoQuery, Record, ResultRow, SearchMode


pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("hz", SearchMode.IDEOGRAPH),
        ("PU", SearchMode.MANDARIN),
        (" jp_any ", SearchMode.JAPANESE_ANY),
        ("cantonese", SearchMode.CANTONESE),
        ("japanese_kan", SearchMode.JAPANESE_KAN),
        (SearchMode.KOREAN, SearchMode.KOREAN),
    ],
)
def test_search_mode_parse(value, expected):
    assert SearchMode.parse(value) is expected


def test_search_mode_parse_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown search mode"):
        SearchMode.parse("jp")


def test_record_readings_split_on_commas_and_whitespace():
    record = Record(unicode="884C", pu="xing2, hang2 heng2", ct="hang4,,hong4")

    assert record.readings(Column.MANDARIN) == ["xing2", "hang2", "heng2"]
    assert record.readings(Column.CANTONESE) == ["hang4", "hong4"]
    assert record.readings(Column.MIDDLE_CHINESE) == []


def test_record_character_and_code_point():
    record = Record(unicode="20000")

    assert record.character == "\U00020000"
    assert record.codepoint == 0x20000
    assert record.value(Column.UNICODE) == "20000"


@pytest.mark.parametrize("code", ["660e", "66E", "U+660E", ""])
def test_record_rejects_malformed_code_forms(code):
    with pytest.raises(ValidationError):
        Record(unicode=code)


def test_models_are_immutable():
    record = Record(unicode="660E")

    with pytest.raises(ValidationError):
        record.pu = "ming2"
    with pytest.raises(ValidationError):
        ResultRow(record=record, rank=0).rank = 1


def test_keyword_validation():
    with pytest.raises(ValidationError):
        Keyword(text="", rank=0)
    with pytest.raises(ValidationError):
        Keyword(text="ming2", rank=-1)


def test_no_query_is_distinct_from_empty_results():
    assert isinstance(NO_QUERY, NoQuery)
    assert NO_QUERY != []
    assert NO_QUERY.reason
