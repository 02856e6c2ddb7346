"""Shared test fixtures and configuration."""

import os
from pathlib import Path

import pytest

from mcpdict_search.adapters.dictionary_repository import InMemoryDictionaryRepository
from mcpdict_search.domain.search import Record
from mcpdict_search.orthography import DefaultScriptRules
from mcpdict_search.search.sqlite_storage import SqliteDictionaryStore, SqliteDictionaryWriter
from mcpdict_search.service_layer.search_service import SearchService


# Complete test environment that overrides ALL possible config values
TEST_ENV = {
    "MCPDICT_DEFAULT_MODE": "hz",
    "MCPDICT_KUANGX_YONH_ONLY": "false",
    "MCPDICT_ALLOW_VARIANTS": "true",
    "MCPDICT_TONE_INSENSITIVE": "false",
    "MCPDICT_CANTONESE_ROMANIZATION": "jyutping",
    "MCPDICT_LOG_LEVEL": "warning",
    "MCPDICT_LOG_JSON": "false",
    "MCPDICT_SERVICE_NAME": "mcpdict-search-test",
}

# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value
os.environ.pop("MCPDICT_DICTIONARY_PATH", None)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset MCPDICT_* variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("MCPDICT_DICTIONARY_PATH", raising=False)


# 学 and 马 have no Middle Chinese reading; 朙 is a variant of 明
SAMPLE_ROWS = [
    {
        "unicode": "660E",
        "mc": "mjaeng",
        "pu": "ming2",
        "ct": "ming4",
        "kr": "myeong",
        "vn": "minh",
        "jp_go": "myou",
        "jp_kan": "mei",
        "jp_tou": "min",
        "jp_other": "akira",
    },
    {
        "unicode": "540D",
        "mc": "mjieng",
        "pu": "ming2",
        "ct": "meng4,ming4",
        "kr": "myeong",
        "vn": "danh",
        "jp_go": "myou",
        "jp_kan": "mei",
    },
    {
        "unicode": "547D",
        "mc": "mjaengh",
        "pu": "ming4",
        "ct": "meng6,ming6",
        "kr": "myeong",
        "vn": "meenhj",
        "jp_go": "myou",
        "jp_kan": "mei",
    },
    {
        "unicode": "9CF4",
        "mc": "mjaeng",
        "pu": "ming2",
        "ct": "ming4",
        "kr": "myeong",
        "vn": "minh",
        "jp_go": "myou",
        "jp_kan": "mei",
    },
    {"unicode": "6719", "mc": "mjaeng", "pu": "ming2"},
    {
        "unicode": "5B78",
        "mc": "haewk",
        "pu": "xue2",
        "ct": "hok6",
        "kr": "hak",
        "vn": "hocj",
        "jp_go": "gaku",
        "jp_kan": "kaku",
    },
    {"unicode": "5B66", "pu": "xue2", "ct": "hok6", "jp_go": "gaku", "jp_kan": "kaku"},
    {
        "unicode": "5EE3",
        "mc": "kuangx",
        "pu": "guang3",
        "ct": "gwong2",
        "kr": "gwang",
        "vn": "quangr",
        "jp_go": "kou",
        "jp_kan": "kou",
    },
    {
        "unicode": "99AC",
        "mc": "maex",
        "pu": "ma3",
        "ct": "maa5",
        "kr": "ma",
        "vn": "max",
        "jp_go": "me",
        "jp_kan": "ba",
    },
    {"unicode": "9A6C", "pu": "ma3", "ct": "maa5"},
    {
        "unicode": "4EAC",
        "mc": "kjaeng",
        "pu": "jing1",
        "ct": "ging1",
        "kr": "gyeong",
        "vn": "kinh",
        "jp_go": "kyou",
        "jp_kan": "kei",
    },
]


@pytest.fixture
def sample_records():
    """Small dictionary covering every reading column."""
    return [Record(**row) for row in SAMPLE_ROWS]


@pytest.fixture
def memory_repository(sample_records):
    return InMemoryDictionaryRepository(sample_records)


# OpenCC pairs 学/學 and 马/馬; the orthographic 朙 has to be supplied
EXTRA_VARIANTS = {"明": ("朙",), "朙": ("明",)}


@pytest.fixture
def script_rules():
    return DefaultScriptRules(variants=EXTRA_VARIANTS)


@pytest.fixture
def search_service(memory_repository, script_rules):
    return SearchService(memory_repository, rules=script_rules)


@pytest.fixture
def store_path(tmp_path: Path, sample_records) -> Path:
    """SQLite store built from the sample records."""
    path = tmp_path / "mcpdict.sqlite3"
    SqliteDictionaryWriter(path).build(sample_records)
    return path


@pytest.fixture
def sqlite_store(store_path):
    store = SqliteDictionaryStore(store_path)
    yield store
    store.close()
