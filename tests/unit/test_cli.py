"""Tests for the mcpdict-search command line."""

import json

import pytest

from mcpdict_search import cli


pytestmark = pytest.mark.unit

SOURCE_CSV = """unicode,mc,pu,ct,jp_go,jp_kan
明,mjaeng,ming2,ming4,myou,mei
名,mjieng,ming2,"meng4,ming4",myou,mei
學,haewk,xue2,hok6,gaku,kaku
学,,xue2,hok6,gaku,kaku
馬,maex,ma3,maa5,me,ba
"""


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: calls.append((args, kwargs)))
    return calls


@pytest.fixture(autouse=True)
def telemetry_services(monkeypatch):
    names = {"tracing": [], "metrics": []}
    monkeypatch.setattr(cli, "init_tracing", lambda service_name: names["tracing"].append(service_name))
    monkeypatch.setattr(cli, "init_metrics", lambda service_name: names["metrics"].append(service_name))
    return names


@pytest.fixture
def built_store(tmp_path):
    source = tmp_path / "chars.csv"
    source.write_text(SOURCE_CSV, encoding="utf-8")
    db = tmp_path / "mcpdict.sqlite3"
    assert cli.main(["build", str(source), "--db", str(db)]) == cli.EXIT_OK
    return db


def _json_lines(output):
    return [json.loads(line) for line in output.splitlines() if line.strip()]


def test_build_reports_count(tmp_path, capsys):
    source = tmp_path / "chars.csv"
    source.write_text(SOURCE_CSV, encoding="utf-8")

    code = cli.main(["build", str(source), "--db", str(tmp_path / "out.sqlite3")])

    assert code == cli.EXIT_OK
    assert "Wrote 5 records" in capsys.readouterr().out


def test_build_missing_source(tmp_path, capsys):
    code = cli.main(["build", str(tmp_path / "missing.csv"), "--db", str(tmp_path / "out.sqlite3")])

    assert code == cli.EXIT_FAILURE
    assert "Build failed" in capsys.readouterr().out


def test_query_json_output(built_store, capsys):
    code = cli.main(["query", "ming2", "--mode", "pu", "--db", str(built_store), "--json"])

    rows = _json_lines(capsys.readouterr().out)
    assert code == cli.EXIT_OK
    assert [row["char"] for row in rows] == ["名", "明"]
    assert rows[1] == {
        "char": "明",
        "rank": 0,
        "unicode": "660E",
        "mc": "mjaeng",
        "pu": "ming2",
        "ct": "ming4",
        "jp_go": "myou",
        "jp_kan": "mei",
    }


def test_query_table_output(built_store, capsys):
    code = cli.main(["query", "學", "--mode", "hz", "--db", str(built_store)])

    output = capsys.readouterr().out
    assert code == cli.EXIT_OK
    assert "U+5B66" in output
    assert "U+5B78" in output
    assert "2 result(s)" in output


def test_query_flags_override_settings(built_store, capsys):
    code = cli.main(
        ["query", "学", "--mode", "hz", "--db", str(built_store), "--no-variants", "--json"],
    )
    assert code == cli.EXIT_OK
    assert [row["char"] for row in _json_lines(capsys.readouterr().out)] == ["学"]

    cli.main(["query", "学", "--mode", "hz", "--db", str(built_store), "--mc-only", "--json"])
    assert [row["char"] for row in _json_lines(capsys.readouterr().out)] == ["學"]

    cli.main(["query", "ming", "--mode", "pu", "--db", str(built_store), "--tone-insensitive", "--json"])
    assert [row["char"] for row in _json_lines(capsys.readouterr().out)] == ["名", "明"]


def test_negated_flags_override_enabled_settings(built_store, capsys, monkeypatch):
    monkeypatch.setenv("MCPDICT_TONE_INSENSITIVE", "true")
    monkeypatch.setenv("MCPDICT_KUANGX_YONH_ONLY", "true")

    cli.main(["query", "ming4", "--mode", "pu", "--db", str(built_store), "--json"])
    assert [row["char"] for row in _json_lines(capsys.readouterr().out)] == ["名", "明"]

    cli.main(["query", "ming4", "--mode", "pu", "--db", str(built_store), "--no-tone-insensitive", "--json"])
    assert _json_lines(capsys.readouterr().out) == []

    cli.main(["query", "学", "--mode", "hz", "--db", str(built_store), "--json"])
    assert [row["char"] for row in _json_lines(capsys.readouterr().out)] == ["學"]

    cli.main(["query", "学", "--mode", "hz", "--db", str(built_store), "--no-mc-only", "--json"])
    assert [row["char"] for row in _json_lines(capsys.readouterr().out)] == ["学", "學"]

def test_query_uses_settings_for_store_and_mode(built_store, capsys, monkeypatch):
    monkeypatch.setenv("MCPDICT_DICTIONARY_PATH", str(built_store))
    monkeypatch.setenv("MCPDICT_DEFAULT_MODE", "jp_any")

    code = cli.main(["query", "ba", "--json"])

    assert code == cli.EXIT_OK
    assert [row["char"] for row in _json_lines(capsys.readouterr().out)] == ["馬"]


def test_query_cantonese_system(built_store, capsys):
    cli.main(["query", "hok9", "--mode", "ct", "--cantonese", "cantonese_pinyin", "--db", str(built_store), "--json"])

    assert [row["char"] for row in _json_lines(capsys.readouterr().out)] == ["学", "學"]


def test_query_zero_matches_is_success(built_store, capsys):
    code = cli.main(["query", "guang3", "--mode", "pu", "--db", str(built_store)])

    assert code == cli.EXIT_OK
    assert "0 result(s)" in capsys.readouterr().out


def test_query_no_query_exit_code(built_store, capsys):
    code = cli.main(["query", "!!!", "--mode", "pu", "--db", str(built_store)])

    assert code == cli.EXIT_NO_QUERY
    assert "No query" in capsys.readouterr().out


def test_query_store_failure_exit_code(tmp_path, capsys):
    code = cli.main(["query", "明", "--mode", "hz", "--db", str(tmp_path / "missing.sqlite3")])

    assert code == cli.EXIT_FAILURE
    assert "Dictionary store failure" in capsys.readouterr().out


def test_query_without_store_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["query", "明", "--mode", "hz"])

    assert excinfo.value.code == 2


def test_query_unknown_mode_is_usage_error(built_store):
    with pytest.raises(SystemExit):
        cli.main(["query", "明", "--mode", "klingon", "--db", str(built_store)])


def test_explain_does_not_need_a_store(capsys):
    code = cli.main(["query", "mei ba", "--mode", "jp_any", "--explain", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert code == cli.EXIT_OK
    assert payload["tokens"] == ["mei", "ba"]
    assert payload["probes"][0] == [0, "jp_go", "mei"]
    assert len(payload["probes"]) == 10


def test_explain_table_and_no_query(capsys):
    assert cli.main(["query", "明", "--mode", "hz", "--explain"]) == cli.EXIT_OK
    assert "660E" in capsys.readouterr().out

    assert cli.main(["query", "abc", "--mode", "hz", "--explain"]) == cli.EXIT_NO_QUERY


def test_invalid_configuration(monkeypatch, capsys):
    monkeypatch.setenv("MCPDICT_CANTONESE_ROMANIZATION", "wade-giles")

    assert cli.main(["query", "明", "--explain"]) == cli.EXIT_FAILURE
    assert "Invalid configuration" in capsys.readouterr().out


def test_logging_configured_from_settings(monkeypatch, logging_calls):
    monkeypatch.setenv("MCPDICT_LOG_LEVEL", "debug")
    monkeypatch.setenv("MCPDICT_LOG_JSON", "true")

    cli.main(["query", "明", "--explain"])

    assert logging_calls == [(("debug", True), {})]


def test_telemetry_uses_configured_service_name(monkeypatch, telemetry_services):
    monkeypatch.setenv("MCPDICT_SERVICE_NAME", "dictionary-kiosk")

    cli.main(["query", "明", "--explain"])

    assert telemetry_services == {"tracing": ["dictionary-kiosk"], "metrics": ["dictionary-kiosk"]}


def test_query_metrics_go_to_stderr(built_store, capsys):
    code = cli.main(["query", "ming2", "--mode", "pu", "--db", str(built_store), "--json", "--metrics"])

    captured = capsys.readouterr()
    assert code == cli.EXIT_OK
    assert "searches_total" in captured.err
    assert "search_latency_seconds" in captured.err
    assert all(json.loads(line) for line in captured.out.splitlines())


def test_query_metrics_written_on_store_failure(tmp_path, capsys):
    code = cli.main(["query", "明", "--mode", "hz", "--db", str(tmp_path / "missing.sqlite3"), "--metrics"])

    assert code == cli.EXIT_FAILURE
    assert "searches_total" in capsys.readouterr().err
