"""Command line entry point for building dictionary stores and running searches.

Usage:
    # Build a store from a CSV/TSV export
    mcpdict-search build characters.tsv --db mcpdict.sqlite3

    # Search by ideograph, variants included
    mcpdict-search query 明 --mode hz --db mcpdict.sqlite3

    # Toneless Mandarin, every tone matched, JSON lines output
    mcpdict-search query ming --mode pu --tone-insensitive --json

    # Override a tone-insensitive default for one query, print metrics to stderr
    mcpdict-search query ming2 --mode pu --no-tone-insensitive --metrics

    # Show how the input is interpreted without opening the store
    mcpdict-search query "ming2 xue" --mode pu --explain

Exit codes: 0 on success (zero matches included), 1 on a store or input
failure, 2 when no usable token was found in the query.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
import sys

import orjson
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mcpdict_search.adapters.dictionary_repository import DictionaryStoreError
from mcpdict_search.config import Settings
from mcpdict_search.domain.search import Column, NoQuery, ResultRow, SearchMode, SearchOptions
from mcpdict_search.observability.logging import configure_logging
from mcpdict_search.observability.metrics import get_metrics, init_metrics
from mcpdict_search.observability.tracing import init_tracing
from mcpdict_search.orthography.base import CantoneseRomanization
from mcpdict_search.search.plan import columns_for_mode
from mcpdict_search.search.sqlite_storage import SqliteDictionaryStore, SqliteDictionaryWriter, load_records
from mcpdict_search.service_layer.search_service import QueryExplanation, SearchService, explain_query


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_QUERY = 2

# Columns always shown next to the searched ones
_SUMMARY_COLUMNS = (Column.MIDDLE_CHINESE, Column.MANDARIN, Column.CANTONESE)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcpdict-search",
        description="Look up Chinese characters by ideograph or by reading.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build a dictionary store from a CSV/TSV export")
    build.add_argument("source", help="CSV or TSV file with a header row naming the columns")
    build.add_argument("--db", required=True, help="Path of the store to write")

    query = subparsers.add_parser("query", help="Search the dictionary")
    query.add_argument("text", help="Query text: ideographs or readings")
    query.add_argument(
        "--mode",
        help="Search mode: hz, mc, pu, ct, kr, vn, jp_go, jp_kan, jp_any (default from settings)",
    )
    query.add_argument("--db", help="Dictionary store (default: MCPDICT_DICTIONARY_PATH)")
    query.add_argument(
        "--variants",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Expand ideographs to their variant forms",
    )
    query.add_argument(
        "--tone-insensitive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Match every tone of each reading",
    )
    query.add_argument(
        "--mc-only",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Only return characters with a Middle Chinese reading",
    )
    query.add_argument(
        "--cantonese",
        choices=[system.value for system in CantoneseRomanization],
        help="Romanization used for Cantonese input",
    )
    query.add_argument("--explain", action="store_true", help="Print tokens, keywords and probes; skip the store")
    query.add_argument("--json", action="store_true", help="Emit one JSON object per result")
    query.add_argument("--metrics", action="store_true", help="Write Prometheus metrics to stderr after the search")
    return parser


def _options_from(args: argparse.Namespace, settings: Settings) -> SearchOptions:
    overrides = {
        "expand_variants": args.variants,
        "tone_insensitive": args.tone_insensitive,
        "restrict_to_middle_chinese": args.mc_only,
        "cantonese_romanization": CantoneseRomanization(args.cantonese) if args.cantonese else None,
    }
    return settings.search_options().model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )


def _row_payload(row: ResultRow) -> dict:
    return {
        "char": row.record.character,
        "rank": row.rank,
        **row.record.model_dump(mode="json", exclude_none=True),
    }


def _render_rows(console: Console, rows: list[ResultRow], mode: SearchMode) -> None:
    columns = list(_SUMMARY_COLUMNS)
    for column in columns_for_mode(mode):
        if column not in columns and column is not Column.UNICODE:
            columns.append(column)

    table = Table(title=f"{len(rows)} result(s)")
    table.add_column("Char", style="bold")
    table.add_column("Code")
    table.add_column("Rank", justify="right")
    for column in columns:
        table.add_column(column.value)

    for row in rows:
        table.add_row(
            row.record.character,
            f"U+{row.record.unicode}",
            str(row.rank),
            *(row.record.value(column) or "" for column in columns),
        )
    console.print(table)


def _render_explanation(console: Console, explanation: QueryExplanation) -> None:
    console.print(f"[bold]Mode:[/bold] {explanation.mode.value}")
    console.print(f"[bold]Tokens:[/bold] {', '.join(token.text for token in explanation.tokens) or '(none)'}")

    table = Table(title=f"{len(explanation.plan)} probe(s)")
    table.add_column("Rank", justify="right")
    table.add_column("Column")
    table.add_column("Term")
    for entry in explanation.plan:
        table.add_row(str(entry.rank), entry.column.value, entry.term)
    console.print(table)


def _run_build(args: argparse.Namespace, console: Console) -> int:
    try:
        count = SqliteDictionaryWriter(args.db).build(load_records(args.source))
    except (DictionaryStoreError, OSError, ValueError) as exc:
        console.print(f"[red]Build failed: {escape(str(exc))}[/red]")
        return EXIT_FAILURE
    console.print(f"[green]Wrote {count} records to {escape(str(args.db))}[/green]")
    return EXIT_OK


def _run_query(args: argparse.Namespace, settings: Settings, console: Console, parser: argparse.ArgumentParser) -> int:
    try:
        mode = SearchMode.parse(args.mode) if args.mode else settings.default_mode
    except ValueError as exc:
        parser.error(str(exc))
    options = _options_from(args, settings)

    if args.explain:
        explanation = explain_query(args.text, mode, options)
        if args.json:
            print(
                orjson.dumps(
                    {
                        "mode": explanation.mode.value,
                        "tokens": [token.text for token in explanation.tokens],
                        "probes": [[entry.rank, entry.column.value, entry.term] for entry in explanation.plan],
                    }
                ).decode("utf-8")
            )
        else:
            _render_explanation(console, explanation)
        return EXIT_NO_QUERY if explanation.is_no_query else EXIT_OK

    db_path = args.db or settings.dictionary_path
    if db_path is None:
        parser.error("no dictionary store given; pass --db or set MCPDICT_DICTIONARY_PATH")

    try:
        with SqliteDictionaryStore(db_path) as store:
            outcome = SearchService(store).search(args.text, mode, options)
    except DictionaryStoreError as exc:
        console.print(f"[red]Dictionary store failure: {escape(str(exc))}[/red]")
        return EXIT_FAILURE
    finally:
        if args.metrics:
            sys.stderr.write(get_metrics().decode("utf-8"))

    if isinstance(outcome, NoQuery):
        console.print(f"[yellow]No query: {escape(outcome.reason)}[/yellow]")
        return EXIT_NO_QUERY

    if args.json:
        for row in outcome:
            print(orjson.dumps(_row_payload(row)).decode("utf-8"))
    else:
        _render_rows(console, outcome, mode)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    console = Console()

    try:
        settings = Settings()
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red]\n{escape(str(exc))}")
        return EXIT_FAILURE

    configure_logging(settings.log_level, settings.log_json)
    init_tracing(settings.service_name)
    init_metrics(settings.service_name)

    if args.command == "build":
        return _run_build(args, console)
    return _run_query(args, settings, console, parser)


if __name__ == "__main__":
    sys.exit(main())
