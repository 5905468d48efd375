from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from inspection_rollup.config.loader import ConfigError, EngineConfig, default_config, load_config
from inspection_rollup.logging.init import log_summary, setup_logging
from inspection_rollup.models.document import RowStatus
from inspection_rollup.models.filter_state import FilterState
from inspection_rollup.services.engine import run_query
from inspection_rollup.services.export import ExportError, export_rows
from inspection_rollup.services.row_status import RowRef, bulk_set_status, missing_refs, toggle_fix
from inspection_rollup.services.summary import render_summary_line, render_unit_line
from inspection_rollup.services.targets import set_target
from inspection_rollup.store.blob_store import JsonBlobStore, StoreError, StoreState

"""CLI entrypoint.

Flow:
- Load config (--config, else $ROLLUP_CONFIG after reading .env, else defaults)
- Load the JSON store
- Apply mutation commands (row status, remediation flag, targets) and save
- Run the query with the given filter and print UNIT lines + SUMMARY
- Optionally export the filtered table (.csv / .xlsx)
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2  # mutation skipped unknown rows

CONFIG_ENV = "ROLLUP_CONFIG"


def _load_env_file(path: Path) -> None:
    """Load .env without overriding variables already set in the process."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Inspection report row roll-up")
    p.add_argument("--store", required=True, help="JSON store with documents and targets")
    p.add_argument("--config", help=f"YAML engine config (default: ${CONFIG_ENV})")
    p.add_argument("--unit", help="Only this unit (default: all)")
    p.add_argument("--category", help="Only documents of this category (default: all)")
    p.add_argument("--year", help="Only this year (default: all)")
    p.add_argument("--month", help="Only this month 1-12 (default: all)")
    p.add_argument("--text", help="Free-text filter over cells, unit and title")
    p.add_argument("--no-dedupe", action="store_true", help="Keep duplicate rows across documents")
    p.add_argument("--export", help="Write filtered rows to .csv or .xlsx")
    p.add_argument(
        "--set-status",
        choices=[s.value for s in RowStatus],
        help="Set this status on every --row",
    )
    p.add_argument("--row", action="append", default=[], metavar="DOC:IDX", help="Row for --set-status")
    p.add_argument(
        "--toggle-fix", action="append", default=[], metavar="DOC:IDX", help="Flip the remediation flag"
    )
    p.add_argument(
        "--target",
        action="append",
        nargs=3,
        default=[],
        metavar=("YEAR", "UNIT", "METERS"),
        help="Set an annual target",
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config(arg_path: str | None) -> EngineConfig:
    path = arg_path or os.getenv(CONFIG_ENV)
    if not path:
        return default_config()
    return load_config(Path(path))


def main(argv: list[str] | None = None) -> int:
    # NOTE: 空リスト [] はそのまま使う (None の場合のみ sys.argv を読む)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    _load_env_file(Path(".env"))

    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    store = JsonBlobStore(Path(args.store))
    try:
        state = store.load()
    except StoreError as e:
        logger.error(f"store: {e}")
        return EXIT_FATAL

    try:
        filter_state = FilterState.create(
            unit=args.unit,
            category=args.category,
            year=args.year,
            month=args.month,
            text=args.text,
            dedupe=not args.no_dedupe,
        )
        status_refs = [RowRef.parse(r) for r in args.row]
        fix_refs = [RowRef.parse(r) for r in args.toggle_fix]
    except ValueError as e:
        logger.error(f"arguments: {e}")
        return EXIT_FATAL

    if status_refs and not args.set_status:
        logger.error("arguments: --row requires --set-status")
        return EXIT_FATAL

    documents = state.documents
    targets = state.targets
    skipped: list[RowRef] = []
    changed = False

    if args.set_status:
        skipped.extend(missing_refs(documents, status_refs))
        documents = bulk_set_status(documents, status_refs, RowStatus(args.set_status))
        changed = True
    for ref in fix_refs:
        if missing_refs(documents, [ref]):
            skipped.append(ref)
            continue
        documents = toggle_fix(documents, ref.document_id, ref.row_index)
        changed = True
    for year, unit, meters in args.target:
        targets = set_target(targets, year, unit, meters)
        changed = True

    for ref in skipped:
        logger.warning(f"row not found: {ref}")

    if changed:
        try:
            path = store.save(StoreState(documents=documents, targets=targets))
        except StoreError as e:
            logger.error(f"store: {e}")
            return EXIT_FATAL
        logger.info(f"store updated: {path}")

    result = run_query(documents, targets, filter_state, config=cfg)
    logger.info(
        f"documents={len(documents)} rows={len(result.rows)} dedupe={'on' if filter_state.dedupe else 'off'}"
    )

    if args.export:
        try:
            out = export_rows(result.rows, Path(args.export))
        except ExportError as e:
            logger.error(f"export: {e}")
            return EXIT_FATAL
        logger.info(f"exported rows={len(result.rows)} to {out}")

    for unit_stats in result.statistics.units:
        logger.info(render_unit_line(unit_stats))

    summary_line = render_summary_line(result.statistics)
    log_summary(summary_line[len("SUMMARY "):])

    return EXIT_PARTIAL if skipped else EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
