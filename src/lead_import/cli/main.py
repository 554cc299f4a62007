from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lead_import.auth.permissions import PermissionDenied
from lead_import.cli.loader import import_file
from lead_import.db.connect import connect
from lead_import.db.initialize import db_init
from lead_import.db.permissions import fetch_permissions
from lead_import.ingest.pipeline import preview_mapping
from lead_import.ingest.readers import read_csv_text
from lead_import.parsing.mapping import MappingError
from lead_import.parsing.types import TargetField


def _parse_overrides(pairs: list[str]) -> dict[str, str | None]:
    """`["status=STATUS", "sale_date="]` -> `{"status": "STATUS", "sale_date": None}`."""
    out: dict[str, str | None] = {}
    for p in pairs:
        name, sep, header = p.partition("=")
        if not sep:
            raise MappingError(f"--map expects FIELD=HEADER, got {p!r}")
        out[name.strip()] = header.strip() or None
    return out


def main(argv: list[str] | None = None) -> int:
    """
    A CLI for importing contact CSVs into the contact store.

    The `cmd` options are:
    ## map:
    Show which CSV header each contact field would be read from.
    - `--input` as the path to the CSV
    - `--map FIELD=HEADER` (repeatable) to preview an override

    ## import:
    Import a CSV for one user and one lead type.
    - `--input`, `--lead-type`, `--user-id` are required
    - `--role admin` skips the per-user permission lookup
    - `--map FIELD=HEADER` overrides the auto-mapping (`FIELD=` unmaps a field)
    - `--dry-run` validates against the store without writing anything
    - `--max-rows` refuses files with more data rows than this

    A results summary and the user-facing notification print upon completion.

    ### Example import usage:
    - `leads import --input probate.csv --lead-type 1 --user-id 7`

    ## db:
    - `init` runs the schema SQL (`--sql` file or directory).
    """
    p = argparse.ArgumentParser(prog="leads")
    p.add_argument("--log-level", default="INFO", help="Logging level (e.g. DEBUG, INFO, WARNING)")
    sub = p.add_subparsers(dest="cmd", required=True)

    # map cmd
    map_p = sub.add_parser("map", help="Preview the column auto-mapping for a CSV.")
    map_p.add_argument("--input", required=True, help="Path to the CSV file.")
    map_p.add_argument("--map", action="append", default=[], metavar="FIELD=HEADER", help="Override one field's header.")

    # import cmd
    imp = sub.add_parser("import", help="Import a CSV of contacts (with rejects).")
    imp.add_argument("--input", required=True, help="Path to the CSV file.")
    imp.add_argument("--lead-type", required=True, help="Lead type id stamped on every imported contact.")
    imp.add_argument("--user-id", required=True, type=int, help="Owner of the imported contacts.")
    imp.add_argument("--role", choices=["admin", "client"], default="client")
    imp.add_argument("--map", action="append", default=[], metavar="FIELD=HEADER", help="Override one field's header.")
    imp.add_argument("--dry-run", action="store_true", help="Validate only, write nothing.")
    imp.add_argument("--max-rows", type=int, default=None)

    # db cmd
    db = sub.add_parser("db", help="Database utilities.")
    db_sub = db.add_subparsers(dest="db_cmd", required=True)

    db_init_p = db_sub.add_parser("init", help="Initialize DB schema from SQL file(s).")
    db_init_p.add_argument("--sql", default="sql", help="Path to schema SQL file OR a directory of `.sql` files.")

    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    try:
        if args.cmd == "map":
            headers, mapping = preview_mapping(read_csv_text(Path(args.input)), _parse_overrides(args.map))
            print(f"headers: {len(headers)}")
            for f in TargetField:
                print(f"{f.value:<26} <- {mapping.get(f, '-')}")
            return 0

        if args.cmd == "import":
            overrides = _parse_overrides(args.map)
            with connect() as conn:
                permissions = fetch_permissions(conn, user_id=args.user_id, role=args.role)
                summary = import_file(
                    conn,
                    input_path=Path(args.input),
                    lead_type=args.lead_type,
                    user_id=args.user_id,
                    permissions=permissions,
                    overrides=overrides,
                    dry_run=args.dry_run,
                    max_rows=args.max_rows,
                )

            print(summary.render_one_line())
            print(f"[{summary.outcome}] {summary.render_notification()}")
            return 0

    except (MappingError, PermissionDenied, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.cmd == "db" and args.db_cmd == "init":
        files = db_init(sql_path=Path(args.sql))
        print(f"Initialized schema from {args.sql} ({len(files)} file(s))")
        return 0

    return 2


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
