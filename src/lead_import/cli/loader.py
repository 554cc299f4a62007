from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Mapping
from uuid import UUID

from psycopg import Connection

from lead_import.auth.permissions import Permissions, ensure_can_import
from lead_import.db.contacts import fetch_existing_keys, insert_contacts, lead_type_exists
from lead_import.db.import_runs import insert_import_run, update_import_run
from lead_import.db.reject_writers import insert_reject_rows
from lead_import.ingest.pipeline import preview_mapping, run_import
from lead_import.ingest.readers import iter_csv_lines, read_csv_text
from lead_import.ingest.summary import ImportSummary
from lead_import.parsing.types import RejectRow, TargetField

LOGGER = logging.getLogger(__name__)


def normalize_lead_type(lead_type: str) -> str:
    """`" 01 "` -> `"1"`, the same text `fetch_existing_keys` returns. Non-numeric ids are only stripped."""
    lead_type = str(lead_type).strip()
    return str(int(lead_type)) if lead_type.isdigit() else lead_type


def _log_rejects(rejects: list[RejectRow]) -> None:
    """Full per-row reject detail, for operators."""
    for r in rejects:
        LOGGER.debug(
            "row %s rejected (lead_id=%r name=%r email=%r): %s",
            r.source_row,
            r.raw_lead_id,
            r.raw_name,
            r.raw_email,
            "; ".join(r.reason_details),
        )


def import_file(
    conn: Connection,
    *,
    input_path: Path,
    lead_type: str,
    user_id: int,
    permissions: Permissions,
    overrides: Mapping[str, str | None] | None = None,
    dry_run: bool = False,
    max_rows: int | None = None,
) -> ImportSummary:
    """
    End-to-end contact import orchestrator:
      - Check the user may import this lead type, and the lead type exists,
      - Read the CSV and resolve the column mapping (auto-map + overrides),
      - Snapshot the user's existing `(lead_id, lead_type)` keys,
      - Run the import pipeline (clean, validate, dedupe),
      - Unless `dry_run`:
            - create an `import_runs` row (which is committed immediately),
            - accepted rows -> `contacts`,
            - rejected rows -> `reject_rows`,
            - update the run's `status` and counts.

    Raises `PermissionDenied`, `MappingError` or `ValueError` before any write.
    Otherwise raises only on infra related exceptions (DB issues/bad connection, etc.),
    never on invalid rows (they are rejected and reported instead).
    """
    lead_type = normalize_lead_type(lead_type)
    ensure_can_import(permissions, lead_type)
    if not lead_type_exists(conn, lead_type=lead_type):
        raise ValueError(f"Invalid lead type ID: {lead_type}")

    text = read_csv_text(input_path)

    if max_rows is not None:
        data_rows = sum(1 for _ in iter_csv_lines(text)) - 1
        if data_rows > max_rows:
            raise ValueError(f"{input_path}: {data_rows} rows exceeds the limit of {max_rows}")

    _, mapping = preview_mapping(text, overrides)
    existing = fetch_existing_keys(conn, user_id=user_id)

    result = run_import(text, lead_type=lead_type, existing_keys=existing, mapping=mapping)
    summary = replace(result.summary(), input_path=str(input_path))

    LOGGER.info(
        "Parsed %s: %s rows, %s accepted, %s rejected (mapped %s of %s fields)",
        input_path,
        summary.total,
        summary.accepted,
        summary.rejected,
        len(result.mapping),
        len(TargetField),
    )
    _log_rejects(result.rejected)

    if dry_run:
        return summary

    ## -- create run ledger, committed immediately
    run_id: UUID = insert_import_run(conn, user_id=user_id, lead_type=lead_type, input_path=input_path)
    conn.commit()

    try:
        inserted = insert_contacts(conn, user_id=user_id, contacts=[c.to_mapping() for c in result.accepted])
        insert_reject_rows(conn, run_id=run_id, rejects=result.rejected)

        ## -- run success!
        update_import_run(
            conn,
            run_id=run_id,
            status="succeeded",
            total=summary.total,
            accepted=inserted,
            rejected=summary.rejected,
        )
        conn.commit()
    except Exception:
        # revert all changes (excluding run ledger)
        conn.rollback()
        LOGGER.exception("Import run %s failed", run_id)
        ## -- Update that the run failed (and separate txn)
        update_import_run(conn, run_id=run_id, status="failed")
        conn.commit()
        raise

    LOGGER.info("Import run %s stored %s contacts", run_id, inserted)
    return replace(summary, run_id=run_id, inserted=inserted)
