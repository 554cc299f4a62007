from __future__ import annotations

from typing import Any, Sequence
from uuid import UUID

from psycopg import Connection, sql
from psycopg.types.json import Jsonb

from lead_import.parsing.types import RejectRow


# fixed cols in `reject_rows`:
_COLS = (
    "run_id",
    "source_row",
    "lead_id",
    "contact_name",
    "contact_email",
    "reason_codes",
    "reasons",
    "raw_payload",
)


def _reject_params(run_id: UUID, r: RejectRow) -> tuple[Any, ...]:
    return (
        run_id,
        r.source_row,
        r.raw_lead_id or None,
        r.raw_name or None,
        r.raw_email or None,
        [reason.code.value for reason in r.reasons],
        Jsonb([{"code": reason.code.value, "detail": reason.detail} for reason in r.reasons]),
        Jsonb(dict(r.raw_payload)),
    )


def insert_reject_rows(conn: Connection, *, run_id: UUID, rejects: Sequence[RejectRow]) -> None:
    """
    Insert `rejects` into the DB's `reject_rows`, one row per rejected CSV line
    with all of its reasons.

    Table/column identifiers are fixed/non derived constants.
    Values are parameterized directly.
    """
    query = sql.SQL("INSERT INTO {tbl} ({cols}) VALUES ({vals})").format(
        tbl=sql.Identifier("reject_rows"),
        cols=sql.SQL(", ").join(sql.Identifier(c) for c in _COLS),
        vals=sql.SQL(", ").join(sql.Placeholder() for _ in _COLS),
    )

    params = [_reject_params(run_id, r) for r in rejects]

    if params:
        with conn.cursor() as cur:
            cur.executemany(query, params)  # sequential batch processing
