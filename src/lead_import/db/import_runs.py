from __future__ import annotations

from pathlib import Path
from typing import Literal
from uuid import UUID

from psycopg import Connection


RunStatus = Literal["running", "succeeded", "failed"]   # injected in


def insert_import_run(conn: Connection, *, user_id: int, lead_type: str, input_path: Path) -> UUID:
    """
    Create an `import_runs` row, returns `run_id`.

    Committed by the caller immediately. The run ledger will persist even if later steps error.
    """
    row = conn.execute(
        """
        INSERT INTO import_runs (user_id, lead_type, input_path, status)
        VALUES (%s, %s, %s, 'running')
        RETURNING run_id
        """,
        (user_id, int(lead_type), str(input_path)),
    ).fetchone()
    assert row is not None
    return row[0]       # return only `run_id`


def update_import_run(
    conn: Connection,
    *,
    run_id: UUID,
    status: RunStatus,
    total: int | None = None,
    accepted: int | None = None,
    rejected: int | None = None,
) -> None:
    """Updates the status (and, once known, the counts) of an `import_runs` row."""
    conn.execute(
        """
        UPDATE import_runs
        SET status = %s,
            total = COALESCE(%s, total),
            accepted = COALESCE(%s, accepted),
            rejected = COALESCE(%s, rejected)
        WHERE run_id = %s
        """,
        (status, total, accepted, rejected, run_id),
    )
