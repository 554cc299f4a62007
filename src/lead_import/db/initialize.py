from __future__ import annotations

from pathlib import Path

import psycopg

from lead_import.db.connect import connect


def run_sql_file(conn: psycopg.Connection, sql_path: Path) -> None:
    """Read and execute a `.sql` file, then commit."""
    sql = sql_path.read_text(encoding="utf-8")

    # split on semicolons so a failing statement can be surfaced on its own.
    statements = [s.strip() for s in sql.split(";") if s.strip()]

    with conn.cursor() as cur:
        for i, stmt in enumerate(statements, 1):
            try:
                cur.execute(stmt)
            except Exception as e:
                raise RuntimeError(
                    f"DB init failed in {sql_path} on statement #{i}\n"
                    f"Postgres raised with: {e}\n"
                    f"--- statement ---\n{stmt}\n--- end ---\n"
                ) from e
    conn.commit()


def db_init(*, sql_path: Path, database_url: str | None = None) -> list[Path]:
    """
    Initialize (or re-initialize) the contact store schema.

    - If `sql_path` is a dir, run all `*.sql` files sorted ASC.
    - If `sql_path` is just one file, it will run just that file.

    Returns the files that were run.
    """
    files = sorted(sql_path.glob("*.sql")) if sql_path.is_dir() else [sql_path]
    with connect(database_url) as conn:
        for p in files:
            run_sql_file(conn, p)
    return files
