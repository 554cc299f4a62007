from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Sequence

from psycopg import Connection, sql

from lead_import.parsing.types import DEFAULT_STATUS_ID, ExistingKeySet

BATCH_SIZE = 500        # config: increase or decrease.

# `contacts` columns written by an import (excluding `id`/timestamps).
CONTACT_COLUMNS: tuple[str, ...] = (
    "user_id",
    "lead_id",
    "lead_type",
    "property_address_full",
    "property_address_city",
    "property_address_state",
    "property_address_zipcode",
    "property_address_county",
    "estimated_value",
    "property_type",
    "sale_date",
    "contact_1_name",
    "contact_first_name",
    "contact_last_name",
    "contact_1_phone1",
    "contact_1_email1",
    "status",
    "status_id",
)


def fetch_existing_keys(conn: Connection, *, user_id: int) -> ExistingKeySet:
    """
    Snapshot of `(lead_id, lead_type)` for all of a user's non-deleted contacts.
    Lead types come back as text so they compare equal to CLI/CSV input.
    """
    rows = conn.execute(
        """
        SELECT lead_id, lead_type::text
        FROM contacts
        WHERE user_id = %s
          AND deleted_at IS NULL
          AND lead_id IS NOT NULL
          AND lead_type IS NOT NULL
        """,
        (user_id,),
    ).fetchall()
    return frozenset((str(r[0]), str(r[1])) for r in rows)


def lead_type_exists(conn: Connection, *, lead_type: str) -> bool:
    """Whether `lead_type` is a known `lead_types.id`."""
    if not str(lead_type).isdigit():
        return False
    row = conn.execute("SELECT 1 FROM lead_types WHERE id = %s", (int(lead_type),)).fetchone()
    return row is not None


## -- value adaptation: cleaned text -> column types

# `contacts.estimated_value` is numeric(14,2): 12 integer digits, 2 decimals.
_VALUE_LIMIT = Decimal(10) ** 12
_CENTS = Decimal("0.01")


def _to_numeric(v: str) -> Decimal | None:
    """
    `estimated_value` rounded to cents, or `None` when the cleaned text is not a
    number or does not fit the column (a phone number in the value column).
    """
    try:
        d = Decimal(v)
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite() or abs(d) >= _VALUE_LIMIT:
        return None
    d = d.quantize(_CENTS, rounding=ROUND_HALF_UP)       # as Postgres rounds numeric
    return d if abs(d) < _VALUE_LIMIT else None


def _to_date(v: str) -> date | None:
    """`YYYY-MM-DD` `sale_date`, or `None` when it is anything else."""
    try:
        return date.fromisoformat(v)
    except ValueError:
        return None


_ADAPTERS = {
    "lead_type": int,
    "estimated_value": _to_numeric,
    "sale_date": _to_date,
}


def adapt_contact_value(col: str, value: Any) -> Any:
    """Empty strings become `NULL`, typed columns are parsed best-effort."""
    if value is None or value == "":
        return None
    adapter = _ADAPTERS.get(col)
    if adapter is not None:
        return adapter(str(value))
    return value


def _contact_params(user_id: int, m: Mapping[str, Any]) -> tuple[Any, ...]:
    tup: list[Any] = []
    for c in CONTACT_COLUMNS:
        if c == "user_id":
            tup.append(user_id)
        elif c == "status_id":
            tup.append(m.get("status_id") or DEFAULT_STATUS_ID)
        else:
            tup.append(adapt_contact_value(c, m.get(c)))
    return tuple(tup)


def insert_contacts(conn: Connection, *, user_id: int, contacts: Sequence[Mapping[str, Any]]) -> int:
    """
    Bulk insert accepted contacts for `user_id`, `BATCH_SIZE` rows per `executemany`.

    `status_id` defaults to 1 (New) when a contact carries none.
    Identifiers come from the fixed `CONTACT_COLUMNS`, values are parameterized.
    Returns the inserted row count.
    """
    query = sql.SQL("INSERT INTO {tbl} ({cols}) VALUES ({vals})").format(
        tbl=sql.Identifier("contacts"),
        cols=sql.SQL(", ").join(sql.Identifier(c) for c in CONTACT_COLUMNS),
        vals=sql.SQL(", ").join(sql.Placeholder() for _ in CONTACT_COLUMNS),
    )

    params = [_contact_params(user_id, m) for m in contacts]

    with conn.cursor() as cur:
        for start in range(0, len(params), BATCH_SIZE):
            cur.executemany(query, params[start:start + BATCH_SIZE])
    return len(params)
