from __future__ import annotations

from psycopg import Connection

from lead_import.auth.permissions import Permissions


def fetch_permissions(conn: Connection, *, user_id: int, role: str = "client") -> Permissions:
    """
    Load a user's import permissions.

    Admins have all permissions. A client with no `permissions` row gets the
    table defaults (import allowed, every lead type).
    """
    if role == "admin":
        return Permissions.admin()

    row = conn.execute(
        "SELECT contact_import, allowed_lead_types FROM permissions WHERE user_id = %s",
        (user_id,),
    ).fetchone()
    if row is None:
        return Permissions()

    contact_import, allowed = row      # `jsonb` arrives already decoded
    return Permissions.from_row(contact_import=contact_import, allowed_lead_types=allowed)
