from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


class PermissionDenied(Exception):
    """The acting user may not perform this import."""


@dataclass(frozen=True, slots=True)
class Permissions:
    """
    What one user may do with contacts. Passed explicitly to whatever acts on
    the user's behalf, never read from ambient state.

    `allowed_lead_types=None` means every lead type.
    """
    contact_import: bool = True
    allowed_lead_types: frozenset[str] | None = None

    @classmethod
    def admin(cls) -> Permissions:
        """Admins have all permissions."""
        return cls(contact_import=True, allowed_lead_types=None)

    @classmethod
    def from_row(cls, *, contact_import: bool, allowed_lead_types: Iterable[object] | None) -> Permissions:
        """Build from a `permissions` table row (lead type ids may arrive as ints)."""
        allowed = None if allowed_lead_types is None else frozenset(str(t) for t in allowed_lead_types)
        return cls(contact_import=bool(contact_import), allowed_lead_types=allowed)

    def allows_lead_type(self, lead_type: str) -> bool:
        return self.allowed_lead_types is None or str(lead_type) in self.allowed_lead_types


def ensure_can_import(permissions: Permissions, lead_type: str) -> None:
    """Raise `PermissionDenied` unless `permissions` covers importing `lead_type` contacts."""
    if not permissions.contact_import:
        raise PermissionDenied("You do not have permission to import contacts.")
    if not permissions.allows_lead_type(lead_type):
        raise PermissionDenied(f"You do not have access to lead type {lead_type}.")
