from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from .primitives import is_blank
from .types import DEFAULT_STATUS_ID, ExistingKeySet, ImportCandidate, RejectCode, RejectReason, RejectRow, TargetField

MISSING_NAME = "Missing contact name"
MISSING_EMAIL = "Missing email address"


def _duplicate_detail(lead_id: str, where: str) -> str:
    return f"Duplicate lead_id + lead_type combination ({lead_id}) - {where}"


@dataclass(slots=True)
class RowValidator:
    """
    Decide, per candidate, whether it can be imported.

    All checks always run, so a rejected row carries every reason, in order:
    - 1st: missing contact name
    - 2nd: missing email address
    - 3rd: duplicate `(lead_id, lead_type)`, either already in the store or
      already accepted earlier in this file.

    One validator per import run: `seen` is the batch's running key set.
    `existing_keys` is a read-only snapshot and is never mutated.
    """
    existing_keys: ExistingKeySet = frozenset()
    seen: set[tuple[str, str]] = field(default_factory=set)

    def validate(
        self,
        candidate: ImportCandidate,
        *,
        raw_payload: Mapping[str, Any] | None = None,
    ) -> ImportCandidate | RejectRow:
        """Returns the accepted candidate (with `status_id` set), or a `RejectRow`."""
        reasons: list[RejectReason] = []

        name = candidate.get(TargetField.contact_1_name)
        email = candidate.get(TargetField.contact_1_email1)
        lead_id = candidate.get(TargetField.lead_id)

        if is_blank(name):
            reasons.append(RejectReason(RejectCode.missing_name, MISSING_NAME))
        if is_blank(email):
            reasons.append(RejectReason(RejectCode.missing_email, MISSING_EMAIL))

        if lead_id and candidate.lead_type:
            key = (lead_id, candidate.lead_type)
            if key in self.existing_keys:
                reasons.append(
                    RejectReason(RejectCode.duplicate_existing, _duplicate_detail(lead_id, "already exists in database"))
                )
            elif key in self.seen:
                reasons.append(
                    RejectReason(RejectCode.duplicate_in_file, _duplicate_detail(lead_id, "appears multiple times in CSV"))
                )
            elif not reasons:
                # only rows that will actually be imported claim the key
                self.seen.add(key)

        if reasons:
            return RejectRow(
                source_row=candidate.source_row,
                raw_name=name,
                raw_email=email,
                raw_lead_id=lead_id,
                reasons=tuple(reasons),
                raw_payload=dict(raw_payload or {}),
            )

        return replace(candidate, status_id=DEFAULT_STATUS_ID)
