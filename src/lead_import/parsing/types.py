from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class TargetField(str, Enum):
    """The fixed contact columns a CSV header can be mapped onto."""
    lead_id = "lead_id"
    property_address_full = "property_address_full"
    property_address_city = "property_address_city"
    property_address_state = "property_address_state"
    property_address_zipcode = "property_address_zipcode"
    property_address_county = "property_address_county"
    estimated_value = "estimated_value"
    property_type = "property_type"
    sale_date = "sale_date"
    contact_1_name = "contact_1_name"
    contact_1_phone1 = "contact_1_phone1"
    contact_1_email1 = "contact_1_email1"
    status = "status"


class RejectCode(str, Enum):
    """Typed rejection classifications."""
    missing_name = "missing_name"
    missing_email = "missing_email"
    duplicate_existing = "duplicate_existing"    # already in the contact store
    duplicate_in_file = "duplicate_in_file"      # earlier row of the same import


# target field -> chosen CSV header. Unmapped fields are absent.
ColumnMapping = dict[TargetField, str]

# `(lead_id, lead_type)` pairs already present in the contact store.
ExistingKeySet = frozenset[tuple[str, str]]

DEFAULT_STATUS_ID = 1       # "New" in the seeded `statuses` table


@dataclass(frozen=True, slots=True)
class ImportCandidate:
    """One mapped and cleaned CSV row on its way into `contacts`."""
    values: dict[str, str]              # cleaned values keyed by `TargetField.value`
    contact_first_name: str
    contact_last_name: str
    lead_type: str
    source_row: int                     # 1-based physical line, header is line 1
    status_id: int | None = None        # only set once the row is accepted

    def get(self, f: TargetField) -> str:
        """Cleaned value for `f`, empty string when unmapped."""
        return self.values.get(f.value, "")

    def to_mapping(self) -> Mapping[str, Any]:
        """
        Values ready for the contact store's bulk insert. Keys match the
        `contacts` column names (excluding `user_id`/`id`/timestamps).
        """
        out: dict[str, Any] = dict(self.values)
        out["contact_first_name"] = self.contact_first_name
        out["contact_last_name"] = self.contact_last_name
        out["lead_type"] = self.lead_type
        out["status_id"] = self.status_id
        return out


@dataclass(frozen=True, slots=True)
class RejectReason:
    code: RejectCode
    detail: str         # the message shown to the user


@dataclass(frozen=True, slots=True)
class RejectRow:
    """Rejected row's contents, with every reason it failed on."""
    source_row: int
    raw_name: str
    raw_email: str
    raw_lead_id: str
    reasons: tuple[RejectReason, ...]
    raw_payload: Mapping[str, Any] = field(default_factory=dict)   # header -> cell, unmutated

    @property
    def reason_details(self) -> list[str]:
        return [r.detail for r in self.reasons]
