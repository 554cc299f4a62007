from __future__ import annotations

from typing import Mapping, Sequence

from .types import ColumnMapping, TargetField


class MappingError(ValueError):
    """A column mapping (or the synonym table behind it) is unusable."""


# Accepted header spellings per target field, in priority order.
# Compared lower-cased and trimmed, exact match only.
FIELD_SYNONYMS: dict[TargetField, tuple[str, ...]] = {
    TargetField.lead_id: ("lead_id", "lead id", "leadid", "id"),
    TargetField.property_address_full: (
        "property_address_full",
        "property address full",
        "property address",
        "full address",
        "street address",
        "address",
    ),
    TargetField.property_address_city: ("property_address_city", "property address city", "property city", "city"),
    TargetField.property_address_state: ("property_address_state", "property address state", "property state", "state"),
    TargetField.property_address_zipcode: (
        "property_address_zipcode",
        "property address zipcode",
        "property zip",
        "zipcode",
        "zip code",
        "zip",
        "postal code",
    ),
    TargetField.property_address_county: (
        "property_address_county",
        "property address county",
        "property county",
        "county",
    ),
    TargetField.estimated_value: (
        "estimated_value",
        "estimated value",
        "value",
        "property value",
        "estimate",
        "est value",
    ),
    TargetField.property_type: ("property_type", "property type", "type"),
    TargetField.sale_date: ("sale_date", "sale date", "last sale date", "date sold"),
    TargetField.contact_1_name: ("contact_1_name", "contact 1 name", "contact name", "full name", "name"),
    TargetField.contact_1_phone1: (
        "contact_1_phone1",
        "contact 1 phone1",
        "contact 1 phone",
        "phone1",
        "phone",
        "phone number",
        "mobile",
    ),
    TargetField.contact_1_email1: (
        "contact_1_email1",
        "contact 1 email1",
        "contact 1 email",
        "email1",
        "email",
        "email address",
    ),
    TargetField.status: ("status", "lead status", "contact status"),
}


def _norm(s: str) -> str:
    return s.strip().lower()


def find_synonym_overlaps(synonyms: Mapping[TargetField, Sequence[str]]) -> dict[str, list[TargetField]]:
    """
    Synonyms listed under more than one target field, as
    `{normalized synonym: [fields...]}`. Empty when the table is disjoint.
    """
    owners: dict[str, list[TargetField]] = {}
    for f, names in synonyms.items():
        for name in names:
            claimed = owners.setdefault(_norm(name), [])
            if f not in claimed:
                claimed.append(f)
    return {name: fields for name, fields in owners.items() if len(fields) > 1}


def auto_map(
    headers: Sequence[str],
    synonyms: Mapping[TargetField, Sequence[str]] = FIELD_SYNONYMS,
) -> ColumnMapping:
    """
    Guess a `ColumnMapping` from the CSV headers.

    For every target field, walk its synonyms in priority order; the first
    synonym equal (case-insensitive, trimmed) to some header wins, and the
    earliest such header is recorded. Fields with no match stay unmapped.

    Raises `MappingError` if two fields share a synonym, since one header
    could then be claimed twice.
    """
    overlaps = find_synonym_overlaps(synonyms)
    if overlaps:
        raise MappingError(f"synonyms claimed by more than one field: {sorted(overlaps)}")

    by_norm: dict[str, str] = {}
    for h in headers:
        by_norm.setdefault(_norm(h), h)     # first occurrence wins

    mapping: ColumnMapping = {}
    for f, names in synonyms.items():
        for name in names:
            header = by_norm.get(_norm(name))
            if header is not None:
                mapping[f] = header
                break
    return mapping


def apply_overrides(
    mapping: ColumnMapping,
    headers: Sequence[str],
    overrides: Mapping[str, str | None],
) -> ColumnMapping:
    """
    Apply human field -> header choices on top of an auto-mapping.

    - keys are target field names, values are exact header strings;
    - an empty/`None` value unmaps that field;
    - raises `MappingError` on an unknown field or a header not in `headers`.
    """
    out: ColumnMapping = dict(mapping)
    known_headers = set(headers)

    for name, header in overrides.items():
        try:
            f = TargetField(str(name).strip())
        except ValueError:
            raise MappingError(f"unknown target field: {name!r}") from None

        if header is None or header == "":
            out.pop(f, None)
            continue
        if header not in known_headers:
            raise MappingError(f"{f.value}: header {header!r} is not in the CSV")
        out[f] = header
    return out
