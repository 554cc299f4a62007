from __future__ import annotations

import pytest

from lead_import.parsing.mapping import FIELD_SYNONYMS, MappingError, apply_overrides, auto_map, find_synonym_overlaps
from lead_import.parsing.types import TargetField


def test_canonical_headers_map_to_themselves() -> None:
    headers = [f.value for f in TargetField]
    mapping = auto_map(headers)
    assert mapping == {f: f.value for f in TargetField}


def test_match_is_case_insensitive_and_trimmed() -> None:
    mapping = auto_map(["  Estimated Value ", "EMAIL"])
    assert mapping[TargetField.estimated_value] == "  Estimated Value "
    assert mapping[TargetField.contact_1_email1] == "EMAIL"


def test_no_fuzzy_matching() -> None:
    """`Property Value!` is not a synonym, so nothing maps."""
    mapping = auto_map(["Property Value!"])
    assert TargetField.estimated_value not in mapping


def test_synonym_priority_order_wins() -> None:
    """`estimated value` outranks `value` even when `value` comes first in the file."""
    mapping = auto_map(["value", "estimated value"])
    assert mapping[TargetField.estimated_value] == "estimated value"


def test_first_header_occurrence_is_recorded() -> None:
    mapping = auto_map(["Email", "email"])
    assert mapping[TargetField.contact_1_email1] == "Email"


def test_unmatched_fields_are_absent() -> None:
    mapping = auto_map(["lead_id", "something_else"])
    assert mapping == {TargetField.lead_id: "lead_id"}


def test_shipped_synonyms_are_disjoint() -> None:
    assert find_synonym_overlaps(FIELD_SYNONYMS) == {}


def test_overlapping_synonym_table_is_refused() -> None:
    table = {
        TargetField.contact_1_name: ("name",),
        TargetField.property_type: ("type", " Name"),
    }
    assert find_synonym_overlaps(table) == {"name": [TargetField.contact_1_name, TargetField.property_type]}
    with pytest.raises(MappingError):
        auto_map(["name"], synonyms=table)


def test_overrides_replace_and_unmap() -> None:
    headers = ["lead_id", "STATUS", "Owner Status", "email"]
    mapping = auto_map(headers)
    assert mapping[TargetField.status] == "STATUS"

    out = apply_overrides(mapping, headers, {"status": "Owner Status", "contact_1_email1": None})
    assert out[TargetField.status] == "Owner Status"
    assert TargetField.contact_1_email1 not in out
    # the input mapping is untouched
    assert mapping[TargetField.contact_1_email1] == "email"


def test_override_header_must_exist() -> None:
    with pytest.raises(MappingError, match="not in the CSV"):
        apply_overrides({}, ["lead_id"], {"lead_id": "Lead Id"})


def test_override_field_must_exist() -> None:
    with pytest.raises(MappingError, match="unknown target field"):
        apply_overrides({}, ["lead_id"], {"owner_1_name": "lead_id"})
