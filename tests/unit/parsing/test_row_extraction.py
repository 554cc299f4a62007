from __future__ import annotations

import pytest

from lead_import.parsing.mapping import MappingError, auto_map
from lead_import.parsing.schema import RowExtractor
from lead_import.parsing.types import TargetField

HEADERS = ["STATUS", "lead_id", "owner_1_name", "contact_1_name", "contact_1_email1", "estimated_value", "sale_date"]


def _extractor(headers=HEADERS, lead_type: str = "2") -> RowExtractor:
    return RowExtractor.for_headers(headers, auto_map(headers), lead_type=lead_type)


def test_mapped_values_are_cleaned() -> None:
    c = _extractor().extract(
        ["Contacted", "L-1", "Owner Name", "Jane Doe", "jane@x.com", "$1,000", "1/2/2020"],
        source_row=2,
    )
    assert c.get(TargetField.status) == "contacted"
    assert c.get(TargetField.lead_id) == "L-1"
    assert c.get(TargetField.contact_1_name) == "Jane Doe"
    assert c.get(TargetField.estimated_value) == "1000"
    assert c.get(TargetField.sale_date) == "2020-01-02"
    assert (c.contact_first_name, c.contact_last_name) == ("Jane", "Doe")
    assert c.lead_type == "2"
    assert c.source_row == 2
    assert c.status_id is None


def test_empty_cells_are_not_stored() -> None:
    c = _extractor().extract(["", "L-1", "", "Jane", "", "", ""], source_row=3)
    assert "status" not in c.values
    assert "contact_1_email1" not in c.values
    assert c.get(TargetField.contact_1_email1) == ""


def test_dash_cells_are_stored_as_empty() -> None:
    c = _extractor().extract(["", "L-1", "", "Jane", "-", "", ""], source_row=3)
    assert c.values["contact_1_email1"] == ""


def test_owner_name_fallback_uses_raw_value() -> None:
    c = _extractor().extract(["", "L-1", "JOHN Q  PUBLIC", "", "a@b.com", "", ""], source_row=4)
    assert c.get(TargetField.contact_1_name) == "JOHN Q  PUBLIC"
    assert (c.contact_first_name, c.contact_last_name) == ("JOHN", "Q PUBLIC")


def test_mapped_name_wins_over_owner() -> None:
    c = _extractor().extract(["", "L-1", "Owner", "Contact Person", "a@b.com", "", ""], source_row=4)
    assert c.get(TargetField.contact_1_name) == "Contact Person"


def test_owner_fallback_ignores_mapping() -> None:
    """`owner_1_name` is read even though no field maps to it."""
    headers = ["lead_id", "owner_1_name"]
    c = _extractor(headers).extract(["9", "Pat Lee"], source_row=2)
    assert c.get(TargetField.contact_1_name) == "Pat Lee"


def test_short_rows_read_as_empty() -> None:
    c = _extractor().extract(["new", "L-1"], source_row=5)
    assert c.get(TargetField.contact_1_name) == ""
    assert (c.contact_first_name, c.contact_last_name) == ("", "")


def test_mapping_to_unknown_header_is_refused() -> None:
    with pytest.raises(MappingError):
        RowExtractor.for_headers(["lead_id"], {TargetField.lead_id: "Lead ID"}, lead_type="1")


def test_to_mapping_has_contact_columns() -> None:
    c = _extractor().extract(["", "L-1", "", "Jane Doe", "jane@x.com", "", ""], source_row=2)
    m = c.to_mapping()
    assert m["contact_first_name"] == "Jane"
    assert m["contact_last_name"] == "Doe"
    assert m["lead_type"] == "2"
    assert m["lead_id"] == "L-1"
    assert m["status_id"] is None
