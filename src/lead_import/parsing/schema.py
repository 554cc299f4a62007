from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .mapping import MappingError
from .primitives import clean_value, split_name
from .types import ColumnMapping, ImportCandidate, TargetField

# header read when no contact name was mapped or the mapped cell is empty.
OWNER_NAME_HEADER = "owner_1_name"


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Where a target field's value lives in every row of this file."""
    field: TargetField      # internal name of this field.
    index: int              # column position of the mapped header.


def _cell(row: Sequence[str], i: int | None) -> str:
    """Cell at `i`, or `""` for short rows / missing columns."""
    if i is None or i >= len(row):
        return ""
    return row[i]


@dataclass(frozen=True, slots=True)
class RowExtractor:
    """
    Turn raw rows of one file into `ImportCandidate`s.

    Built once per import from the headers and the final `ColumnMapping`;
    column positions are resolved up front and reused for every row.
    """
    fields: Sequence[FieldSpec]
    owner_name_index: int | None
    lead_type: str

    @classmethod
    def for_headers(cls, headers: Sequence[str], mapping: ColumnMapping, *, lead_type: str) -> RowExtractor:
        """Resolve mapped headers to column positions (first occurrence)."""
        fields: list[FieldSpec] = []
        for f, header in mapping.items():
            try:
                idx = list(headers).index(header)
            except ValueError:
                raise MappingError(f"{TargetField(f).value}: header {header!r} is not in the CSV") from None
            fields.append(FieldSpec(field=TargetField(f), index=idx))

        owner_idx = list(headers).index(OWNER_NAME_HEADER) if OWNER_NAME_HEADER in headers else None
        return cls(fields=fields, owner_name_index=owner_idx, lead_type=lead_type)

    def extract(self, row: Sequence[str], *, source_row: int) -> ImportCandidate:
        """
        Clean every mapped non-empty cell, fall back to `owner_1_name` for the
        contact name, and split the name. `status_id` is left unset.
        """
        values: dict[str, str] = {}
        for spec in self.fields:
            raw = _cell(row, spec.index)
            if raw:
                values[spec.field.value] = clean_value(raw, spec.field)

        # many vendor files only name the property owner. Raw value, not cleaned.
        if not values.get(TargetField.contact_1_name.value):
            owner = _cell(row, self.owner_name_index)
            if owner:
                values[TargetField.contact_1_name.value] = owner

        first, last = split_name(values.get(TargetField.contact_1_name.value, ""))

        return ImportCandidate(
            values=values,
            contact_first_name=first,
            contact_last_name=last,
            lead_type=self.lead_type,
            source_row=source_row,
        )
