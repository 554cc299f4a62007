from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from lead_import.ingest.readers import iter_csv_lines
from lead_import.ingest.summary import ImportSummary
from lead_import.parsing.mapping import apply_overrides, auto_map
from lead_import.parsing.primitives import parse_csv_line
from lead_import.parsing.schema import RowExtractor
from lead_import.parsing.types import ColumnMapping, ExistingKeySet, ImportCandidate, RejectRow
from lead_import.parsing.validate import RowValidator


@dataclass(frozen=True)
class ImportResult:
    """Both halves of one import, each in original row order."""
    headers: list[str]
    mapping: ColumnMapping
    lead_type: str
    accepted: list[ImportCandidate] = field(default_factory=list)
    rejected: list[RejectRow] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.accepted) + len(self.rejected)

    def summary(self) -> ImportSummary:
        return ImportSummary(
            lead_type=self.lead_type,
            total=self.total,
            accepted=len(self.accepted),
            rejected=len(self.rejected),
            reasons=tuple(d for r in self.rejected for d in r.reason_details),
        )


def preview_mapping(text: str, overrides: Mapping[str, str | None] | None = None) -> tuple[list[str], ColumnMapping]:
    """
    Headers and the auto-mapping (plus any overrides) for a CSV, without
    touching the data rows. What a UI shows before the user commits.
    """
    first = next(iter_csv_lines(text), None)
    if first is None:
        return [], {}
    headers = parse_csv_line(first[1])
    mapping = auto_map(headers)
    if overrides:
        mapping = apply_overrides(mapping, headers, overrides)
    return headers, mapping


def run_import(
    text: str,
    *,
    lead_type: str,
    existing_keys: ExistingKeySet = frozenset(),
    mapping: ColumnMapping | None = None,
) -> ImportResult:
    """
    Parse, map, clean, validate and partition one CSV.

    - the header is the first non-blank line;
    - `mapping` defaults to `auto_map(headers)`;
    - every later non-blank line becomes exactly one accepted candidate or
      one `RejectRow`.

    Pure: no I/O, and `existing_keys` is only read. Never raises on bad data.
    """
    lines = iter_csv_lines(text)
    first = next(lines, None)
    if first is None:
        return ImportResult(headers=[], mapping={}, lead_type=lead_type)

    headers = parse_csv_line(first[1])
    if mapping is None:
        mapping = auto_map(headers)

    extractor = RowExtractor.for_headers(headers, mapping, lead_type=lead_type)
    validator = RowValidator(existing_keys=frozenset(existing_keys))

    accepted: list[ImportCandidate] = []
    rejected: list[RejectRow] = []

    for source_row, line in lines:
        row = parse_csv_line(line)
        candidate = extractor.extract(row, source_row=source_row)
        raw_payload = {h: (row[i] if i < len(row) else "") for i, h in enumerate(headers)}

        res = validator.validate(candidate, raw_payload=raw_payload)
        if isinstance(res, RejectRow):
            rejected.append(res)
        else:
            accepted.append(res)

    return ImportResult(
        headers=headers,
        mapping=dict(mapping),
        lead_type=lead_type,
        accepted=accepted,
        rejected=rejected,
    )
