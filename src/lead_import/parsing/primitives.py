from __future__ import annotations

from typing import Any

from .types import TargetField


# cells that mean "no value" in vendor exports
_NULL_STRINGS = {"", "-"}

# vendor status strings -> our status vocabulary. Anything else is `new`.
_STATUS_MAP: dict[str, str] = {
    "processed": "new",
    "failed": "new",
    "new prospect": "new",
    "contacted": "contacted",
    "qualified": "qualified",
    "negotiating": "negotiating",
    "closed": "closed",
}
DEFAULT_STATUS = "new"


## -- CSV lines

def parse_csv_line(line: str) -> list[str]:
    """
    Split one CSV line into trimmed cells.

    Double quotes toggle quoted mode and are dropped from the output; a comma
    only ends a cell outside quotes. An unmatched quote keeps the rest of the
    line in quoted mode (no error is raised).
    """
    cells: list[str] = []
    buf: list[str] = []
    in_quotes = False

    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            cells.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)

    cells.append("".join(buf).strip())
    return cells


def is_blank(v: Any) -> bool:
    """`None`, empty, or whitespace only."""
    return v is None or str(v).strip() == ""


## -- per-field cleaning

def clean_estimated_value(s: str) -> str:
    """`"$1,250,000"` -> `"1250000"`. Stays text, the store parses the number."""
    return s.replace("$", "").replace(",", "").strip()


def clean_sale_date(s: str) -> str:
    """
    `M/D/YYYY` -> `YYYY-MM-DD` with zero-padded month and day.
    Values without `/` or without exactly three parts are returned unchanged.
    """
    if "/" not in s:
        return s
    parts = s.split("/")
    if len(parts) != 3:
        return s
    month, day, year = parts
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def clean_status(s: str) -> str:
    """Case-insensitive vendor status lookup, defaulting to `new`."""
    return _STATUS_MAP.get(s.lower(), DEFAULT_STATUS)


_CLEANERS = {
    TargetField.estimated_value: clean_estimated_value,
    TargetField.sale_date: clean_sale_date,
    TargetField.status: clean_status,
}


def clean_value(value: str | None, field: TargetField) -> str:
    """
    Normalize one raw cell for its target field.

    `None`, `""` and `"-"` always clean to `""`, before any field rule runs.
    Fields without a rule pass through unchanged.
    """
    if value is None or value in _NULL_STRINGS:
        return ""
    cleaner = _CLEANERS.get(TargetField(field))
    if cleaner is None:
        return value
    return cleaner(value)


## -- names

def split_name(name: str) -> tuple[str, str]:
    """
    `"Jane Q Doe"` -> `("Jane", "Q Doe")`: first whitespace token, then the rest
    joined by single spaces. Empty names give `("", "")`.
    """
    parts = name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])
