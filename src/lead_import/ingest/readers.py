from __future__ import annotations

from pathlib import Path
from typing import Iterator


def read_csv_text(path: Path) -> str:
    """
    Read an uploaded CSV as text.

    `utf-8-sig` drops a leading BOM (it would otherwise stick to the first
    header), and universal newlines turn `\\r\\n` files into `\\n` lines.
    """
    with path.open("r", encoding="utf-8-sig") as f:
        return f.read()


def iter_csv_lines(text: str) -> Iterator[tuple[int, str]]:
    """
    Yields `(source_row, line)` for every non-blank line of `text`.

    Splits on `\\n` only. `source_row` is the 1-based physical line number, so
    the header is row 1 and skipped blank lines still count.
    """
    for i, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        yield i, line
