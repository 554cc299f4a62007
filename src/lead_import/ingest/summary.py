from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
from uuid import UUID

Outcome = Literal["success", "warning", "error"]


@dataclass(frozen=True)
class ImportSummary:
    """Counts and a reason sample for reporting one import back to a user."""
    lead_type: str
    total: int
    accepted: int
    rejected: int
    reasons: tuple[str, ...] = ()       # every reject reason, in row order
    run_id: UUID | None = None
    input_path: str | None = None
    inserted: int | None = None         # rows written to the store (None on dry runs)

    @property
    def outcome(self) -> Outcome:
        """
        `success`: nothing rejected. `error`: nothing accepted (an empty file
        included). `warning`: a mix of both.
        """
        if self.accepted == 0:
            return "error"
        if self.rejected == 0:
            return "success"
        return "warning"

    def sample_reasons(self, limit: int = 3) -> list[str]:
        """Distinct reasons, first seen first."""
        out: list[str] = []
        for r in self.reasons:
            if r not in out:
                out.append(r)
                if len(out) >= limit:
                    break
        return out

    def render_one_line(self) -> str:
        """How each line of summary is formatted for the terminal."""
        line = f"lead_type={self.lead_type}: total={self.total} accepted={self.accepted} rejected={self.rejected}"
        if self.inserted is not None:
            line += f" inserted={self.inserted}"
        if self.run_id is not None:
            line += f" run_id={self.run_id}"
        return line

    def render_notification(self) -> str:
        """The user-facing message for this import's outcome."""
        if self.outcome == "success":
            return f"Successfully imported {self.accepted} contact(s)."

        sample = "; ".join(self.sample_reasons())
        if self.outcome == "error":
            if self.total == 0:
                return "No contacts found in the file."
            return f"No contacts imported. {self.rejected} row(s) rejected: {sample}"
        return f"Imported {self.accepted} contact(s), skipped {self.rejected} row(s): {sample}"
