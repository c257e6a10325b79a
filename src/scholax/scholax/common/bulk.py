from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class InsertOutcome:
    """Per-row result of a bulk insert.

    Exactly one of ``created_id`` / ``conflict`` is set. ``conflict`` names the
    unique index that rejected the row.
    """

    key: str
    created_id: Optional[int] = None
    conflict: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.created_id is not None
