from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional


@dataclass(frozen=True)
class Student:
    """One row of the students table. Rebuilt fresh on every read."""

    id: int
    first_name: str
    last_name: str
    birthday: Optional[date] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "birthday": self.birthday.isoformat() if self.birthday else None,
        }
