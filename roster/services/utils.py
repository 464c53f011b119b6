from __future__ import annotations

# roster/services/utils.py
from datetime import date, datetime
from typing import Optional


def date_to_sql(d: Optional[date]) -> Optional[str]:
    """Bind form of a birthday: ISO text, or None for NULL."""
    if d is None:
        return None
    if isinstance(d, datetime):
        d = d.date()
    if not isinstance(d, date):
        raise TypeError(f"birthday must be a date, got {type(d).__name__}")
    return d.isoformat()


def sql_to_date(v) -> Optional[date]:
    """Read form of a birthday column: accepts NULL, ISO text or a driver-converted date."""
    if v is None:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, bytes):
        v = v.decode("utf-8")
    s = str(v).strip()
    if not s:
        return None
    return date.fromisoformat(s[:10])


def parse_iso_date(s: Optional[str]) -> Optional[date]:
    if s is None or str(s).strip() == "":
        return None
    return date.fromisoformat(str(s).strip())
