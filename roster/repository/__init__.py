"""Repository layer: DB access for the students table (SQLite).

Keep it thin, so services avoid SQL strings.
"""
from __future__ import annotations

from .table import DataAccessError, Table
from .students_repo import StudentRepository

__all__ = ["DataAccessError", "Table", "StudentRepository"]
