"""
Students table data access.

Writes and DDL report failure as False; reads raise DataAccessError.
"""
from __future__ import annotations

import logging
import sqlite3
from contextlib import closing, contextmanager
from datetime import date
from typing import Any, Iterator, List, Optional, Sequence

from ..domain.student import Student
from ..services.utils import date_to_sql, sql_to_date
from .table import DataAccessError, Table

logger = logging.getLogger(__name__)


class StudentRepository(Table[Student, int]):
    TABLE_NAME = "students"

    def __init__(self, conn: sqlite3.Connection):
        if conn is None:
            raise ValueError("connection_required")
        self.conn = conn

    @property
    def table_name(self) -> str:
        return self.TABLE_NAME

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        with closing(self.conn.cursor()) as cur:
            yield cur

    def _execute_write(self, op: str, sql: str, params: Sequence[Any] = ()) -> Optional[int]:
        """Run one write/DDL statement. Returns rowcount, or None if the backend failed."""
        try:
            with self._cursor() as cur:
                cur.execute(sql, params)
                return cur.rowcount
        except (sqlite3.Error, OverflowError) as e:
            # OverflowError: int outside the 64-bit range, raised before SQLite sees it
            logger.warning("%s on %s failed: %s", op, self.TABLE_NAME, e)
            return None

    def _query(self, sql: str, params: Sequence[Any] = ()) -> List[Student]:
        try:
            with self._cursor() as cur:
                cur.execute(sql, params)
                cols = [d[0] for d in cur.description]
                return [self._row_to_student(dict(zip(cols, row))) for row in cur.fetchall()]
        except (sqlite3.Error, OverflowError, ValueError, TypeError, KeyError) as e:
            raise DataAccessError(f"query on {self.TABLE_NAME} failed: {e}") from e

    @staticmethod
    def _row_to_student(row: dict) -> Student:
        return Student(
            id=int(row["id"]),
            first_name=row["firstName"],
            last_name=row["lastName"],
            birthday=sql_to_date(row["birthday"]),
        )

    def create_table(self) -> bool:
        sql = (
            f"CREATE TABLE {self.TABLE_NAME} ("
            "id INTEGER NOT NULL PRIMARY KEY,"
            "firstName TEXT NOT NULL,"
            "lastName TEXT NOT NULL,"
            "birthday DATE"
            ")"
        )
        return self._execute_write("create_table", sql) is not None

    def drop_table(self) -> bool:
        return self._execute_write("drop_table", f"DROP TABLE {self.TABLE_NAME}") is not None

    def find_by_primary_key(self, key: int) -> Optional[Student]:
        rows = self._query(f"SELECT * FROM {self.TABLE_NAME} WHERE id = ?", (key,))
        return rows[0] if rows else None

    def find_all(self) -> List[Student]:
        return self._query(f"SELECT * FROM {self.TABLE_NAME}")

    def find_by_birthday(self, birthday: date) -> List[Student]:
        try:
            bound = date_to_sql(birthday)
        except TypeError as e:
            raise DataAccessError(f"query on {self.TABLE_NAME} failed: {e}") from e
        # NULL never compares equal, so students without a birthday are never returned
        return self._query(f"SELECT * FROM {self.TABLE_NAME} WHERE birthday = ?", (bound,))

    def _write_student(self, op: str, sql: str, student: Student, key_first: bool) -> Optional[int]:
        try:
            birthday = date_to_sql(student.birthday)
        except TypeError as e:
            logger.warning("%s on %s failed: %s", op, self.TABLE_NAME, e)
            return None
        fields = (student.first_name, student.last_name, birthday)
        params = (student.id, *fields) if key_first else (*fields, student.id)
        return self._execute_write(op, sql, params)

    def save(self, student: Student) -> bool:
        n = self._write_student(
            "save", f"INSERT INTO {self.TABLE_NAME} VALUES (?,?,?,?)", student, key_first=True
        )
        return n is not None

    def update(self, student: Student) -> bool:
        n = self._write_student(
            "update",
            f"UPDATE {self.TABLE_NAME} SET firstName=?, lastName=?, birthday=? WHERE id=?",
            student,
            key_first=False,
        )
        return bool(n and n > 0)

    def delete(self, key: int) -> bool:
        n = self._execute_write("delete", f"DELETE FROM {self.TABLE_NAME} WHERE id=?", (key,))
        return bool(n and n > 0)
