"""
StudentRepository tests: CRUD round trips, the boolean write policy and the
fatal read policy.
"""
from __future__ import annotations

import sqlite3
from datetime import date

import pytest

from roster.db import get_conn
from roster.domain.student import Student
from roster.repository import DataAccessError, StudentRepository, Table


ADA = Student(1, "Ada", "Lovelace", date(1815, 12, 10))
ALAN = Student(2, "Alan", "Turing", date(1912, 6, 23))
GRACE = Student(3, "Grace", "Hopper", None)


@pytest.fixture()
def repo(mem_conn):
    r = StudentRepository(mem_conn)
    assert r.create_table() is True
    return r


def test_requires_connection():
    with pytest.raises(ValueError):
        StudentRepository(None)


def test_is_table_with_name(repo):
    assert isinstance(repo, Table)
    assert repo.table_name == "students"


def test_create_table_twice_returns_false(repo):
    assert repo.create_table() is False


def test_drop_table(repo):
    assert repo.drop_table() is True
    # already gone: failure, not an exception
    assert repo.drop_table() is False


def test_drop_table_never_created(mem_conn):
    assert StudentRepository(mem_conn).drop_table() is False


def test_save_and_find_by_primary_key(repo):
    assert repo.save(ADA) is True
    found = repo.find_by_primary_key(1)
    assert found == ADA
    assert found.birthday == date(1815, 12, 10)
    assert repo.find_by_primary_key(2) is None


def test_save_without_birthday(repo):
    assert repo.save(GRACE) is True
    found = repo.find_by_primary_key(3)
    assert found == GRACE
    assert found.birthday is None


def test_save_duplicate_key_returns_false(repo):
    assert repo.save(ADA) is True
    assert repo.save(Student(1, "Other", "Person")) is False
    assert repo.find_by_primary_key(1) == ADA


def test_save_null_name_returns_false(repo):
    assert repo.save(Student(9, None, "Nobody")) is False
    assert repo.find_all() == []


def test_find_all(repo):
    for s in (ADA, ALAN, GRACE):
        assert repo.save(s)
    assert sorted(repo.find_all(), key=lambda s: s.id) == [ADA, ALAN, GRACE]


def test_find_all_empty(repo):
    assert repo.find_all() == []


def test_find_by_birthday(repo):
    twin = Student(4, "Augusta", "King", date(1815, 12, 10))
    for s in (ADA, ALAN, GRACE, twin):
        assert repo.save(s)
    found = repo.find_by_birthday(date(1815, 12, 10))
    assert {s.id for s in found} == {1, 4}
    assert repo.find_by_birthday(date(2000, 1, 1)) == []


def test_find_by_birthday_skips_absent_birthday(repo):
    assert repo.save(GRACE)
    assert repo.find_by_birthday(None) == []


def test_update_existing(repo):
    assert repo.save(ADA)
    changed = Student(1, "Augusta Ada", "King", None)
    assert repo.update(changed) is True
    assert repo.find_by_primary_key(1) == changed


def test_update_unknown_id(repo):
    assert repo.update(ALAN) is False
    assert repo.find_by_primary_key(2) is None


def test_update_without_table_returns_false(mem_conn):
    assert StudentRepository(mem_conn).update(ADA) is False


def test_delete(repo):
    assert repo.save(ADA)
    assert repo.save(ALAN)
    assert repo.delete(1) is True
    assert repo.find_all() == [ALAN]
    assert repo.delete(1) is False


def test_delete_unknown_id(repo):
    assert repo.delete(42) is False


def test_reads_without_table_raise(mem_conn):
    r = StudentRepository(mem_conn)
    with pytest.raises(DataAccessError):
        r.find_all()
    with pytest.raises(DataAccessError):
        r.find_by_primary_key(1)
    with pytest.raises(DataAccessError):
        r.find_by_birthday(date(1815, 12, 10))


def test_bad_stored_date_raises(repo, mem_conn):
    mem_conn.execute("INSERT INTO students VALUES (7, 'Bad', 'Date', 'not-a-date')")
    with pytest.raises(DataAccessError) as ei:
        repo.find_by_primary_key(7)
    assert isinstance(ei.value.__cause__, ValueError)


def test_data_access_error_is_runtime_error():
    assert issubclass(DataAccessError, RuntimeError)


def test_write_failure_is_logged(mem_conn, caplog):
    r = StudentRepository(mem_conn)
    with caplog.at_level("WARNING", logger="roster.repository.students_repo"):
        assert r.save(ADA) is False
    assert any("save on students failed" in rec.getMessage() for rec in caplog.records)


def test_works_with_row_factory_connection(tmp_db_path):
    with get_conn() as conn:
        assert conn.row_factory is sqlite3.Row
        r = StudentRepository(conn)
        assert r.save(ADA)
        assert r.find_by_primary_key(1) == ADA
        assert r.find_by_birthday(date(1815, 12, 10)) == [ADA]


BIG = 2 ** 63


def test_out_of_range_id_writes_return_false(repo):
    assert repo.save(Student(BIG, "Big", "Id")) is False
    assert repo.update(Student(BIG, "Big", "Id")) is False
    assert repo.delete(BIG) is False
    assert repo.find_all() == []


def test_out_of_range_id_reads_raise(repo):
    with pytest.raises(DataAccessError) as ei:
        repo.find_by_primary_key(BIG)
    assert isinstance(ei.value.__cause__, OverflowError)


def test_non_date_birthday_writes_return_false(repo):
    assert repo.save(ADA)
    assert repo.save(Student(5, "Str", "Birthday", "1815-12-10")) is False
    assert repo.update(Student(1, "Ada", "Lovelace", "1815-12-10")) is False
    assert repo.find_all() == [ADA]


def test_non_date_birthday_read_raises(repo):
    with pytest.raises(DataAccessError):
        repo.find_by_birthday("1815-12-10")


class _CursorRecorder:
    """Connection stand-in that remembers every cursor it hands out."""

    def __init__(self, conn):
        self._conn = conn
        self.cursors = []

    def cursor(self):
        cur = self._conn.cursor()
        self.cursors.append(cur)
        return cur


def _is_closed(cur) -> bool:
    try:
        cur.execute("SELECT 1")
    except sqlite3.ProgrammingError:
        return True
    return False


def test_cursors_closed_after_success(mem_conn):
    rec = _CursorRecorder(mem_conn)
    r = StudentRepository(rec)
    assert r.create_table()
    assert r.save(ADA)
    assert r.find_all() == [ADA]
    assert r.find_by_primary_key(1) == ADA
    assert len(rec.cursors) == 4
    assert all(_is_closed(c) for c in rec.cursors)


def test_cursors_closed_after_failure(mem_conn):
    rec = _CursorRecorder(mem_conn)
    r = StudentRepository(rec)
    with pytest.raises(DataAccessError):
        r.find_all()
    assert r.save(ADA) is False
    assert r.delete(BIG) is False
    assert r.drop_table() is False
    assert len(rec.cursors) == 4
    assert all(_is_closed(c) for c in rec.cursors)
