import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "roster_test.db"
    # Point the package at this temp DB
    os.environ["ROSTER_DB_PATH"] = str(path)
    from roster.logs import ensure_log_schema
    from roster.services.student_svc import ensure_students_schema
    ensure_log_schema()
    ensure_students_schema()
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    from roster.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture()
def mem_conn():
    # Plain connection: no row factory, default transaction handling
    conn = sqlite3.connect(":memory:")
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Safety: only ever wipe the temp DB
    assert os.environ.get("ROSTER_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    from roster.repository import StudentRepository
    conn = sqlite3.connect(tmp_db_path)
    try:
        StudentRepository(conn).create_table()
        conn.execute("DELETE FROM students")
        conn.execute("DELETE FROM operation_log")
        conn.commit()
    finally:
        conn.close()
    yield
