from __future__ import annotations

from datetime import date
from typing import Any

import pandas as pd

from ..db import get_conn
from ..domain.student import Student
from ..logs import LogContext
from ..repository import StudentRepository
from .utils import parse_iso_date


def ensure_students_schema() -> bool:
    """Create the students table if missing. Returns True only when it was created now."""
    with get_conn() as conn:
        created = StudentRepository(conn).create_table()
        conn.commit()
    return created


def create_table(log: LogContext) -> bool:
    with get_conn() as conn:
        ok = StudentRepository(conn).create_table()
        conn.commit()
    log.set_entity("TABLE", StudentRepository.TABLE_NAME)
    log.set_after({"created": ok})
    return ok


def drop_table(log: LogContext) -> bool:
    with get_conn() as conn:
        ok = StudentRepository(conn).drop_table()
        conn.commit()
    log.set_entity("TABLE", StudentRepository.TABLE_NAME)
    log.set_after({"dropped": ok})
    return ok


def get_student(student_id: int) -> dict[str, Any] | None:
    with get_conn() as conn:
        s = StudentRepository(conn).find_by_primary_key(student_id)
    return s.to_dict() if s else None


def list_students(birthday: date | None = None) -> list[dict[str, Any]]:
    with get_conn() as conn:
        repo = StudentRepository(conn)
        rows = repo.find_by_birthday(birthday) if birthday else repo.find_all()
    return [s.to_dict() for s in rows]


def create_student(student: Student, log: LogContext):
    log.set_entity("STUDENT", student.id)
    log.set_payload(student.to_dict())
    with get_conn() as conn:
        ok = StudentRepository(conn).save(student)
        conn.commit()
    if not ok:
        raise ValueError("student_not_saved")
    log.set_after(student.to_dict())


def update_student(student: Student, log: LogContext):
    log.set_entity("STUDENT", student.id)
    log.set_payload(student.to_dict())
    with get_conn() as conn:
        repo = StudentRepository(conn)
        before = repo.find_by_primary_key(student.id)
        if before is None or not repo.update(student):
            raise ValueError("student_not_found")
        conn.commit()
    log.set_before(before.to_dict())
    log.set_after(student.to_dict())


def delete_student(student_id: int, log: LogContext):
    log.set_entity("STUDENT", student_id)
    with get_conn() as conn:
        repo = StudentRepository(conn)
        before = repo.find_by_primary_key(student_id)
        if before is None or not repo.delete(student_id):
            raise ValueError("student_not_found")
        conn.commit()
    log.set_before(before.to_dict())


def seed_load(csv_path: str, log: LogContext, reset: bool = False) -> dict:
    """Load students from a CSV with columns: id, first_name, last_name[, birthday].
    Rows that cannot be parsed or inserted (bad id or birthday, duplicate id,
    missing name) are counted as skipped.
    With reset=True the table is dropped and re-created first.
    """
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    missing = {"id", "first_name", "last_name"} - set(df.columns)
    if missing:
        raise ValueError(f"csv_missing_columns: {','.join(sorted(missing))}")

    inserted = 0
    skipped = 0
    with get_conn() as conn:
        repo = StudentRepository(conn)
        if reset:
            repo.drop_table()
        repo.create_table()
        for _, r in df.iterrows():
            first = str(r["first_name"]).strip()
            last = str(r["last_name"]).strip()
            if not first or not last:
                skipped += 1
                continue
            try:
                student = Student(
                    id=int(str(r["id"]).strip()),
                    first_name=first,
                    last_name=last,
                    birthday=parse_iso_date(r.get("birthday")),
                )
            except ValueError:
                # unparseable id or birthday
                skipped += 1
                continue
            if repo.save(student):
                inserted += 1
            else:
                skipped += 1
        conn.commit()

    res = {"inserted": inserted, "skipped": skipped}
    log.set_entity("TABLE", StudentRepository.TABLE_NAME)
    log.set_payload({"csv": csv_path, "reset": reset})
    log.set_after(res)
    return res
