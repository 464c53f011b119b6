from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from ..domain.student import Student
from ..logs import LogContext, search_operation_logs
from ..repository import DataAccessError
from ..services.student_svc import (
    create_student,
    create_table,
    delete_student,
    drop_table,
    get_student,
    list_students,
    update_student,
)

router = APIRouter()


class StudentBody(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=40)
    last_name: str = Field(..., min_length=1, max_length=40)
    birthday: Optional[date] = None


class StudentCreate(StudentBody):
    id: int


@router.get("/api/students")
def api_students_list(birthday: Optional[date] = Query(None, description="YYYY-MM-DD")):
    try:
        return {"items": list_students(birthday)}
    except DataAccessError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/students/{student_id}")
def api_student_get(student_id: int):
    try:
        item = get_student(student_id)
    except DataAccessError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if item is None:
        raise HTTPException(status_code=404, detail="student_not_found")
    return item


@router.get("/api/students/{student_id}/history")
def api_student_history(student_id: int, page: int = Query(1, ge=1), size: int = Query(20, ge=1, le=200)):
    total, items = search_operation_logs(
        None, None, None, None, page, size, entity_type="STUDENT", entity_id=student_id
    )
    return {"total": total, "items": items}


@router.post("/api/students", status_code=201)
def api_student_create(body: StudentCreate):
    log = LogContext("CREATE_STUDENT")
    try:
        create_student(Student(body.id, body.first_name, body.last_name, body.birthday), log)
        log.write("OK")
        return {"message": "ok"}
    except ValueError as ve:
        log.write("ERROR", str(ve))
        raise HTTPException(status_code=409, detail=str(ve))
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/api/students/{student_id}")
def api_student_update(student_id: int, body: StudentBody):
    log = LogContext("UPDATE_STUDENT")
    try:
        update_student(Student(student_id, body.first_name, body.last_name, body.birthday), log)
        log.write("OK")
        return {"message": "ok"}
    except ValueError as ve:
        log.write("ERROR", str(ve))
        raise HTTPException(status_code=404, detail=str(ve))
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/api/students/{student_id}")
def api_student_delete(student_id: int):
    log = LogContext("DELETE_STUDENT")
    try:
        delete_student(student_id, log)
        log.write("OK")
        return {"message": "ok"}
    except ValueError as ve:
        log.write("ERROR", str(ve))
        raise HTTPException(status_code=404, detail=str(ve))
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/students/table/create")
def api_students_table_create():
    log = LogContext("CREATE_STUDENTS_TABLE")
    ok = create_table(log)
    log.write("OK" if ok else "NOOP")
    return {"created": ok}


@router.post("/api/students/table/drop")
def api_students_table_drop():
    log = LogContext("DROP_STUDENTS_TABLE")
    ok = drop_table(log)
    log.write("OK" if ok else "NOOP")
    return {"dropped": ok}
