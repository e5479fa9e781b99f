# routes/students.py
from fastapi import APIRouter, Body, Depends
from typing import Any, Dict, Optional
import logging

from database import Database, get_db
from errors import NotFoundError, StorageError
from models.student import StudentCreate, check_finite, merge_student, new_student, same_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/students", tags=["students"])


def find_index(students: list, id: str) -> int:
    for index, student in enumerate(students):
        if same_id(student, id):
            return index
    return -1


@router.get("")
async def get_students(db: Database = Depends(get_db)):
    try:
        data = await db.read()
    except StorageError as e:
        logger.error(f"Error in GET /api/students: {e.error or e.message}")
        raise StorageError("Error retrieving students", e.error or e.message)
    students = data["students"]
    return {"success": True, "count": len(students), "data": students}


@router.get("/{id}")
async def get_student(id: str, db: Database = Depends(get_db)):
    try:
        data = await db.read()
    except StorageError as e:
        logger.error(f"Error in GET /api/students/{id}: {e.error or e.message}")
        raise StorageError("Error retrieving student", e.error or e.message)
    index = find_index(data["students"], id)
    if index == -1:
        raise NotFoundError("Student not found")
    return {"success": True, "data": data["students"][index]}


@router.post("", status_code=201)
async def create_student(student: Optional[StudentCreate] = None, db: Database = Depends(get_db)):
    # Raises before the store is touched
    record = new_student(student)

    def append(data):
        data["students"].append(record)

    try:
        await db.update(append)
    except StorageError as e:
        logger.error(f"Error in POST /api/students: {e.error or e.message}")
        raise StorageError("Error creating student", e.error or e.message)
    logger.info(f"Created student {record['id']}")
    return {"success": True, "data": record}


@router.put("/{id}")
async def update_student(
    id: str,
    changes: Optional[Dict[str, Any]] = Body(None),
    db: Database = Depends(get_db),
):
    changes = changes or {}
    check_finite(changes)

    def merge(data):
        students = data["students"]
        index = find_index(students, id)
        if index == -1:
            raise NotFoundError("Student not found")
        students[index] = merge_student(students[index], changes)
        return students[index]

    try:
        updated = await db.update(merge)
    except StorageError as e:
        logger.error(f"Error in PUT /api/students/{id}: {e.error or e.message}")
        raise StorageError("Error updating student", e.error or e.message)
    logger.info(f"Updated student {id}")
    return {"success": True, "data": updated}


@router.delete("/{id}")
async def delete_student(id: str, db: Database = Depends(get_db)):
    def remove(data):
        students = data["students"]
        index = find_index(students, id)
        if index == -1:
            raise NotFoundError("Student not found")
        return students.pop(index)

    try:
        removed = await db.update(remove)
    except StorageError as e:
        logger.error(f"Error in DELETE /api/students/{id}: {e.error or e.message}")
        raise StorageError("Error deleting student", e.error or e.message)
    logger.info(f"Deleted student {id}")
    return {"success": True, "data": removed}
