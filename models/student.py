# models/student.py
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from errors import ValidationError

# Fields the server owns; callers can't set them through the request body
PROTECTED_FIELDS = ("id", "createdAt")
TIMESTAMP_FIELDS = ("createdAt", "updatedAt")


class StudentCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    email: Optional[str] = None


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2026-10-18T09:15:02.123Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def check_finite(fields: Dict[str, Any]) -> None:
    """Reject NaN and Infinity anywhere in the payload; they can't be stored as JSON."""
    def walk(value, path):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValidationError("Invalid request body", f"{path}: non-finite numbers are not allowed")
        if isinstance(value, dict):
            for key, item in value.items():
                walk(item, f"{path}.{key}")
        elif isinstance(value, list):
            for index, item in enumerate(value):
                walk(item, f"{path}[{index}]")

    for key, value in fields.items():
        walk(value, key)


def same_id(student: Dict[str, Any], id: Any) -> bool:
    return str(student.get("id")) == str(id)


def new_student(payload: Optional[StudentCreate]) -> Dict[str, Any]:
    name = (payload.name or "").strip() if payload else ""
    email = (payload.email or "").strip() if payload else ""
    if not name or not email:
        raise ValidationError("Name and email are required")
    check_finite(payload.model_extra or {})

    student = {"id": str(uuid.uuid4()), "name": name, "email": email}
    for key, value in (payload.model_extra or {}).items():
        if key not in PROTECTED_FIELDS + TIMESTAMP_FIELDS:
            student[key] = value
    student["createdAt"] = utc_now_iso()
    return student


def merge_student(existing: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge: supplied keys replace existing values, except protected ones."""
    merged = dict(existing)
    for key, value in changes.items():
        if key in PROTECTED_FIELDS:
            continue
        merged[key] = value
    merged["updatedAt"] = utc_now_iso()
    return merged
