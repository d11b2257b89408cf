"""Conversion between domain objects and their persisted form.

Timestamps are written as ISO-8601 strings in UTC and dates as YYYY-MM-DD.
Every temporal field is decoded by hand on the way back in, so a stored
record never relies on implicit string coercion.
"""

import json
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import pytz

from complaint_desk.schemas.complaint import (
    Complaint,
    ComplaintAttachment,
    ComplaintCategory,
    ComplaintStatus,
    HistoryEntry,
)
from complaint_desk.schemas.user import User, UserRole


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def encode_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return as_utc(value).isoformat()


def decode_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def encode_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def decode_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    # Older records stored a full timestamp for the due date
    return date.fromisoformat(value[:10])


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with milliseconds and a Z suffix.

    Example: 2024-05-20T10:00:00.000Z
    """
    utc_value = as_utc(value)
    return utc_value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_value.microsecond // 1000:03d}Z"


def complaint_to_record(complaint: Complaint) -> Dict[str, Any]:
    attachment = complaint.attachment
    return {
        "id": complaint.id,
        "studentName": complaint.student_name,
        "studentId": complaint.student_id,
        "category": complaint.category.value,
        "description": complaint.description,
        "status": complaint.status.value,
        "submittedAt": encode_datetime(complaint.submitted_at),
        "resolvedAt": encode_datetime(complaint.resolved_at),
        "adminNotes": complaint.admin_notes,
        "history": [
            {
                "status": entry.status.value,
                "changedAt": encode_datetime(entry.changed_at),
                "notes": entry.notes,
            }
            for entry in complaint.history
        ],
        "isReadByAdmin": complaint.is_read_by_admin,
        "dueDate": encode_date(complaint.due_date),
        "attachment": (
            {
                "name": attachment.name,
                "size": attachment.size,
                "type": attachment.type,
                "dataUrl": attachment.data_url,
            }
            if attachment
            else None
        ),
    }


def record_to_complaint(record: Dict[str, Any]) -> Complaint:
    """Rebuild a Complaint from its stored record.

    Raises:
        KeyError, ValueError: If the record is missing fields or holds values
            outside the status/category vocabularies.
    """
    attachment = record.get("attachment")
    return Complaint(
        id=record["id"],
        student_name=record["studentName"],
        student_id=record["studentId"],
        category=ComplaintCategory(record["category"]),
        description=record["description"],
        status=ComplaintStatus(record["status"]),
        submitted_at=decode_datetime(record["submittedAt"]),
        resolved_at=decode_datetime(record.get("resolvedAt")),
        admin_notes=record.get("adminNotes"),
        history=[
            HistoryEntry(
                status=ComplaintStatus(entry["status"]),
                changed_at=decode_datetime(entry["changedAt"]),
                notes=entry.get("notes"),
            )
            for entry in record["history"]
        ],
        is_read_by_admin=bool(record.get("isReadByAdmin", False)),
        due_date=decode_date(record.get("dueDate")),
        attachment=(
            ComplaintAttachment(
                name=attachment["name"],
                size=attachment["size"],
                type=attachment["type"],
                data_url=attachment["dataUrl"],
            )
            if attachment
            else None
        ),
    )


def dump_complaints(complaints: List[Complaint]) -> str:
    return json.dumps([complaint_to_record(c) for c in complaints])


def load_complaints(raw: str) -> List[Complaint]:
    records = json.loads(raw)
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValueError("complaints record must be a list of objects")
    return [record_to_complaint(record) for record in records]


def user_to_record(user: User) -> Dict[str, Any]:
    return {
        "role": user.role.value,
        "id": user.id,
        "name": user.name,
        "profilePictureUrl": user.profile_picture_url,
        "department": user.department,
        "level": user.level,
        "email": user.email,
        "phone": user.phone,
    }


def record_to_user(record: Dict[str, Any]) -> User:
    return User(
        role=UserRole(record["role"]),
        id=record["id"],
        name=record["name"],
        profile_picture_url=record.get("profilePictureUrl"),
        department=record.get("department"),
        level=record.get("level"),
        email=record.get("email"),
        phone=record.get("phone"),
    )


def dump_user(user: User) -> str:
    return json.dumps(user_to_record(user))


def load_user(raw: str) -> User:
    record = json.loads(raw)
    if not isinstance(record, dict):
        raise ValueError("user record must be an object")
    return record_to_user(record)
