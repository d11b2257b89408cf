"""Complaint schema definitions.

This module defines the Complaint record, its history log and the closed
status and category vocabularies.
"""

import enum
import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ComplaintStatus(str, enum.Enum):
    SUBMITTED = "Submitted"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class ComplaintCategory(str, enum.Enum):
    ACADEMIC = "Academic"
    ADMINISTRATIVE = "Administrative"
    FACILITIES = "Facilities"
    HARASSMENT = "Harassment/Security"
    FINANCIAL = "Financial"
    OTHER = "Other"


# Statuses that end the working life of a complaint
TERMINAL_STATUSES = frozenset({ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED})

SUBMITTED_NOTE = "Complaint submitted by student."


def new_complaint_id() -> str:
    return f"C-{uuid.uuid4()}"


class ComplaintAttachment(BaseModel):
    """A single file attached to a complaint, inlined as a data URL."""
    name: str
    size: int = Field(description="Size in bytes.", ge=0)
    type: str = Field(description="MIME type.")
    data_url: str = Field(description="Base64 encoded data URL.")


class HistoryEntry(BaseModel):
    status: ComplaintStatus
    changed_at: datetime
    notes: Optional[str] = None


class ComplaintDraft(BaseModel):
    """What a student fills in; everything else is stamped by the store."""
    category: ComplaintCategory = ComplaintCategory.ACADEMIC
    description: str


class Complaint(BaseModel):
    id: str = Field(
        description="The unique identifier for the complaint.",
        default_factory=new_complaint_id,
        frozen=True,
    )
    student_name: str
    student_id: str
    category: ComplaintCategory
    description: str
    status: ComplaintStatus = ComplaintStatus.SUBMITTED
    submitted_at: datetime = Field(
        description="The time when the complaint was submitted.",
        frozen=True,
    )
    resolved_at: Optional[datetime] = Field(
        default=None,
        description="Set the first time the complaint is resolved or closed.",
    )
    admin_notes: Optional[str] = None
    history: List[HistoryEntry] = Field(default_factory=list)
    is_read_by_admin: bool = False
    due_date: Optional[date] = None
    attachment: Optional[ComplaintAttachment] = None

    def is_open(self) -> bool:
        return self.status not in TERMINAL_STATUSES
