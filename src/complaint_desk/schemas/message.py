"""Request and response bodies for the HTTP API."""

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from complaint_desk.schemas.complaint import Complaint, ComplaintStatus
from complaint_desk.schemas.user import User


class StudentLoginRequest(BaseModel):
    student_id: str = Field(description="Matriculation number, e.g. U2021/5570009.")


class AdminLoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    success: bool
    user: Optional[User] = None


class StatusUpdateRequest(BaseModel):
    status: ComplaintStatus
    due_date: Optional[date] = Field(
        default=None, description="New due date. Omitted keeps the current one; null clears it."
    )


class NotesUpdateRequest(BaseModel):
    notes: str


class DescribeRequest(BaseModel):
    keywords: str = Field(description="A few words or a short sentence about the complaint.")


class DescribeResponse(BaseModel):
    description: str


class DueAlertsResponse(BaseModel):
    overdue: List[Complaint]
    due_today: List[Complaint]
    message: Optional[str] = None


class AnalyticsResponse(BaseModel):
    total: int
    resolved: int
    in_progress: int
    pending: int
    by_category: Dict[str, int]
    by_status: Dict[str, int]


class ComplaintDetail(Complaint):
    """A complaint together with the profile of the student who filed it."""
    student: Optional[User] = Field(
        default=None, description="Resolved submitter profile; admin view only."
    )
