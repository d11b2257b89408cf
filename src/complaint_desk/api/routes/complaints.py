"""Complaint routes.

This module handles HTTP endpoints for submitting, listing and managing
complaints on the student and admin dashboards.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status

from complaint_desk.core.dependencies import (
    AdminDep,
    ComplaintStoreDep,
    ContextDep,
    CurrentUserDep,
    NotificationsDep,
    StudentDep,
)
from complaint_desk.core.exceptions import ComplaintNotFoundError, ValidationError
from complaint_desk.schemas.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintDraft,
)
from complaint_desk.schemas.message import (
    AnalyticsResponse,
    ComplaintDetail,
    DueAlertsResponse,
    NotesUpdateRequest,
    StatusUpdateRequest,
)
from complaint_desk.schemas.notification import NotificationSeverity
from complaint_desk.schemas.user import UserRole
from complaint_desk.utils import user_directory
from complaint_desk.utils.attachments import build_attachment
from complaint_desk.utils.complaint_filters import (
    ALL,
    due_alert_message,
    filter_admin_view,
    filter_student_view,
    find_due_alerts,
    publish_due_alerts,
    summarize,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/complaints", tags=["Complaints"])


def _not_found(complaint_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(ComplaintNotFoundError(complaint_id)),
    )


@router.get("", summary="Admin complaint list")
def list_complaints(
    admin: AdminDep,
    context: ContextDep,
    status_filter: str = Query(ALL, alias="status"),
    category: str = Query(ALL),
    search: str = Query(""),
    sort_by: str = Query("newest"),
) -> List[Complaint]:
    """List all complaints for the admin dashboard.

    Opening the dashboard also raises the overdue/due-today alert.

    Args:
        status_filter: A status label, or "ALL".
        category: A category label, or "ALL".
        search: Matches id, student name, student id or description.
        sort_by: newest, oldest, status_asc or status_desc.

    Raises:
        HTTPException: 400 for an unknown status, category or sort key.
    """
    complaints = context.complaints.complaints
    try:
        selected = filter_admin_view(
            complaints,
            status=status_filter,
            category=category,
            search=search,
            sort_by=sort_by,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    publish_due_alerts(complaints, context.notifications, context.today())
    return selected


@router.get("/mine", summary="Own complaints")
def list_my_complaints(
    student: StudentDep,
    store: ComplaintStoreDep = None,
    search: str = Query(""),
) -> List[Complaint]:
    return filter_student_view(store.complaints, student.id, search)


@router.post("", summary="Submit complaint", status_code=status.HTTP_201_CREATED)
async def submit_complaint(
    student: StudentDep,
    description: str = Form(...),
    category: ComplaintCategory = Form(ComplaintCategory.ACADEMIC),
    attachment: Optional[UploadFile] = File(None),
    store: ComplaintStoreDep = None,
    notifications: NotificationsDep = None,
) -> Complaint:
    """Submit a complaint as the logged-in student.

    Args:
        description: Free-text description; must not be blank.
        category: Complaint category.
        attachment: Optional file of at most 5MB.

    Raises:
        HTTPException: 400 if the description is blank or the file too large.
    """
    try:
        stored_attachment = None
        if attachment is not None and attachment.filename:
            content = await attachment.read()
            stored_attachment = build_attachment(
                attachment.filename, content, attachment.content_type
            )
        complaint = store.create(
            ComplaintDraft(category=category, description=description),
            student,
            stored_attachment,
        )
    except ValidationError as e:
        notifications.show(str(e), NotificationSeverity.ERROR)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    notifications.show("Complaint submitted successfully!")
    return complaint


@router.get("/alerts", summary="Due-date alerts")
def get_due_alerts(admin: AdminDep, context: ContextDep) -> DueAlertsResponse:
    alerts = find_due_alerts(context.complaints.complaints, context.today())
    composed = due_alert_message(alerts)
    return DueAlertsResponse(
        overdue=alerts.overdue,
        due_today=alerts.due_today,
        message=composed[0] if composed else None,
    )


@router.get("/analytics", summary="Complaint analytics")
def get_analytics(admin: AdminDep, store: ComplaintStoreDep = None) -> AnalyticsResponse:
    return AnalyticsResponse(**summarize(store.complaints))


@router.get("/{complaint_id}", summary="Complaint detail")
def get_complaint(
    complaint_id: str,
    user: CurrentUserDep,
    store: ComplaintStoreDep = None,
) -> ComplaintDetail:
    """Get one complaint.

    An admin opening a complaint marks it as read and also receives the
    submitting student's profile. Students can only see their own
    complaints.

    Raises:
        HTTPException: 404 if the complaint does not exist or is not visible.
    """
    complaint = store.get(complaint_id)
    if complaint is None:
        raise _not_found(complaint_id)
    if user.role == UserRole.ADMIN:
        opened = store.mark_read(complaint_id) or complaint
        return ComplaintDetail(
            **opened.model_dump(),
            student=user_directory.resolve_any(opened.student_id),
        )
    if complaint.student_id != user.id:
        raise _not_found(complaint_id)
    return ComplaintDetail(**complaint.model_dump())


@router.patch("/{complaint_id}/status", summary="Update status")
def update_status(
    complaint_id: str,
    req: StatusUpdateRequest,
    admin: AdminDep,
    store: ComplaintStoreDep = None,
    notifications: NotificationsDep = None,
) -> Complaint:
    """Set the status and due date of a complaint.

    Raises:
        HTTPException: 404 if the complaint does not exist.
    """
    current = store.get(complaint_id)
    if current is None:
        raise _not_found(complaint_id)
    # an omitted due_date keeps the current one; an explicit null clears it
    due_date = req.due_date if "due_date" in req.model_fields_set else current.due_date
    updated = store.update_status(complaint_id, req.status, due_date)
    if updated is None:
        raise _not_found(complaint_id)
    notifications.show(f"Complaint {complaint_id} updated successfully.")
    return updated


@router.patch("/{complaint_id}/notes", summary="Update admin notes")
def update_notes(
    complaint_id: str,
    req: NotesUpdateRequest,
    admin: AdminDep,
    store: ComplaintStoreDep = None,
    notifications: NotificationsDep = None,
) -> Complaint:
    """Replace the admin-only notes of a complaint.

    Raises:
        HTTPException: 404 if the complaint does not exist.
    """
    updated = store.update_notes(complaint_id, req.notes)
    if updated is None:
        raise _not_found(complaint_id)
    notifications.show(f"Notes for complaint {complaint_id} updated.")
    return updated
