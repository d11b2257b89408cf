"""Complaint command handler.

Every change to the complaint collection is expressed as a command and
applied by ``apply_command``, a pure function from (collection, command) to a
new collection. The input list and its complaints are never modified.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, List, Optional, Union

from complaint_desk.schemas.complaint import (
    TERMINAL_STATUSES,
    Complaint,
    ComplaintStatus,
    HistoryEntry,
)

logger = logging.getLogger(__name__)

DETAILS_UPDATED_NOTE = "Complaint details updated by admin."


@dataclass(frozen=True)
class AddComplaint:
    complaint: Complaint


@dataclass(frozen=True)
class ChangeStatus:
    complaint_id: str
    status: ComplaintStatus
    due_date: Optional[date]
    changed_at: datetime


@dataclass(frozen=True)
class EditNotes:
    complaint_id: str
    notes: str


@dataclass(frozen=True)
class MarkRead:
    complaint_id: str


@dataclass(frozen=True)
class ReplaceAll:
    complaints: List[Complaint]


Command = Union[AddComplaint, ChangeStatus, EditNotes, MarkRead, ReplaceAll]


def history_note(old_status: ComplaintStatus, new_status: ComplaintStatus) -> str:
    if old_status == new_status:
        return DETAILS_UPDATED_NOTE
    return f"Status changed from {old_status.value} to {new_status.value}."


def _change_status(complaint: Complaint, command: ChangeStatus) -> Complaint:
    entry = HistoryEntry(
        status=command.status,
        changed_at=command.changed_at,
        notes=history_note(complaint.status, command.status),
    )
    resolved_at = complaint.resolved_at
    if command.status in TERMINAL_STATUSES and resolved_at is None:
        resolved_at = command.changed_at
    return complaint.model_copy(
        update={
            "status": command.status,
            "due_date": command.due_date,
            "history": [*complaint.history, entry],
            "resolved_at": resolved_at,
            "is_read_by_admin": True,
        }
    )


def _edit_notes(complaint: Complaint, command: EditNotes) -> Complaint:
    return complaint.model_copy(
        update={"admin_notes": command.notes, "is_read_by_admin": True}
    )


def _mark_read(complaint: Complaint, command: MarkRead) -> Complaint:
    if complaint.is_read_by_admin:
        return complaint
    return complaint.model_copy(update={"is_read_by_admin": True})


def _update_one(
    complaints: List[Complaint],
    complaint_id: str,
    change: Callable[[Complaint], Complaint],
) -> List[Complaint]:
    if not any(c.id == complaint_id for c in complaints):
        logger.debug("Command targets unknown complaint %s; ignored", complaint_id)
        return complaints
    return [change(c) if c.id == complaint_id else c for c in complaints]


def apply_command(complaints: List[Complaint], command: Command) -> List[Complaint]:
    """Return the collection that results from applying a command.

    Args:
        complaints: Current collection, newest creation first.
        command: The change to apply.

    Returns:
        The new collection. The same list object is returned when the command
        targets an unknown complaint.
    """
    if isinstance(command, AddComplaint):
        return [command.complaint, *complaints]
    if isinstance(command, ChangeStatus):
        return _update_one(
            complaints, command.complaint_id, lambda c: _change_status(c, command)
        )
    if isinstance(command, EditNotes):
        return _update_one(
            complaints, command.complaint_id, lambda c: _edit_notes(c, command)
        )
    if isinstance(command, MarkRead):
        return _update_one(
            complaints, command.complaint_id, lambda c: _mark_read(c, command)
        )
    if isinstance(command, ReplaceAll):
        return list(command.complaints)
    raise TypeError(f"Unknown complaint command: {command!r}")
