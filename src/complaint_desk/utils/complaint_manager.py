"""Complaint management module.

This module owns the in-memory complaint collection, routes every change
through the command handler and writes the whole collection back to local
storage after each change.
"""

import logging
import threading
from datetime import date, datetime
from typing import Callable, List, Optional

import pytz

from complaint_desk.config import COMPLAINTS_STORAGE_KEY
from complaint_desk.core.exceptions import StorageError, ValidationError
from complaint_desk.schemas.complaint import (
    SUBMITTED_NOTE,
    Complaint,
    ComplaintAttachment,
    ComplaintDraft,
    ComplaintStatus,
    HistoryEntry,
)
from complaint_desk.schemas.notification import NotificationSeverity
from complaint_desk.schemas.user import User
from complaint_desk.utils.complaint_commands import (
    AddComplaint,
    ChangeStatus,
    Command,
    EditNotes,
    MarkRead,
    ReplaceAll,
    apply_command,
)
from complaint_desk.utils.converters import dump_complaints, load_complaints
from complaint_desk.utils.notification_center import NotificationChannel
from complaint_desk.utils.seed_data import build_seed_complaints
from complaint_desk.utils.storage import LocalStorage

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


class ComplaintStore:
    """Single source of truth for complaints."""

    def __init__(
        self,
        storage: LocalStorage,
        notifications: Optional[NotificationChannel] = None,
        clock: Clock = utc_now,
    ):
        """Initialize ComplaintStore and load the persisted collection.

        Args:
            storage: Local storage holding the complaint record.
            notifications: Channel used to report persistence failures.
            clock: Source of "now" for timestamps.
        """
        self.storage = storage
        self.notifications = notifications
        self.clock = clock
        self._lock = threading.RLock()
        self._complaints: List[Complaint] = []
        self._load()

    @property
    def complaints(self) -> List[Complaint]:
        """Snapshot of the collection, newest creation first."""
        with self._lock:
            return list(self._complaints)

    def get(self, complaint_id: str) -> Optional[Complaint]:
        with self._lock:
            for complaint in self._complaints:
                if complaint.id == complaint_id:
                    return complaint
        return None

    # --- persistence ---

    def _load(self) -> None:
        try:
            raw = self.storage.get_item(COMPLAINTS_STORAGE_KEY)
        except StorageError as e:
            logger.error("Failed to read complaints from storage: %s", e)
            raw = None

        if raw:
            try:
                complaints = load_complaints(raw)
                logger.info("Loaded %d complaints from storage", len(complaints))
                self._complaints = complaints
                return
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.error("Failed to parse complaints from storage: %s", e)

        complaints = build_seed_complaints(self.clock())
        logger.info("Seeding storage with %d example complaints", len(complaints))
        self.dispatch(ReplaceAll(complaints))

    def _persist(self, complaints: List[Complaint]) -> bool:
        try:
            self.storage.set_item(COMPLAINTS_STORAGE_KEY, dump_complaints(complaints))
            return True
        except StorageError as e:
            logger.error("Failed to save complaints to storage: %s", e)
            if self.notifications:
                self.notifications.show(
                    "Failed to save complaints on this device.",
                    NotificationSeverity.ERROR,
                )
            return False

    def dispatch(self, command: Command) -> bool:
        """Apply a command and persist the result.

        The in-memory collection is replaced atomically; it is kept even when
        the write to storage fails.

        Returns:
            True if the collection changed.
        """
        with self._lock:
            updated = apply_command(self._complaints, command)
            if updated is self._complaints:
                return False
            self._complaints = updated
            self._persist(updated)
            return True

    # --- operations ---

    def create(
        self,
        draft: ComplaintDraft,
        student: Optional[User],
        attachment: Optional[ComplaintAttachment] = None,
    ) -> Complaint:
        """Submit a new complaint on behalf of a student.

        Args:
            draft: Category and description entered by the student.
            student: The acting student.
            attachment: Optional file already read into memory.

        Returns:
            The stored complaint.

        Raises:
            ValidationError: If nobody is logged in or the description is
                empty.
        """
        if student is None or not student.id or not student.name:
            raise ValidationError("You must be logged in to submit a complaint.")
        description = draft.description.strip()
        if not description:
            raise ValidationError("Description cannot be empty.")

        now = self.clock()
        complaint = Complaint(
            student_id=student.id,
            student_name=student.name,
            category=draft.category,
            description=description,
            status=ComplaintStatus.SUBMITTED,
            submitted_at=now,
            history=[
                HistoryEntry(
                    status=ComplaintStatus.SUBMITTED,
                    changed_at=now,
                    notes=SUBMITTED_NOTE,
                )
            ],
            is_read_by_admin=False,
            attachment=attachment,
        )
        self.dispatch(AddComplaint(complaint))
        logger.info("Complaint %s submitted by %s", complaint.id, student.id)
        return complaint

    def update_status(
        self,
        complaint_id: str,
        new_status: ComplaintStatus,
        due_date: Optional[date] = None,
    ) -> Optional[Complaint]:
        """Set a complaint's status and due date as an admin.

        Any status may follow any other. A history entry is appended on every
        call, even when the status is unchanged.

        Args:
            complaint_id: Target complaint.
            new_status: Status to set.
            due_date: New due date; None clears it.

        Returns:
            The updated complaint, or None if the id is unknown.
        """
        changed = self.dispatch(
            ChangeStatus(
                complaint_id=complaint_id,
                status=ComplaintStatus(new_status),
                due_date=due_date,
                changed_at=self.clock(),
            )
        )
        if not changed:
            return None
        logger.info("Complaint %s set to %s", complaint_id, ComplaintStatus(new_status).value)
        return self.get(complaint_id)

    def update_notes(self, complaint_id: str, notes: str) -> Optional[Complaint]:
        """Replace the admin-only notes of a complaint.

        Returns:
            The updated complaint, or None if the id is unknown.
        """
        if not self.dispatch(EditNotes(complaint_id=complaint_id, notes=notes)):
            return None
        logger.info("Notes updated for complaint %s", complaint_id)
        return self.get(complaint_id)

    def mark_read(self, complaint_id: str) -> Optional[Complaint]:
        """Flag a complaint as seen by an admin without touching its history.

        Returns:
            The complaint, or None if the id is unknown.
        """
        complaint = self.get(complaint_id)
        if complaint is None:
            return None
        if not complaint.is_read_by_admin:
            self.dispatch(MarkRead(complaint_id))
        return self.get(complaint_id)
