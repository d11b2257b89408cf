"""Example complaints written to storage on first run."""

from datetime import date, datetime
from typing import List

import pytz

from complaint_desk.schemas.complaint import (
    SUBMITTED_NOTE,
    Complaint,
    ComplaintAttachment,
    ComplaintCategory,
    ComplaintStatus,
    HistoryEntry,
)

# 1x1 transparent PNG standing in for a scanned receipt
PLACEHOLDER_RECEIPT_URL = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR4"
    "2mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


def _utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=pytz.utc)


def build_seed_complaints(now: datetime) -> List[Complaint]:
    """Build the first-run collection.

    Args:
        now: Submission time of the one complaint that is always fresh.

    Returns:
        Five complaints covering every status.
    """
    return [
        Complaint(
            student_name="Ada Okoro",
            student_id="U2021/5570009",
            category=ComplaintCategory.ACADEMIC,
            description=(
                "My grade for COS 301 was not recorded correctly. I believe there "
                "has been a mistake in the calculation. I have my test scripts as proof."
            ),
            status=ComplaintStatus.IN_PROGRESS,
            submitted_at=_utc(2024, 5, 20, 10),
            admin_notes=(
                "Contacted the department head. Waiting for feedback on the grade "
                "review process."
            ),
            history=[
                HistoryEntry(
                    status=ComplaintStatus.SUBMITTED,
                    changed_at=_utc(2024, 5, 20, 10),
                    notes=SUBMITTED_NOTE,
                ),
                HistoryEntry(
                    status=ComplaintStatus.IN_PROGRESS,
                    changed_at=_utc(2024, 5, 21, 14, 30),
                    notes="Assigned to academic affairs. Awaiting course adviser's response.",
                ),
            ],
            is_read_by_admin=True,
            due_date=date(2024, 6, 10),
        ),
        Complaint(
            student_name="Bolanle Adeyemi",
            student_id="U2020/5512345",
            category=ComplaintCategory.FACILITIES,
            description=(
                "The air conditioning unit in Lecture Hall 2 has been faulty for "
                "over a week, making lectures very uncomfortable."
            ),
            status=ComplaintStatus.RESOLVED,
            submitted_at=_utc(2024, 5, 18, 9, 30),
            resolved_at=_utc(2024, 5, 22, 11),
            admin_notes=(
                "Maintenance team was dispatched and has repaired the AC unit. "
                "Issue confirmed resolved."
            ),
            history=[
                HistoryEntry(
                    status=ComplaintStatus.SUBMITTED,
                    changed_at=_utc(2024, 5, 18, 9, 30),
                ),
                HistoryEntry(
                    status=ComplaintStatus.IN_PROGRESS,
                    changed_at=_utc(2024, 5, 18, 12),
                    notes="Ticket raised with the maintenance department.",
                ),
                HistoryEntry(
                    status=ComplaintStatus.RESOLVED,
                    changed_at=_utc(2024, 5, 22, 11),
                    notes="Unit repaired and tested successfully.",
                ),
            ],
            is_read_by_admin=True,
            due_date=date(2024, 5, 25),
        ),
        Complaint(
            student_name="Chukwudi Eze",
            student_id="U2022/5598765",
            category=ComplaintCategory.FINANCIAL,
            description=(
                "I paid my school fees two weeks ago but my portal still shows "
                "that I have an outstanding balance. My remita receipt is attached."
            ),
            status=ComplaintStatus.SUBMITTED,
            submitted_at=now,
            history=[HistoryEntry(status=ComplaintStatus.SUBMITTED, changed_at=now)],
            is_read_by_admin=False,
            attachment=ComplaintAttachment(
                name="school_fees_receipt.png",
                size=123456,
                type="image/png",
                data_url=PLACEHOLDER_RECEIPT_URL,
            ),
        ),
        Complaint(
            student_name="Fatima Sani",
            student_id="U2019/5545678",
            category=ComplaintCategory.ADMINISTRATIVE,
            description=(
                "I applied for a transcript a month ago and have not received any "
                "update on its status. The application ID is T-45678."
            ),
            status=ComplaintStatus.CLOSED,
            submitted_at=_utc(2024, 4, 15, 15),
            resolved_at=_utc(2024, 4, 20, 16),
            admin_notes=(
                "Transcript was processed and dispatched on April 19th. Student "
                "confirmed receipt. Closing ticket."
            ),
            history=[
                HistoryEntry(
                    status=ComplaintStatus.SUBMITTED,
                    changed_at=_utc(2024, 4, 15, 15),
                ),
                HistoryEntry(
                    status=ComplaintStatus.IN_PROGRESS,
                    changed_at=_utc(2024, 4, 16, 10),
                    notes="Forwarded to exams and records.",
                ),
                HistoryEntry(
                    status=ComplaintStatus.RESOLVED,
                    changed_at=_utc(2024, 4, 20, 16),
                    notes="Transcript sent.",
                ),
                HistoryEntry(
                    status=ComplaintStatus.CLOSED,
                    changed_at=_utc(2024, 4, 21, 9),
                ),
            ],
            is_read_by_admin=True,
        ),
        Complaint(
            student_name="Emeka Nwosu",
            student_id="U2021/5570010",
            category=ComplaintCategory.HARASSMENT,
            description=(
                "A security guard at the main gate was verbally abusive and refused "
                "me entry without a valid reason, even after showing my ID card."
            ),
            status=ComplaintStatus.IN_PROGRESS,
            submitted_at=_utc(2024, 5, 23, 18),
            admin_notes=(
                "Chief Security Officer has been notified and an investigation is "
                "underway. The student has been contacted for more details."
            ),
            history=[
                HistoryEntry(
                    status=ComplaintStatus.SUBMITTED,
                    changed_at=_utc(2024, 5, 23, 18),
                ),
                HistoryEntry(
                    status=ComplaintStatus.IN_PROGRESS,
                    changed_at=_utc(2024, 5, 24, 9, 15),
                    notes="Incident escalated to CSO.",
                ),
            ],
            is_read_by_admin=True,
            due_date=date(2024, 6, 5),
        ),
    ]
