"""Complaint view and filter engine.

Pure functions that derive what the dashboards show from the complaint
collection: filtered and sorted lists, due-date alerts and summary counts.
Nothing here mutates a complaint.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Literal, Optional, Tuple, Union

import pytz

from complaint_desk.config import APP_TIMEZONE
from complaint_desk.schemas.complaint import (
    Complaint,
    ComplaintCategory,
    ComplaintStatus,
)
from complaint_desk.schemas.notification import NotificationSeverity
from complaint_desk.utils.notification_center import NotificationChannel

logger = logging.getLogger(__name__)

ALL = "ALL"

SortKey = Literal["newest", "oldest", "status_asc", "status_desc"]
SORT_KEYS: Tuple[str, ...] = ("newest", "oldest", "status_asc", "status_desc")


def today_in(timezone: str = APP_TIMEZONE, now: Optional[datetime] = None) -> date:
    """Calendar date in the configured timezone.

    Args:
        timezone: pytz timezone name.
        now: Instant to convert; defaults to the current time.
    """
    tz = pytz.timezone(timezone)
    now = now or datetime.now(pytz.utc)
    return now.astimezone(tz).date()


def matches_search(complaint: Complaint, search: str) -> bool:
    """Case-insensitive substring match over id, student and description."""
    term = search.strip().lower()
    if not term:
        return True
    return any(
        term in value.lower()
        for value in (
            complaint.id,
            complaint.student_name,
            complaint.student_id,
            complaint.description,
        )
    )


def _newest_first(complaints: Iterable[Complaint]) -> List[Complaint]:
    return sorted(complaints, key=lambda c: c.submitted_at, reverse=True)


def sort_complaints(complaints: Iterable[Complaint], sort_by: str = "newest") -> List[Complaint]:
    """Order complaints for display.

    ``status_asc``/``status_desc`` order by the status label; ties are
    broken newest first.

    Raises:
        ValueError: If sort_by is not a known key.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by}")
    if sort_by == "oldest":
        return sorted(complaints, key=lambda c: c.submitted_at)
    newest = _newest_first(complaints)
    if sort_by == "newest":
        return newest
    # sorted() is stable, so the newest-first order survives inside each status
    return sorted(
        newest,
        key=lambda c: c.status.value,
        reverse=(sort_by == "status_desc"),
    )


def filter_admin_view(
    complaints: Iterable[Complaint],
    status: Union[ComplaintStatus, str] = ALL,
    category: Union[ComplaintCategory, str] = ALL,
    search: str = "",
    sort_by: str = "newest",
) -> List[Complaint]:
    """Complaints as listed on the admin dashboard.

    Args:
        complaints: Full collection.
        status: A status, or "ALL".
        category: A category, or "ALL".
        search: Free-text search term.
        sort_by: One of newest, oldest, status_asc, status_desc.
    """
    selected = list(complaints)
    if status != ALL:
        wanted_status = ComplaintStatus(status)
        selected = [c for c in selected if c.status == wanted_status]
    if category != ALL:
        wanted_category = ComplaintCategory(category)
        selected = [c for c in selected if c.category == wanted_category]
    selected = [c for c in selected if matches_search(c, search)]
    return sort_complaints(selected, sort_by)


def filter_student_view(
    complaints: Iterable[Complaint],
    student_id: str,
    search: str = "",
) -> List[Complaint]:
    """A student's own complaints, newest first."""
    own = [
        c for c in complaints
        if c.student_id == student_id and matches_search(c, search)
    ]
    return _newest_first(own)


def is_overdue(complaint: Complaint, today: date) -> bool:
    return (
        complaint.due_date is not None
        and complaint.due_date < today
        and complaint.is_open()
    )


def is_due_today(complaint: Complaint, today: date) -> bool:
    return (
        complaint.due_date is not None
        and complaint.due_date == today
        and complaint.is_open()
    )


@dataclass
class DueAlerts:
    overdue: List[Complaint] = field(default_factory=list)
    due_today: List[Complaint] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.overdue or self.due_today)


def find_due_alerts(complaints: Iterable[Complaint], today: date) -> DueAlerts:
    alerts = DueAlerts()
    for complaint in complaints:
        if is_overdue(complaint, today):
            alerts.overdue.append(complaint)
        elif is_due_today(complaint, today):
            alerts.due_today.append(complaint)
    return alerts


def _count_phrase(count: int, suffix: str) -> str:
    verb = "complaints are" if count > 1 else "complaint is"
    return f"{count} {verb} {suffix}."


def due_alert_message(alerts: DueAlerts) -> Optional[Tuple[str, NotificationSeverity]]:
    """Compose the dashboard alert text.

    Returns:
        (message, severity), or None when nothing is due.
    """
    if not alerts:
        return None
    parts = []
    if alerts.overdue:
        parts.append(_count_phrase(len(alerts.overdue), "overdue"))
    if alerts.due_today:
        parts.append(_count_phrase(len(alerts.due_today), "due today"))
    severity = NotificationSeverity.ERROR if alerts.overdue else NotificationSeverity.INFO
    return " ".join(parts), severity


def publish_due_alerts(
    complaints: Iterable[Complaint],
    notifications: NotificationChannel,
    today: date,
) -> DueAlerts:
    """Show the due-date alert once, if anything is overdue or due today."""
    alerts = find_due_alerts(complaints, today)
    composed = due_alert_message(alerts)
    if composed:
        message, severity = composed
        notifications.show(message, severity)
    return alerts


def summarize(complaints: Iterable[Complaint]) -> Dict[str, object]:
    """Counts for the analytics tab."""
    complaints = list(complaints)
    by_status = Counter(c.status.value for c in complaints)
    by_category = Counter(c.category.value for c in complaints)
    return {
        "total": len(complaints),
        "resolved": by_status.get(ComplaintStatus.RESOLVED.value, 0),
        "in_progress": by_status.get(ComplaintStatus.IN_PROGRESS.value, 0),
        "pending": by_status.get(ComplaintStatus.SUBMITTED.value, 0),
        "by_category": dict(by_category),
        "by_status": dict(by_status),
    }
