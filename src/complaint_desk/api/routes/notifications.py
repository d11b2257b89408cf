"""Notification routes.

This module exposes the single transient notification so a client can poll
for it and dismiss it.
"""

from fastapi import APIRouter

from complaint_desk.core.dependencies import NotificationsDep
from complaint_desk.schemas.notification import Notification

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("/current", summary="Current notification")
def get_current(notifications: NotificationsDep = None) -> Notification:
    return notifications.current


@router.delete("/current", summary="Dismiss notification")
def dismiss_current(notifications: NotificationsDep = None) -> Notification:
    notifications.hide()
    return notifications.current
