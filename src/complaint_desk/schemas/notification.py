import enum

from pydantic import BaseModel


class NotificationSeverity(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notification(BaseModel):
    """Transient status message; never persisted."""
    message: str = ""
    severity: NotificationSeverity = NotificationSeverity.SUCCESS
    visible: bool = False
