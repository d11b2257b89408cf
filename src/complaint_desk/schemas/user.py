"""User schema definitions."""

import enum
from typing import Optional

from pydantic import BaseModel, Field


class UserRole(str, enum.Enum):
    STUDENT = "student"
    ADMIN = "admin"
    NONE = "none"


class User(BaseModel):
    """An identity resolved from the directory."""
    role: UserRole
    id: str
    name: str
    profile_picture_url: Optional[str] = None
    department: Optional[str] = None
    level: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None


# Fields a user may edit on their own profile
EDITABLE_PROFILE_FIELDS = frozenset(
    {"name", "profile_picture_url", "department", "level", "email", "phone"}
)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, description="Display name.")
    department: Optional[str] = None
    level: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
