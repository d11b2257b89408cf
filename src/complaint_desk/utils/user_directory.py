"""Identity directory.

This module resolves ids to user profiles from a fixed table, standing in for
a real user-management system. Any well-formed student id is accepted: ids
that are not in the table get a placeholder profile.
"""

import re
from typing import Dict, Optional

from complaint_desk.config import ADMIN_USER_ID, STUDENT_ID_PATTERN
from complaint_desk.schemas.user import User, UserRole

_STUDENT_ID_RE = re.compile(STUDENT_ID_PATTERN)


def _picture_url(user_id: str) -> str:
    return f"https://picsum.photos/seed/{user_id}/200"


_STUDENTS: Dict[str, Dict[str, object]] = {
    "U2021/5570009": {
        "name": "Ada Okoro",
        "department": "Computer Science",
        "level": 300,
        "email": "ada.okoro@csd.edu",
        "phone": "08012345678",
    },
    "U2020/5512345": {
        "name": "Bolanle Adeyemi",
        "department": "Petroleum Engineering",
        "level": 400,
        "email": "bolanle.adeyemi@csd.edu",
        "phone": "08023456789",
    },
    "U2022/5598765": {
        "name": "Chukwudi Eze",
        "department": "Medicine and Surgery",
        "level": 200,
        "email": "chukwudi.eze@csd.edu",
        "phone": "08034567890",
    },
    "U2019/5545678": {
        "name": "Fatima Sani",
        "department": "Law",
        "level": 500,
        "email": "fatima.sani@csd.edu",
        "phone": "08045678901",
    },
    "U2021/5570010": {
        "name": "Emeka Nwosu",
        "department": "Electrical Engineering",
        "level": 300,
        "email": "emeka.nwosu@csd.edu",
        "phone": "08056789012",
    },
}

ADMIN_USER = User(
    id=ADMIN_USER_ID,
    name="Dr. Amina Bello",
    role=UserRole.ADMIN,
    profile_picture_url=_picture_url(ADMIN_USER_ID),
    department="Central Administration",
    email="amina.bello@csd.edu",
    phone="08098765432",
)


def is_student_id(user_id: str) -> bool:
    """Check whether an id has the U####/####### shape."""
    return bool(_STUDENT_ID_RE.match(user_id))


def _known_student(user_id: str) -> Optional[User]:
    data = _STUDENTS.get(user_id)
    if data is None:
        return None
    return User(
        id=user_id,
        role=UserRole.STUDENT,
        profile_picture_url=_picture_url(user_id),
        **data,
    )


def _placeholder_name(user_id: str) -> str:
    return f"Student {user_id[-4:]}"


def resolve_student(user_id: str) -> Optional[User]:
    """Resolve a student id for login.

    Args:
        user_id: Student id as typed by the user.

    Returns:
        The student's profile, a placeholder profile for unknown but
        well-formed ids, or None.
    """
    student = _known_student(user_id)
    if student:
        return student
    if is_student_id(user_id):
        return User(
            id=user_id,
            name=_placeholder_name(user_id),
            role=UserRole.STUDENT,
            department="Undeclared",
            level=100,
            email=f"{user_id.lower()}@student.csd.edu",
            phone="N/A",
        )
    return None


def resolve_any(user_id: str) -> Optional[User]:
    """Resolve any id, admin included, for detail views.

    Placeholder students resolved here carry only their id and name.
    """
    if user_id == ADMIN_USER.id:
        return ADMIN_USER.model_copy()
    student = _known_student(user_id)
    if student:
        return student
    if is_student_id(user_id):
        return User(id=user_id, name=_placeholder_name(user_id), role=UserRole.STUDENT)
    return None
