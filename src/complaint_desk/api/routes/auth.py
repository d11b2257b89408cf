"""Authentication routes.

This module handles HTTP endpoints for logging in and out and for the active
user's profile. There is one active session per running application.
"""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from complaint_desk.config import ADMIN_USER_ID
from complaint_desk.core.dependencies import (
    CurrentUserDep,
    NotificationsDep,
    SessionStoreDep,
)
from complaint_desk.core.exceptions import ValidationError
from complaint_desk.schemas.message import (
    AdminLoginRequest,
    LoginResponse,
    StudentLoginRequest,
)
from complaint_desk.schemas.notification import NotificationSeverity
from complaint_desk.schemas.user import ProfileUpdate, User, UserRole

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

EMPTY_STUDENT_ID_MESSAGE = "Student ID cannot be empty."
INVALID_STUDENT_ID_MESSAGE = "Invalid Student ID. Please check the format and try again."
INVALID_ADMIN_MESSAGE = "Invalid admin credentials."


@router.post("/student-login", summary="Student login")
def student_login(
    req: StudentLoginRequest,
    session: SessionStoreDep = None,
) -> LoginResponse:
    """Log in with a student id.

    Any id of the form U####/####### is accepted; unknown ids get a
    placeholder profile.

    Raises:
        HTTPException: 401 with the inline error text if the id is empty or
            malformed.
    """
    student_id = req.student_id.strip()
    if not student_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=EMPTY_STUDENT_ID_MESSAGE,
        )
    if not session.login(UserRole.STUDENT, student_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_STUDENT_ID_MESSAGE,
        )
    return LoginResponse(success=True, user=session.user)


@router.post("/admin-login", summary="Admin login")
def admin_login(
    req: AdminLoginRequest,
    session: SessionStoreDep = None,
) -> LoginResponse:
    """Log in with the fixed admin credential pair.

    Raises:
        HTTPException: 401 if the credentials do not match.
    """
    if not session.login(
        UserRole.ADMIN,
        ADMIN_USER_ID,
        username=req.username,
        password=req.password,
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_ADMIN_MESSAGE,
        )
    return LoginResponse(success=True, user=session.user)


@router.post("/logout", summary="Logout")
def logout(session: SessionStoreDep = None) -> dict:
    session.logout()
    return {"success": True}


@router.get("/me", summary="Current user")
def get_me(user: CurrentUserDep) -> User:
    return user


@router.patch("/me", summary="Update profile")
def update_me(
    req: ProfileUpdate,
    user: CurrentUserDep,
    session: SessionStoreDep = None,
    notifications: NotificationsDep = None,
) -> User:
    """Edit the active user's profile.

    Only fields present in the request body are changed.

    Raises:
        HTTPException: 400 if the name is set to an empty value.
    """
    try:
        updated = session.update_profile(**req.model_dump(exclude_unset=True))
    except ValidationError as e:
        notifications.show(str(e), NotificationSeverity.ERROR)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    notifications.show("Profile updated successfully!")
    return updated


@router.post("/me/picture", summary="Upload profile picture")
async def upload_picture(
    user: CurrentUserDep,
    file: UploadFile = File(...),
    session: SessionStoreDep = None,
    notifications: NotificationsDep = None,
) -> User:
    """Replace the profile picture with a resized copy of an image.

    Raises:
        HTTPException: 400 if the upload is not a usable image.
    """
    content = await file.read()
    try:
        updated = session.set_profile_picture(content, file.content_type or "")
    except ValidationError as e:
        notifications.show(str(e), NotificationSeverity.ERROR)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    notifications.show("Profile picture updated successfully!")
    return updated
