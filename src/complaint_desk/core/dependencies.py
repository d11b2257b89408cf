"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes. Every
dependency reads from the AppContext stored on ``app.state.context``.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from complaint_desk.core.context import AppContext
from complaint_desk.schemas.user import User, UserRole
from complaint_desk.utils.complaint_manager import ComplaintStore
from complaint_desk.utils.notification_center import NotificationChannel
from complaint_desk.utils.session_manager import SessionStore


def get_context(request: Request) -> AppContext:
    """Get the application context created at startup.

    Args:
        request: Incoming request.

    Returns:
        The AppContext attached to the application.
    """
    return request.app.state.context


def get_session_store(context: AppContext = Depends(get_context)) -> SessionStore:
    return context.session


def get_complaint_store(context: AppContext = Depends(get_context)) -> ComplaintStore:
    return context.complaints


def get_notifications(context: AppContext = Depends(get_context)) -> NotificationChannel:
    return context.notifications


def get_current_user(session: SessionStore = Depends(get_session_store)) -> User:
    """Get the active identity.

    Raises:
        HTTPException: 401 if nobody is logged in.
    """
    user = session.user
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in",
        )
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Get the active identity, which must be an admin.

    Raises:
        HTTPException: 403 for any other role.
    """
    if user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def require_student(user: User = Depends(get_current_user)) -> User:
    """Get the active identity, which must be a student.

    Raises:
        HTTPException: 403 for any other role.
    """
    if user.role != UserRole.STUDENT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Student access required",
        )
    return user


# Type aliases for dependency injection
ContextDep = Annotated[AppContext, Depends(get_context)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
ComplaintStoreDep = Annotated[ComplaintStore, Depends(get_complaint_store)]
NotificationsDep = Annotated[NotificationChannel, Depends(get_notifications)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
AdminDep = Annotated[User, Depends(require_admin)]
StudentDep = Annotated[User, Depends(require_student)]
