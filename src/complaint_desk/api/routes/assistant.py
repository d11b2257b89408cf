"""AI assistant routes.

This module handles the HTTP endpoint that drafts a complaint description
from a few keywords.
"""

import logging

from fastapi import APIRouter, HTTPException, status

from complaint_desk.core.dependencies import ContextDep, StudentDep
from complaint_desk.core.exceptions import AssistantError, ValidationError
from complaint_desk.schemas.message import DescribeRequest, DescribeResponse
from complaint_desk.schemas.notification import NotificationSeverity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assistant", tags=["Assistant"])


@router.post("/describe", summary="Draft complaint description")
def describe(
    req: DescribeRequest,
    student: StudentDep,
    context: ContextDep,
) -> DescribeResponse:
    """Expand keywords into a formal complaint description.

    The result is only a suggestion; nothing is submitted.

    Raises:
        HTTPException: 400 for empty keywords, 502 if generation fails.
    """
    try:
        text = context.description_assistant.generate_description(req.keywords)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AssistantError as e:
        context.notifications.show(str(e), NotificationSeverity.ERROR)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return DescribeResponse(description=text)
