"""
Notifications API endpoints

Notifications are created as a side effect of comments, replies and post
upvotes (see app.services.notifications); these routes only read them and
flip the read flag.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.core.database import get_db
from app.core.logging import get_logger
from app.schemas.common import SuccessResponse
from app.schemas.notification import NotificationListResponse
from app.services.notifications import (
    count_unread,
    list_notifications,
    mark_all_read,
    mark_read,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> NotificationListResponse:
    """
    The current user's most recent notifications, newest first.

    `unread_count` counts every unread notification, including ones older
    than the returned page.
    """
    assert current_user.user_id is not None
    return NotificationListResponse(
        notifications=await list_notifications(db, current_user.user_id),
        unread_count=await count_unread(db, current_user.user_id),
    )


@router.put("/read-all", response_model=SuccessResponse)
async def read_all_notifications(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Mark all of the current user's notifications as read."""
    assert current_user.user_id is not None
    changed = await mark_all_read(db, current_user.user_id)
    logger.info("notifications_read_all", user_id=current_user.user_id, changed=changed)
    return SuccessResponse()


@router.put("/{notification_id}/read", response_model=SuccessResponse)
async def read_notification(
    notification_id: Annotated[int, Path(description="Notification ID")],
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """
    Mark one notification as read.

    Succeeds even when the notification does not exist or belongs to
    someone else; in that case nothing changes.
    """
    assert current_user.user_id is not None
    await mark_read(db, notification_id, current_user.user_id)
    return SuccessResponse()
