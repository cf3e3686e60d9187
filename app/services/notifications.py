"""
Notification dispatch and inbox queries.

notify() is called from content actions (new comment, new reply, new post
upvote) inside the same request. It is best effort: a failure is logged and
rolled back to a savepoint so the comment or upvote that triggered it still
commits.
"""

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.logging import get_logger
from app.models import Notifications, Posts, Users
from app.schemas.common import UserSummary
from app.schemas.notification import NotificationResponse, PostSummary

logger = get_logger(__name__)


async def _insert_notification(db: AsyncSession, notification: Notifications) -> None:
    db.add(notification)
    await db.flush()


async def notify(
    db: AsyncSession,
    recipient_id: int,
    sender_id: int,
    notification_type: str,
    post_id: int | None = None,
    comment_id: int | None = None,
) -> Notifications | None:
    """
    Create a notification for recipient about sender's action.

    Self-triggered actions (recipient == sender) create nothing.

    Args:
        db: Database session (caller manages the outer transaction)
        recipient_id: User being notified
        sender_id: User who acted
        notification_type: One of NotificationType
        post_id: Related post, if any
        comment_id: Related comment, if any

    Returns:
        The new notification, or None when suppressed or when storing it failed
    """
    if recipient_id == sender_id:
        return None

    notification = Notifications(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=notification_type,
        post_id=post_id,
        comment_id=comment_id,
    )

    try:
        async with db.begin_nested():
            await _insert_notification(db, notification)
    except SQLAlchemyError as e:
        if notification in db:
            db.expunge(notification)
        logger.error(
            "notification_dispatch_failed",
            recipient_id=recipient_id,
            sender_id=sender_id,
            type=notification_type,
            post_id=post_id,
            comment_id=comment_id,
            error_type=type(e).__name__,
        )
        return None

    logger.info(
        "notification_created",
        notification_id=notification.notification_id,
        recipient_id=recipient_id,
        type=notification_type,
    )
    return notification


async def list_notifications(
    db: AsyncSession, recipient_id: int, limit: int | None = None
) -> list[NotificationResponse]:
    """
    Most recent notifications for a user, newest first.

    Sender name and post title are joined in; both are null when the
    referenced row no longer exists.
    """
    limit = limit or settings.NOTIFICATIONS_LIMIT

    query = (
        select(Notifications, Users.user_id, Users.name, Posts.post_id, Posts.title)  # type: ignore[call-overload]
        .join(Users, Notifications.sender_id == Users.user_id, isouter=True)
        .join(Posts, Notifications.post_id == Posts.post_id, isouter=True)
        .where(Notifications.recipient_id == recipient_id)
        .order_by(desc(Notifications.created_at), desc(Notifications.notification_id))
        .limit(limit)
    )
    result = await db.execute(query)

    items: list[NotificationResponse] = []
    for notification, sender_id, sender_name, post_id, post_title in result.all():
        items.append(
            NotificationResponse(
                notification_id=notification.notification_id,
                type=notification.type,
                read=notification.read,
                created_at=notification.created_at,
                sender=UserSummary(user_id=sender_id, name=sender_name)
                if sender_id is not None
                else None,
                post=PostSummary(post_id=post_id, title=post_title) if post_id is not None else None,
                comment_id=notification.comment_id,
            )
        )
    return items


async def count_unread(db: AsyncSession, recipient_id: int) -> int:
    """Unread notifications for a user. Not capped by the list limit."""
    result = await db.execute(
        select(func.count())
        .select_from(Notifications)
        .where(
            Notifications.recipient_id == recipient_id,  # type: ignore[arg-type]
            Notifications.read == False,  # type: ignore[arg-type]  # noqa: E712
        )
    )
    return result.scalar() or 0


async def mark_read(db: AsyncSession, notification_id: int, recipient_id: int) -> bool:
    """
    Mark one notification as read.

    Scoped to the recipient: a notification that does not exist or belongs
    to someone else is left alone, without an error.

    Returns:
        True if a row was updated
    """
    result = await db.execute(
        update(Notifications)
        .where(
            Notifications.notification_id == notification_id,  # type: ignore[arg-type]
            Notifications.recipient_id == recipient_id,  # type: ignore[arg-type]
        )
        .values(read=True)
    )
    return bool(result.rowcount)


async def mark_all_read(db: AsyncSession, recipient_id: int) -> int:
    """
    Mark every unread notification of a user as read.

    Returns:
        Number of notifications changed
    """
    result = await db.execute(
        update(Notifications)
        .where(
            Notifications.recipient_id == recipient_id,  # type: ignore[arg-type]
            Notifications.read == False,  # type: ignore[arg-type]  # noqa: E712
        )
        .values(read=True)
    )
    return result.rowcount or 0
