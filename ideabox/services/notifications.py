"""In-app notification dispatcher and read-state queries."""

import logging
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.config import settings
from ideabox.models.idea import Idea, IdeaStatus
from ideabox.models.notification import Notification, NotificationType
from ideabox.models.user import Role, User

logger = logging.getLogger(__name__)

MESSAGE_TEMPLATES = {
    NotificationType.NEW_SUBMISSION: "New idea submitted: '{title}'",
    NotificationType.UNDER_REVIEW: "Your idea '{title}' is now under review",
    NotificationType.ACCEPTED: "Your idea '{title}' was accepted",
    NotificationType.REJECTED: "Your idea '{title}' was rejected",
}

PENDING_STATUSES = (IdeaStatus.SUBMITTED, IdeaStatus.UNDER_REVIEW)
DECIDED_STATUSES = (IdeaStatus.ACCEPTED, IdeaStatus.REJECTED)


def render_message(notification_type: NotificationType, title: str) -> str:
    return MESSAGE_TEMPLATES[notification_type].format(title=title)


# ═══════════════════════════════════════════════════════════════
#  Dispatch
# ═══════════════════════════════════════════════════════════════

async def notify_admins_of_submission(db: AsyncSession, idea_id: int, title: str) -> List[Notification]:
    """Fan a ``new_submission`` notification out to every admin."""
    result = await db.execute(select(User.id).where(User.role == Role.ADMIN))
    admin_ids = result.scalars().all()

    message = render_message(NotificationType.NEW_SUBMISSION, title)
    notifications = [
        Notification(
            user_id=admin_id,
            idea_id=idea_id,
            type=NotificationType.NEW_SUBMISSION,
            message=message,
        )
        for admin_id in admin_ids
    ]
    db.add_all(notifications)
    await db.flush()
    logger.info(f"Notified {len(notifications)} admin(s) of idea {idea_id}")
    return notifications


async def notify_submitter(
    db: AsyncSession,
    submitter_id: int,
    idea_id: int,
    title: str,
    notification_type: NotificationType,
) -> Notification:
    """Tell the idea's submitter about a review or a decision."""
    notification = Notification(
        user_id=submitter_id,
        idea_id=idea_id,
        type=notification_type,
        message=render_message(notification_type, title),
    )
    db.add(notification)
    await db.flush()
    return notification


# ═══════════════════════════════════════════════════════════════
#  Queries & read state
# ═══════════════════════════════════════════════════════════════

async def list_for_user(db: AsyncSession, user_id: int, limit: Optional[int] = None) -> List[Notification]:
    """Most recent notifications (read and unread), newest first."""
    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit or settings.NOTIFICATION_LIST_LIMIT)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def count_unread(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
    )
    return result.scalar() or 0


async def mark_read(db: AsyncSession, notification_id: int, user_id: Optional[int] = None) -> None:
    """Mark one notification read. Unknown or already-read ids are a no-op.

    When ``user_id`` is given only that user's notification can be touched.
    """
    stmt = update(Notification).where(Notification.id == notification_id)
    if user_id is not None:
        stmt = stmt.where(Notification.user_id == user_id)
    await db.execute(stmt.values(is_read=True))


async def mark_all_read(db: AsyncSession, user_id: int) -> int:
    result = await db.execute(
        update(Notification)
        .where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
        .values(is_read=True)
    )
    return result.rowcount or 0


async def activity_summary(db: AsyncSession, actor: User) -> dict:
    """Role-aware badge counts.

    Admins get the number of ideas still awaiting a decision; everyone else
    gets the number of their own ideas that have been decided.
    """
    if actor.role == Role.ADMIN:
        result = await db.execute(
            select(func.count(Idea.id)).where(Idea.status.in_(PENDING_STATUSES))
        )
        return {"pending_ideas": result.scalar() or 0, "new_activities": 0}

    result = await db.execute(
        select(func.count(Idea.id)).where(
            Idea.submitter_id == actor.id,
            Idea.status.in_(DECIDED_STATUSES),
        )
    )
    return {"pending_ideas": 0, "new_activities": result.scalar() or 0}
