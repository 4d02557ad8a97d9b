"""Activity feed and per-idea status history: both append-only."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.config import settings
from ideabox.models.activity import Activity, ActivityType
from ideabox.models.idea import IdeaStatus
from ideabox.models.status_history import StatusHistoryEntry

# Activity emitted for the status an idea is moved into.
ACTIVITY_FOR_STATUS = {
    IdeaStatus.SUBMITTED: ActivityType.IDEA_SUBMITTED,
    IdeaStatus.UNDER_REVIEW: ActivityType.IDEA_UNDER_REVIEW,
    IdeaStatus.ACCEPTED: ActivityType.IDEA_ACCEPTED,
    IdeaStatus.REJECTED: ActivityType.IDEA_REJECTED,
}


async def record_activity(
    db: AsyncSession,
    activity_type: ActivityType,
    user_email: str,
    idea_id: Optional[int],
    idea_title: str,
) -> Activity:
    activity = Activity(
        type=activity_type,
        user_email=user_email,
        idea_id=idea_id,
        idea_title=idea_title,
    )
    db.add(activity)
    await db.flush()
    return activity


async def recent_activities(db: AsyncSession, limit: Optional[int] = None) -> List[Activity]:
    """Return the most recent activity events, newest first."""
    result = await db.execute(
        select(Activity)
        .order_by(Activity.timestamp.desc(), Activity.id.desc())
        .limit(limit or settings.ACTIVITY_FEED_LIMIT)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def record_status_change(
    db: AsyncSession, idea_id: int, status: IdeaStatus, changed_by: Optional[int]
) -> StatusHistoryEntry:
    entry = StatusHistoryEntry(idea_id=idea_id, status=status, changed_by=changed_by)
    db.add(entry)
    await db.flush()
    return entry


async def status_history(db: AsyncSession, idea_id: int) -> List[StatusHistoryEntry]:
    """Full ordered history for an idea, oldest first."""
    result = await db.execute(
        select(StatusHistoryEntry)
        .where(StatusHistoryEntry.idea_id == idea_id)
        .order_by(StatusHistoryEntry.timestamp.asc(), StatusHistoryEntry.id.asc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
