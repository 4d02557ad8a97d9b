"""Aggregated idea statistics for the admin dashboard."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.models.idea import Idea, IdeaStatus
from ideabox.schemas.stats import IdeaStats


async def get_stats(db: AsyncSession) -> IdeaStats:
    status_rows = await db.execute(
        select(Idea.status, func.count(Idea.id)).group_by(Idea.status)
    )
    by_status = {IdeaStatus(status): count for status, count in status_rows.all()}

    total = sum(by_status.values())
    accepted = by_status.get(IdeaStatus.ACCEPTED, 0)
    rejected = by_status.get(IdeaStatus.REJECTED, 0)
    pending = by_status.get(IdeaStatus.SUBMITTED, 0) + by_status.get(IdeaStatus.UNDER_REVIEW, 0)

    count_col = func.count(Idea.id).label("count")
    category_rows = await db.execute(
        select(Idea.category, count_col)
        .group_by(Idea.category)
        .order_by(count_col.desc())
    )
    category_counts = {getattr(c, "value", c): n for c, n in category_rows.all()}

    return IdeaStats(
        total_ideas=total,
        pending_review=pending,
        accepted_ideas=accepted,
        rejected_ideas=rejected,
        acceptance_rate=round(accepted / total * 100) if total else 0,
        category_counts=category_counts,
        most_popular_category=next(iter(category_counts), None),
    )
