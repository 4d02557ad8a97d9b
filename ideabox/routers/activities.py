"""Activity feed and admin statistics."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.database import get_db
from ideabox.models.user import User
from ideabox.routers.auth import require_admin, require_user
from ideabox.schemas.notification import ActivityList, ActivityOut
from ideabox.schemas.stats import StatsResponse
from ideabox.services import activity, stats

router = APIRouter(tags=["activity"])


@router.get("/activities", response_model=ActivityList)
async def list_activities(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """The most recent lifecycle events, newest first."""
    items = await activity.recent_activities(db)
    return ActivityList(activities=[ActivityOut.model_validate(a) for a in items])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return StatsResponse(stats=await stats.get_stats(db))
