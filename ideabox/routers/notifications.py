"""Notifications router: fetch, badge counts, read and mark-all-read."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.database import get_db
from ideabox.models.user import User
from ideabox.routers.auth import require_user
from ideabox.schemas.notification import NotificationCount, NotificationList, NotificationOut
from ideabox.services import notifications

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationList)
async def get_notifications(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Return the latest notifications + unread count for the current user."""
    items = await notifications.list_for_user(db, current_user.id)
    return NotificationList(
        notifications=[NotificationOut.model_validate(n) for n in items],
        unread_count=await notifications.count_unread(db, current_user.id),
    )


@router.get("/count", response_model=NotificationCount)
async def get_counts(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Role-aware badge: pending ideas for admins, decided ideas for submitters."""
    return NotificationCount(**await notifications.activity_summary(db, current_user))


# Declared before /{notif_id}/read so "read-all" is never taken for an id.
@router.patch("/read-all")
async def mark_all_read(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark all notifications as read for the current user."""
    await notifications.mark_all_read(db, current_user.id)
    return {"success": True}


@router.patch("/{notif_id}/read")
async def mark_read(
    notif_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark a single notification as read; unknown ids succeed as a no-op."""
    await notifications.mark_read(db, notif_id, user_id=current_user.id)
    return {"success": True}
