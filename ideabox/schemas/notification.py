"""Notification and activity-feed Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from ideabox.models.activity import ActivityType
from ideabox.models.notification import NotificationType
from ideabox.schemas.base import CamelModel


class NotificationOut(CamelModel):
    id: int
    user_id: int
    idea_id: Optional[int] = None
    type: NotificationType
    message: str
    is_read: bool
    created_at: Optional[datetime] = None


class NotificationList(CamelModel):
    notifications: List[NotificationOut]
    unread_count: int


class NotificationCount(CamelModel):
    pending_ideas: int = 0
    new_activities: int = 0


class ActivityOut(CamelModel):
    id: int
    type: ActivityType
    user_email: str
    idea_id: Optional[int] = None
    idea_title: str
    timestamp: Optional[datetime] = None


class ActivityList(CamelModel):
    activities: List[ActivityOut]
