"""Activity model: global feed of lifecycle events."""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ideabox.database import Base


class ActivityType(str, enum.Enum):
    IDEA_SUBMITTED = "idea_submitted"
    IDEA_UNDER_REVIEW = "idea_under_review"
    IDEA_ACCEPTED = "idea_accepted"
    IDEA_REJECTED = "idea_rejected"


class Activity(Base):
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    type: Mapped[ActivityType] = mapped_column(
        Enum(ActivityType, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    idea_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("ideas.id", ondelete="CASCADE"), index=True
    )
    idea_title: Mapped[str] = mapped_column(String(200), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
