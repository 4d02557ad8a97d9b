"""StatusHistoryEntry model: append-only log of idea status transitions."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from ideabox.database import Base
from ideabox.models.idea import IdeaStatus


class StatusHistoryEntry(Base):
    __tablename__ = "idea_status_history"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    idea_id: Mapped[int] = mapped_column(
        ForeignKey("ideas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[IdeaStatus] = mapped_column(
        Enum(IdeaStatus, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    changed_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"))
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
