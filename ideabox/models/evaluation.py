"""Evaluation model: one admin decision per idea, overwritten on re-evaluation."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ideabox.database import Base


class Decision(str, enum.Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Evaluation(Base):
    __tablename__ = "evaluations"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    idea_id: Mapped[int] = mapped_column(
        ForeignKey("ideas.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    admin_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    decision: Mapped[Decision] = mapped_column(
        Enum(Decision, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    admin: Mapped["User"] = relationship("User", lazy="joined")  # noqa: F821

    @property
    def admin_email(self) -> str:
        return self.admin.email if self.admin else ""
