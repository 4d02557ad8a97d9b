"""Idea model: the aggregate root of the workflow."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ideabox.database import Base


def _values(enum_cls):
    return [m.value for m in enum_cls]


class Category(str, enum.Enum):
    PROCESS_IMPROVEMENT = "process_improvement"
    PRODUCT_IDEA = "product_idea"
    COST_REDUCTION = "cost_reduction"
    CUSTOMER_EXPERIENCE = "customer_experience"
    OTHER = "other"


class IdeaStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Idea(Base):
    __tablename__ = "ideas"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Category] = mapped_column(
        Enum(Category, values_callable=_values), nullable=False
    )
    status: Mapped[IdeaStatus] = mapped_column(
        Enum(IdeaStatus, values_callable=_values),
        default=IdeaStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    submitter_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # ── Relationships ──
    submitter: Mapped["User"] = relationship("User", lazy="joined")  # noqa: F821

    @property
    def submitter_email(self) -> str:
        return self.submitter.email if self.submitter else ""
