"""User model: the actor identity handed to the workflow."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ideabox.database import Base


class Role(str, enum.Enum):
    ADMIN = "admin"
    SUBMITTER = "submitter"


class User(Base):
    __tablename__ = "users"

    # ── Identity ──
    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    full_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    role: Mapped[Role] = mapped_column(
        Enum(Role, values_callable=lambda e: [m.value for m in e]),
        default=Role.SUBMITTER,
        nullable=False,
    )

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
