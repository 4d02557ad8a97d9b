"""User Pydantic schemas."""

from datetime import datetime
from typing import Optional

from ideabox.models.user import Role
from ideabox.schemas.base import CamelModel


class UserOut(CamelModel):
    """Public user representation returned by the API."""
    id: int
    email: str
    full_name: str
    role: Role
    created_at: Optional[datetime] = None
