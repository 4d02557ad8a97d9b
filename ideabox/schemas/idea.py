"""Idea Pydantic schemas: submission input, list/detail output, vote info."""

from datetime import datetime
from typing import List, Optional

from ideabox.models.evaluation import Decision
from ideabox.models.idea import Category, IdeaStatus
from ideabox.schemas.base import CamelModel


class AttachmentIn(CamelModel):
    """Metadata of a blob already accepted by the attachment store."""
    filename: str
    original_name: str
    mimetype: str
    size: int


class AttachmentOut(AttachmentIn):
    id: int
    idea_id: int
    created_at: Optional[datetime] = None


class IdeaCreate(CamelModel):
    # Left loosely typed so the service can report which field is wrong.
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_public: bool = False
    attachment: Optional[AttachmentIn] = None


class VoteInfo(CamelModel):
    vote_count: int = 0
    has_voted: bool = False


class IdeaOut(VoteInfo):
    id: int
    title: str
    description: str
    category: Category
    status: IdeaStatus
    submitter_id: int
    submitter_email: str = ""
    is_public: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EvaluationOut(CamelModel):
    id: int
    idea_id: int
    admin_id: int
    admin_email: str = ""
    decision: Decision
    comment: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StatusHistoryOut(CamelModel):
    id: int
    idea_id: int
    status: IdeaStatus
    changed_by: Optional[int] = None
    timestamp: Optional[datetime] = None


class IdeaDetailOut(IdeaOut):
    attachments: List[AttachmentOut] = []
    evaluation: Optional[EvaluationOut] = None
    status_history: List[StatusHistoryOut] = []


class IdeaResponse(CamelModel):
    idea: IdeaOut


class IdeaDetailResponse(CamelModel):
    idea: IdeaDetailOut


class IdeaListResponse(CamelModel):
    ideas: List[IdeaOut]
