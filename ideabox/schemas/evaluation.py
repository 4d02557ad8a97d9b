"""Evaluation Pydantic schemas."""

from typing import Optional

from ideabox.schemas.base import CamelModel
from ideabox.schemas.idea import EvaluationOut, IdeaOut


class EvaluationCreate(CamelModel):
    idea_id: Optional[int] = None
    decision: Optional[str] = None
    comment: Optional[str] = None


class EvaluationResult(CamelModel):
    idea: IdeaOut
    evaluation: EvaluationOut
