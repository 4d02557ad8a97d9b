"""Evaluations router: admin decisions on ideas."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.database import get_db
from ideabox.errors import ValidationError
from ideabox.models.user import User
from ideabox.routers.auth import require_admin
from ideabox.schemas.evaluation import EvaluationCreate, EvaluationResult
from ideabox.schemas.idea import EvaluationOut, IdeaOut
from ideabox.services import evaluation

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.post("", response_model=EvaluationResult, status_code=status.HTTP_201_CREATED)
async def evaluate_idea(
    payload: EvaluationCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Accept or reject an idea; a comment is mandatory."""
    if not payload.idea_id:
        raise ValidationError("Field 'ideaId' is required.")

    idea, record = await evaluation.evaluate(
        db, payload.idea_id, current_user, payload.decision, payload.comment
    )
    return EvaluationResult(
        idea=IdeaOut.model_validate(idea),
        evaluation=EvaluationOut.model_validate(record),
    )
