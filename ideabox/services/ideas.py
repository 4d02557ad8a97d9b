"""Idea store: submission, visibility-scoped queries and status changes."""

import logging
from typing import Dict, FrozenSet, List, Optional, Tuple

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.config import settings
from ideabox.errors import ConflictError, NotFoundError, ValidationError
from ideabox.models.activity import ActivityType
from ideabox.models.attachment import Attachment
from ideabox.models.evaluation import Evaluation
from ideabox.models.idea import Category, Idea, IdeaStatus
from ideabox.models.notification import NotificationType
from ideabox.models.user import User
from ideabox.schemas.idea import (
    AttachmentOut,
    EvaluationOut,
    IdeaCreate,
    IdeaDetailOut,
    IdeaOut,
    StatusHistoryOut,
)
from ideabox.services import activity, notifications, policies, votes
from ideabox.services.side_effects import SideEffect, run_best_effort

logger = logging.getLogger(__name__)

VALID_CATEGORIES = [c.value for c in Category]
MAX_TITLE_LENGTH = 200

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",  # .docx
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",        # .xlsx
    "image/png",
    "image/jpeg",
}

# Only consulted when STRICT_STATUS_TRANSITIONS is on.
ALLOWED_TRANSITIONS: Dict[IdeaStatus, FrozenSet[IdeaStatus]] = {
    IdeaStatus.SUBMITTED: frozenset(
        {IdeaStatus.UNDER_REVIEW, IdeaStatus.ACCEPTED, IdeaStatus.REJECTED}
    ),
    IdeaStatus.UNDER_REVIEW: frozenset({IdeaStatus.ACCEPTED, IdeaStatus.REJECTED}),
    IdeaStatus.ACCEPTED: frozenset(),
    IdeaStatus.REJECTED: frozenset(),
}


def check_transition(current: IdeaStatus, target: IdeaStatus, strict: Optional[bool] = None) -> None:
    """Raise ``ConflictError`` for an illegal move when strict transitions are on."""
    if strict is None:
        strict = settings.STRICT_STATUS_TRANSITIONS
    if strict and target not in ALLOWED_TRANSITIONS[IdeaStatus(current)]:
        raise ConflictError(
            f"Cannot move an idea from '{IdeaStatus(current).value}' to '{target.value}'."
        )


# ═══════════════════════════════════════════════════════════════
#  Lookups
# ═══════════════════════════════════════════════════════════════

async def get_idea(db: AsyncSession, idea_id: int) -> Optional[Idea]:
    result = await db.execute(
        select(Idea)
        .where(Idea.id == idea_id)
        .execution_options(populate_existing=True)
    )
    return result.unique().scalar_one_or_none()


async def get_idea_or_404(db: AsyncSession, idea_id: int) -> Idea:
    idea = await get_idea(db, idea_id)
    if not idea:
        raise NotFoundError("Idea not found.")
    return idea


async def list_ideas(db: AsyncSession, actor: User) -> List[Idea]:
    """Every idea for admins; own plus public ideas for everyone else."""
    stmt = select(Idea).order_by(Idea.created_at.desc(), Idea.id.desc())
    if not policies.is_admin(actor):
        stmt = stmt.where(or_(Idea.submitter_id == actor.id, Idea.is_public.is_(True)))
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return list(result.unique().scalars().all())


async def list_ideas_with_votes(db: AsyncSession, actor: User) -> List[IdeaOut]:
    ideas = await list_ideas(db, actor)
    return await votes.enrich_with_votes(db, ideas, actor.id)


async def get_attachments(db: AsyncSession, idea_id: int) -> List[Attachment]:
    result = await db.execute(
        select(Attachment)
        .where(Attachment.idea_id == idea_id)
        .order_by(Attachment.created_at.desc(), Attachment.id.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_evaluation(db: AsyncSession, idea_id: int) -> Optional[Evaluation]:
    result = await db.execute(
        select(Evaluation)
        .where(Evaluation.idea_id == idea_id)
        .execution_options(populate_existing=True)
    )
    return result.unique().scalar_one_or_none()


async def get_idea_detail(db: AsyncSession, idea_id: int, actor: User) -> IdeaDetailOut:
    """Idea with attachments, evaluation, status history and vote info."""
    idea = await get_idea_or_404(db, idea_id)
    policies.ensure_can_view(actor, idea)

    vote = await votes.vote_info(db, idea_id, actor.id)
    evaluation = await get_evaluation(db, idea_id)
    history = await activity.status_history(db, idea_id)
    attachments = await get_attachments(db, idea_id)

    return IdeaDetailOut.model_validate(idea).model_copy(
        update={
            "vote_count": vote.vote_count,
            "has_voted": vote.has_voted,
            "attachments": [AttachmentOut.model_validate(a) for a in attachments],
            "evaluation": EvaluationOut.model_validate(evaluation) if evaluation else None,
            "status_history": [StatusHistoryOut.model_validate(h) for h in history],
        }
    )


# ═══════════════════════════════════════════════════════════════
#  Submission
# ═══════════════════════════════════════════════════════════════

def _validate_submission(data: IdeaCreate) -> Tuple[str, str, Category]:
    title = (data.title or "").strip()
    description = (data.description or "").strip()
    if not title:
        raise ValidationError("Title is required.")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters.")
    if not description:
        raise ValidationError("Description is required.")
    if not data.category or data.category not in VALID_CATEGORIES:
        raise ValidationError(f"Category must be one of: {', '.join(VALID_CATEGORIES)}.")

    if data.attachment is not None:
        if data.attachment.mimetype not in ALLOWED_MIME_TYPES:
            raise ValidationError("Invalid file type. Allowed: PDF, DOCX, XLSX, PNG, JPG.")
        if data.attachment.size < 0 or data.attachment.size > settings.MAX_ATTACHMENT_BYTES:
            mb = settings.MAX_ATTACHMENT_BYTES // (1024 * 1024)
            raise ValidationError(f"File exceeds the {mb} MB size limit.")

    return title, description, Category(data.category)


async def submit_idea(db: AsyncSession, actor: User, data: IdeaCreate) -> Idea:
    """Create an idea (and its attachment record), then notify admins."""
    title, description, category = _validate_submission(data)

    idea = Idea(
        title=title,
        description=description,
        category=category,
        status=IdeaStatus.SUBMITTED,
        submitter_id=actor.id,
        is_public=data.is_public,
    )
    db.add(idea)
    await db.flush()  # to get idea.id

    if data.attachment is not None:
        db.add(
            Attachment(
                idea_id=idea.id,
                filename=data.attachment.filename,
                original_name=data.attachment.original_name,
                mimetype=data.attachment.mimetype,
                size=data.attachment.size,
            )
        )
    await db.commit()

    idea_id = idea.id
    logger.info(f"Idea {idea_id} submitted by user {actor.id}")
    await run_best_effort(
        db,
        [
            SideEffect(
                "notify_admins",
                lambda: notifications.notify_admins_of_submission(db, idea_id, title),
            ),
            SideEffect(
                "activity",
                lambda: activity.record_activity(
                    db, ActivityType.IDEA_SUBMITTED, actor.email, idea_id, title
                ),
            ),
            SideEffect(
                "status_history",
                lambda: activity.record_status_change(db, idea_id, IdeaStatus.SUBMITTED, actor.id),
            ),
        ],
    )
    return await get_idea_or_404(db, idea_id)


# ═══════════════════════════════════════════════════════════════
#  Status changes
# ═══════════════════════════════════════════════════════════════

async def set_status(db: AsyncSession, idea_id: int, status: IdeaStatus) -> None:
    await db.execute(update(Idea).where(Idea.id == idea_id).values(status=status))


async def mark_under_review(db: AsyncSession, idea_id: int, actor: User) -> Idea:
    """Admin moves an idea to ``under_review``.

    Permissive by default: the current status is not checked unless
    STRICT_STATUS_TRANSITIONS is enabled.
    """
    policies.ensure_can_act(actor)
    idea = await get_idea_or_404(db, idea_id)
    check_transition(idea.status, IdeaStatus.UNDER_REVIEW)

    submitter_id, title = idea.submitter_id, idea.title
    await set_status(db, idea_id, IdeaStatus.UNDER_REVIEW)
    await db.commit()

    logger.info(f"Idea {idea_id} marked under review by user {actor.id}")
    await run_best_effort(
        db,
        [
            SideEffect(
                "activity",
                lambda: activity.record_activity(
                    db, ActivityType.IDEA_UNDER_REVIEW, actor.email, idea_id, title
                ),
            ),
            SideEffect(
                "status_history",
                lambda: activity.record_status_change(
                    db, idea_id, IdeaStatus.UNDER_REVIEW, actor.id
                ),
            ),
            SideEffect(
                "notify_submitter",
                lambda: notifications.notify_submitter(
                    db, submitter_id, idea_id, title, NotificationType.UNDER_REVIEW
                ),
            ),
        ],
    )
    return await get_idea_or_404(db, idea_id)
