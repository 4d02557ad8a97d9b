"""Evaluation engine: upsert an admin decision and sync the idea status."""

import logging
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.database import dialect_insert
from ideabox.errors import NotFoundError, ValidationError
from ideabox.models.activity import ActivityType
from ideabox.models.evaluation import Decision, Evaluation
from ideabox.models.idea import Idea, IdeaStatus
from ideabox.models.notification import NotificationType
from ideabox.models.user import User
from ideabox.services import activity, ideas, notifications, policies
from ideabox.services.side_effects import SideEffect, run_best_effort

logger = logging.getLogger(__name__)

VALID_DECISIONS = [d.value for d in Decision]

_NOTIFICATION_FOR_DECISION = {
    Decision.ACCEPTED: NotificationType.ACCEPTED,
    Decision.REJECTED: NotificationType.REJECTED,
}


async def upsert_evaluation(
    db: AsyncSession, idea_id: int, admin_id: int, decision: Decision, comment: str
) -> None:
    """Insert the evaluation, or overwrite the existing one for this idea."""
    insert = dialect_insert(db)
    stmt = insert(Evaluation).values(
        idea_id=idea_id, admin_id=admin_id, decision=decision, comment=comment
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["idea_id"],
        set_={
            "admin_id": stmt.excluded.admin_id,
            "decision": stmt.excluded.decision,
            "comment": stmt.excluded.comment,
            "updated_at": func.now(),
        },
    )
    await db.execute(stmt)


async def evaluate(
    db: AsyncSession,
    idea_id: int,
    actor: User,
    decision: Optional[str],
    comment: Optional[str],
) -> Tuple[Idea, Evaluation]:
    """Record (or replace) a decision on an idea and move it to that status.

    Re-evaluating an already decided idea overwrites both the evaluation and
    the status unless STRICT_STATUS_TRANSITIONS is enabled.
    """
    policies.ensure_can_act(actor)
    if decision not in VALID_DECISIONS:
        raise ValidationError(f"Decision must be one of: {', '.join(VALID_DECISIONS)}.")
    comment = (comment or "").strip()
    if not comment:
        raise ValidationError("A comment is required for every evaluation.")

    idea = await ideas.get_idea_or_404(db, idea_id)
    policies.ensure_can_evaluate(actor, idea)

    decision = Decision(decision)
    new_status = IdeaStatus(decision.value)
    ideas.check_transition(idea.status, new_status)

    submitter_id, title = idea.submitter_id, idea.title
    await upsert_evaluation(db, idea_id, actor.id, decision, comment)
    await ideas.set_status(db, idea_id, new_status)
    await db.commit()

    logger.info(f"Idea {idea_id} {decision.value} by user {actor.id}")
    activity_type = activity.ACTIVITY_FOR_STATUS[new_status]
    await run_best_effort(
        db,
        [
            SideEffect(
                "activity",
                lambda: activity.record_activity(db, activity_type, actor.email, idea_id, title),
            ),
            SideEffect(
                "status_history",
                lambda: activity.record_status_change(db, idea_id, new_status, actor.id),
            ),
            SideEffect(
                "notify_submitter",
                lambda: notifications.notify_submitter(
                    db, submitter_id, idea_id, title, _NOTIFICATION_FOR_DECISION[decision]
                ),
            ),
        ],
    )

    updated_idea = await ideas.get_idea_or_404(db, idea_id)
    evaluation = await ideas.get_evaluation(db, idea_id)
    if evaluation is None:
        raise NotFoundError("Evaluation not found.")
    return updated_idea, evaluation
