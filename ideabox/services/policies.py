"""Access policy: who may see or act on an idea.

Pure decisions over an actor (``id``, ``role``) and an idea (``submitter_id``,
``is_public``); nothing here touches the database.
"""

from ideabox.config import settings
from ideabox.errors import ForbiddenError
from ideabox.models.user import Role


def is_admin(actor) -> bool:
    return actor.role == Role.ADMIN


def is_owner(actor, idea) -> bool:
    return idea.submitter_id == actor.id


def can_view(actor, idea) -> bool:
    return is_admin(actor) or is_owner(actor, idea) or bool(idea.is_public)


def can_act(actor, idea=None) -> bool:
    """Admin-only lifecycle actions (mark under review, evaluate)."""
    return is_admin(actor)


def can_evaluate(actor, idea, allow_self_evaluation=None) -> bool:
    if allow_self_evaluation is None:
        allow_self_evaluation = settings.ALLOW_SELF_EVALUATION
    if not can_act(actor, idea):
        return False
    return allow_self_evaluation or not is_owner(actor, idea)


def ensure_can_view(actor, idea) -> None:
    if not can_view(actor, idea):
        raise ForbiddenError("You do not have permission to view this idea.")


def ensure_can_act(actor, idea=None) -> None:
    if not can_act(actor, idea):
        raise ForbiddenError("Admin access required.")


def ensure_can_evaluate(actor, idea) -> None:
    ensure_can_act(actor, idea)
    if not can_evaluate(actor, idea):
        raise ForbiddenError("You cannot evaluate an idea you submitted.")
