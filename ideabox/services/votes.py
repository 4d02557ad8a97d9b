"""Vote ledger for public ideas.

The ``(idea_id, user_id)`` primary key is the only record of a vote. Toggling
deletes first and inserts only when nothing was deleted, with the insert
ignoring a concurrent duplicate, so no decision is taken on a stale read.
"""

from typing import Dict, List, Sequence, Set

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.database import dialect_insert
from ideabox.errors import ForbiddenError, NotFoundError
from ideabox.models.idea import Idea
from ideabox.models.vote import Vote
from ideabox.schemas.idea import IdeaOut, VoteInfo


async def count_votes(db: AsyncSession, idea_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(Vote).where(Vote.idea_id == idea_id)
    )
    return result.scalar() or 0


async def toggle_vote(db: AsyncSession, idea_id: int, user_id: int) -> VoteInfo:
    result = await db.execute(select(Idea.is_public).where(Idea.id == idea_id))
    is_public = result.scalar_one_or_none()
    if is_public is None:
        raise NotFoundError("Idea not found.")
    if not is_public:
        raise ForbiddenError("You can only vote on public ideas.")

    removed = await db.execute(
        delete(Vote).where(Vote.idea_id == idea_id, Vote.user_id == user_id)
    )
    if removed.rowcount:
        has_voted = False
    else:
        insert = dialect_insert(db)
        await db.execute(
            insert(Vote)
            .values(idea_id=idea_id, user_id=user_id)
            .on_conflict_do_nothing(index_elements=["idea_id", "user_id"])
        )
        has_voted = True

    await db.commit()
    return VoteInfo(vote_count=await count_votes(db, idea_id), has_voted=has_voted)


async def vote_info(db: AsyncSession, idea_id: int, user_id: int) -> VoteInfo:
    result = await db.execute(
        select(Vote.user_id).where(Vote.idea_id == idea_id, Vote.user_id == user_id)
    )
    return VoteInfo(
        vote_count=await count_votes(db, idea_id),
        has_voted=result.scalar_one_or_none() is not None,
    )


async def vote_maps(db: AsyncSession, idea_ids: Sequence[int], user_id: int):
    """Vote counts and the user's voted set for a batch, in two queries."""
    if not idea_ids:
        return {}, set()

    count_rows = await db.execute(
        select(Vote.idea_id, func.count())
        .where(Vote.idea_id.in_(idea_ids))
        .group_by(Vote.idea_id)
    )
    counts: Dict[int, int] = {idea_id: count for idea_id, count in count_rows.all()}

    voted_rows = await db.execute(
        select(Vote.idea_id).where(Vote.user_id == user_id, Vote.idea_id.in_(idea_ids))
    )
    voted: Set[int] = set(voted_rows.scalars().all())
    return counts, voted


async def enrich_with_votes(db: AsyncSession, ideas: Sequence[Idea], user_id: int) -> List[IdeaOut]:
    counts, voted = await vote_maps(db, [idea.id for idea in ideas], user_id)
    return [
        IdeaOut.model_validate(idea).model_copy(
            update={"vote_count": counts.get(idea.id, 0), "has_voted": idea.id in voted}
        )
        for idea in ideas
    ]
