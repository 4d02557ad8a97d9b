import pytest
from sqlalchemy import event, func, select

from ideabox.errors import ForbiddenError, NotFoundError
from ideabox.models.vote import Vote
from ideabox.services import votes


async def test_toggle_vote_is_its_own_inverse(db, make_user, make_idea):
    owner = await make_user()
    voter = await make_user()
    idea = await make_idea(owner, is_public=True)

    before = await votes.vote_info(db, idea.id, voter.id)
    first = await votes.toggle_vote(db, idea.id, voter.id)
    second = await votes.toggle_vote(db, idea.id, voter.id)

    assert (first.vote_count, first.has_voted) == (1, True)
    assert (second.vote_count, second.has_voted) == (before.vote_count, before.has_voted)


async def test_votes_from_different_users_accumulate(db, make_user, make_idea):
    owner = await make_user()
    idea = await make_idea(owner, is_public=True)
    voters = [await make_user() for _ in range(3)]

    for voter in voters:
        info = await votes.toggle_vote(db, idea.id, voter.id)

    assert info.vote_count == 3
    assert (await votes.vote_info(db, idea.id, owner.id)).has_voted is False


async def test_voting_on_private_idea_is_forbidden_for_everyone(db, make_user, make_idea):
    from ideabox.models.user import Role

    owner = await make_user()
    admin = await make_user(Role.ADMIN)
    idea = await make_idea(owner, is_public=False)

    for actor in (owner, admin):
        with pytest.raises(ForbiddenError):
            await votes.toggle_vote(db, idea.id, actor.id)

    count = await db.execute(select(func.count()).select_from(Vote))
    assert count.scalar() == 0


async def test_voting_on_missing_idea_is_not_found(db, make_user):
    voter = await make_user()
    with pytest.raises(NotFoundError):
        await votes.toggle_vote(db, 4242, voter.id)


async def test_stale_duplicate_insert_is_ignored(db, make_user, make_idea):
    owner = await make_user()
    voter = await make_user()
    idea = await make_idea(owner, is_public=True)

    db.add(Vote(idea_id=idea.id, user_id=voter.id))
    await db.commit()

    # A second request that raced past the delete must not create a second row.
    from ideabox.database import dialect_insert

    insert = dialect_insert(db)
    await db.execute(
        insert(Vote)
        .values(idea_id=idea.id, user_id=voter.id)
        .on_conflict_do_nothing(index_elements=["idea_id", "user_id"])
    )
    await db.commit()
    assert await votes.count_votes(db, idea.id) == 1


async def test_enrich_with_votes_uses_two_queries(db, engine, make_user, make_idea):
    owner = await make_user()
    voter = await make_user()
    ideas = [await make_idea(owner, is_public=True, title=f"Idea {i}") for i in range(5)]
    await votes.toggle_vote(db, ideas[0].id, voter.id)
    await votes.toggle_vote(db, ideas[2].id, voter.id)
    await votes.toggle_vote(db, ideas[2].id, owner.id)

    statements = []

    def _count(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            statements.append(statement)

    event.listen(engine.sync_engine, "before_cursor_execute", _count)
    try:
        enriched = await votes.enrich_with_votes(db, ideas, voter.id)
    finally:
        event.remove(engine.sync_engine, "before_cursor_execute", _count)

    assert len(statements) == 2
    by_id = {i.id: i for i in enriched}
    assert (by_id[ideas[0].id].vote_count, by_id[ideas[0].id].has_voted) == (1, True)
    assert (by_id[ideas[2].id].vote_count, by_id[ideas[2].id].has_voted) == (2, True)
    assert (by_id[ideas[1].id].vote_count, by_id[ideas[1].id].has_voted) == (0, False)


async def test_enrich_empty_batch_issues_no_queries(db):
    assert await votes.enrich_with_votes(db, [], 1) == []
