import asyncio

import ideabox.models  # noqa: F401
from ideabox.database import Base, async_session, engine
from ideabox.models.user import Role, User
from ideabox.schemas.idea import IdeaCreate
from ideabox.services import evaluation, ideas, votes


async def async_main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        # Create users
        admin = User(email="admin@example.com", full_name="Ada Admin", role=Role.ADMIN)
        alice = User(email="alice@example.com", full_name="Alice Builder", role=Role.SUBMITTER)
        bob = User(email="bob@example.com", full_name="Bob Designer", role=Role.SUBMITTER)
        session.add_all([admin, alice, bob])
        await session.commit()

        # Alice shares one idea publicly and keeps one private
        standups = await ideas.submit_idea(session, alice, IdeaCreate(
            title="Shorter stand-ups",
            description="Cap daily stand-ups at ten minutes and move details to threads.",
            category="process_improvement",
            is_public=True,
        ))
        await ideas.submit_idea(session, alice, IdeaCreate(
            title="Shared test fixtures",
            description="Publish a fixtures package every team can reuse.",
            category="product_idea",
        ))

        # Bob votes and the admin works through the queue
        await votes.toggle_vote(session, standups.id, bob.id)
        await ideas.mark_under_review(session, standups.id, admin)
        await evaluation.evaluate(session, standups.id, admin, "accepted", "Trial it for a sprint.")

        ids = {u.email: u.id for u in (admin, alice, bob)}

    await engine.dispose()
    print("Database seeded successfully. Log in locally with:")
    for email, user_id in ids.items():
        print(f"  GET /dev/login/{user_id}   ({email})")

asyncio.run(async_main())
