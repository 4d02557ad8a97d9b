import asyncio
import os
import tempfile

# Point the app at a throwaway database before anything imports ideabox.
_TMP_DIR = tempfile.mkdtemp(prefix="ideabox-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'app.db')}"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

import ideabox.models  # noqa: F401
from ideabox.database import Base, build_engine, get_db
from ideabox.main import app
from ideabox.models.idea import Category, Idea, IdeaStatus
from ideabox.models.user import Role, User


def _engine_for(path):
    return build_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)


async def _create_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ═══════════════════════════════════════════════════════════════
#  Service-level fixtures (async)
# ═══════════════════════════════════════════════════════════════

@pytest.fixture
async def engine(tmp_path):
    engine = _engine_for(tmp_path / "service.db")
    await _create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine):
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    async def _make_user(role=Role.SUBMITTER, email=None):
        counter["n"] += 1
        user = User(
            email=email or f"{role.value}{counter['n']}@example.com",
            full_name=f"{role.value.title()} {counter['n']}",
            role=role,
        )
        db.add(user)
        await db.commit()
        return user

    return _make_user


@pytest.fixture
def make_idea(db):
    async def _make_idea(submitter, is_public=False, title="Shorter stand-ups", status=IdeaStatus.SUBMITTED):
        idea = Idea(
            title=title,
            description="Cap daily stand-ups at ten minutes.",
            category=Category.PROCESS_IMPROVEMENT,
            status=status,
            submitter_id=submitter.id,
            is_public=is_public,
        )
        db.add(idea)
        await db.commit()
        await db.refresh(idea)
        return idea

    return _make_idea


# ═══════════════════════════════════════════════════════════════
#  HTTP fixtures (sync, TestClient)
# ═══════════════════════════════════════════════════════════════

class Seeder:
    """Creates rows directly in the test database from synchronous tests."""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._n = 0

    async def _add_user(self, email, role):
        async with self.session_factory() as session:
            user = User(email=email, full_name=email.split("@")[0], role=role)
            session.add(user)
            await session.commit()
            return user.id

    def user(self, role=Role.SUBMITTER, email=None) -> int:
        self._n += 1
        email = email or f"{role.value}{self._n}@example.com"
        return asyncio.run(self._add_user(email, role))


@pytest.fixture
def api_db(tmp_path):
    engine = _engine_for(tmp_path / "api.db")
    asyncio.run(_create_tables(engine))
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    yield Seeder(session_factory)
    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


@pytest.fixture
def client(api_db):
    return TestClient(app)
