"""
IdeaBox: FastAPI application entry-point.

Run with:
    uvicorn ideabox.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

import ideabox.models  # noqa: F401  (register tables on Base.metadata)
from ideabox.config import settings
from ideabox.database import Base, engine, get_db
from ideabox.errors import NotFoundError
from ideabox.logging_config import setup_logging
from ideabox.models.user import User

# ── Import routers ──
from ideabox.routers import activities, auth, evaluations, ideas, notifications, users

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected server error occurred. Please try again later."


# ── Lifespan: configure logging, create tables on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL.upper())
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Employee idea submission, peer voting and admin evaluation.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))


# ── Error rendering: every error body is {"detail": "<message>"} ──
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request."
    return JSONResponse({"detail": message}, status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse({"detail": GENERIC_ERROR}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


# ── Register API routers ──
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(ideas.router)
app.include_router(evaluations.router)
app.include_router(notifications.router)
app.include_router(activities.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


# Stand-in for the identity provider while developing locally.
if settings.ENVIRONMENT != "production":

    @app.get("/dev/login/{user_id}")
    async def dev_login(user_id: int, db: AsyncSession = Depends(get_db)):
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User not found.")
        response = JSONResponse({"id": user.id, "role": user.role.value})
        return auth.set_auth_cookie(response, user)
