"""
Authentication seam: JWT cookie → (user id, role).

Credential issuance belongs to the external identity provider; this module
only verifies the signed token it leaves behind and loads the user row.

Endpoints:
    GET  /auth/logout  → clear JWT cookie
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.config import settings
from ideabox.database import get_db
from ideabox.errors import ForbiddenError, UnauthorizedError
from ideabox.models.user import Role, User

router = APIRouter(prefix="/auth", tags=["auth"])

COOKIE_KEY = "access_token"


# ═══════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT with an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def set_auth_cookie(response: Response, user: User) -> Response:
    """Attach the JWT cookie to a response."""
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    response.set_cookie(
        key=COOKIE_KEY,
        value=token,
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
    )
    return response


def _token_from_request(request: Request) -> Optional[str]:
    token = request.cookies.get(COOKIE_KEY)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Extract the JWT from the cookie (or a Bearer header), decode it, and
    return the User. Returns None when no valid token is present.
    """
    token = _token_from_request(request)
    if not token:
        return None
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        user_id: int = int(payload.get("sub", 0))
        if not user_id:
            return None
    except (JWTError, ValueError):
        return None

    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def require_user(current_user: Optional[User] = Depends(get_current_user)) -> User:
    """Dependency for routes that need an authenticated actor."""
    if not current_user:
        raise UnauthorizedError("Authentication required.")
    return current_user


async def require_admin(current_user: User = Depends(require_user)) -> User:
    if current_user.role != Role.ADMIN:
        raise ForbiddenError("You do not have permission to perform this action.")
    return current_user


# ═══════════════════════════════════════════════════════════════
#  Logout
# ═══════════════════════════════════════════════════════════════

@router.get("/logout")
async def logout():
    """Clear the auth cookie."""
    response = JSONResponse({"success": True}, status_code=status.HTTP_200_OK)
    response.delete_cookie(key=COOKIE_KEY)
    return response
