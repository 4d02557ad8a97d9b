"""Domain errors.

Each error is an ``HTTPException`` so services can raise it directly and
FastAPI renders it as ``{"detail": message}`` with the matching status code.
"""

from fastapi import HTTPException, status


class IdeaBoxError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(IdeaBoxError):
    """Malformed or missing input."""
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(IdeaBoxError):
    """No valid actor identity on the request."""
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(IdeaBoxError):
    """Role, ownership or visibility violation."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(IdeaBoxError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(IdeaBoxError):
    """Operation not allowed from the idea's current status."""
    status_code = status.HTTP_409_CONFLICT
