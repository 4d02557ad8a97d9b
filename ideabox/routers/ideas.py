"""Ideas router: submit, list, detail, review status and votes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ideabox.database import get_db
from ideabox.models.user import User
from ideabox.routers.auth import require_user
from ideabox.schemas.idea import (
    IdeaCreate,
    IdeaDetailResponse,
    IdeaListResponse,
    IdeaOut,
    IdeaResponse,
    VoteInfo,
)
from ideabox.services import ideas, policies, votes

router = APIRouter(prefix="/ideas", tags=["ideas"])


# ═══════════════════════════════════════════════════════════════
#  POST /ideas → submit a new idea
# ═══════════════════════════════════════════════════════════════

@router.post("", response_model=IdeaResponse, status_code=status.HTTP_201_CREATED)
async def submit_idea(
    payload: IdeaCreate,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    idea = await ideas.submit_idea(db, current_user, payload)
    return IdeaResponse(idea=IdeaOut.model_validate(idea))


# ═══════════════════════════════════════════════════════════════
#  GET /ideas → visibility-scoped list with vote info
# ═══════════════════════════════════════════════════════════════

@router.get("", response_model=IdeaListResponse)
async def list_ideas(
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Admins see every idea; others see their own plus all public ideas."""
    return IdeaListResponse(ideas=await ideas.list_ideas_with_votes(db, current_user))


# ═══════════════════════════════════════════════════════════════
#  GET /ideas/{idea_id} → detail
# ═══════════════════════════════════════════════════════════════

@router.get("/{idea_id}", response_model=IdeaDetailResponse)
async def get_idea(
    idea_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    return IdeaDetailResponse(idea=await ideas.get_idea_detail(db, idea_id, current_user))


# ═══════════════════════════════════════════════════════════════
#  PATCH /ideas/{idea_id}/status → mark under review (admin)
# ═══════════════════════════════════════════════════════════════

@router.patch("/{idea_id}/status", response_model=IdeaResponse)
async def mark_under_review(
    idea_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    idea = await ideas.mark_under_review(db, idea_id, current_user)
    return IdeaResponse(idea=IdeaOut.model_validate(idea))


# ═══════════════════════════════════════════════════════════════
#  Votes
# ═══════════════════════════════════════════════════════════════

@router.post("/{idea_id}/vote", response_model=VoteInfo)
async def toggle_vote(
    idea_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    """Vote on a public idea, or take the vote back if already cast."""
    return await votes.toggle_vote(db, idea_id, current_user.id)


@router.get("/{idea_id}/votes", response_model=VoteInfo)
async def get_votes(
    idea_id: int,
    current_user: User = Depends(require_user),
    db: AsyncSession = Depends(get_db),
):
    idea = await ideas.get_idea_or_404(db, idea_id)
    policies.ensure_can_view(current_user, idea)
    return await votes.vote_info(db, idea_id, current_user.id)
