"""Idea statistics schema for the admin dashboard."""

from typing import Dict, Optional

from ideabox.schemas.base import CamelModel


class IdeaStats(CamelModel):
    total_ideas: int = 0
    pending_review: int = 0
    accepted_ideas: int = 0
    rejected_ideas: int = 0
    acceptance_rate: int = 0
    category_counts: Dict[str, int] = {}
    most_popular_category: Optional[str] = None


class StatsResponse(CamelModel):
    stats: IdeaStats
