from datetime import datetime

from pydantic import Field

from .athlete import AthleteResponse
from .base import CamelModel


class TagCount(CamelModel):
    tag_id: int
    name: str
    description: str | None = None
    count: int


class DashboardSummary(CamelModel):
    session_count: int
    total_tags: int
    average_tags_per_session: float
    distinct_tags_count: int
    most_used_tag: TagCount | None = None


class DashboardSession(CamelModel):
    session_id: int
    video_url: str
    notes: str | None = None
    created_at: datetime
    tag_count: int


class AthleteDashboardResponse(CamelModel):
    athlete: AthleteResponse
    summary: DashboardSummary
    recent_sessions: list[DashboardSession] = Field(default_factory=list)
    top_tags: list[TagCount] = Field(default_factory=list)


class TagStatsResponse(CamelModel):
    athlete_id: int
    total_tag_applications: int
    top_tags: list[TagCount] = Field(default_factory=list)


class SessionStatsResponse(CamelModel):
    athlete_id: int
    session_count: int
    total_tags: int
    average_tags_per_session: float
    sessions: list[DashboardSession] = Field(default_factory=list)
