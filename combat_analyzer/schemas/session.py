from datetime import datetime

from pydantic import Field

from .base import CamelModel
from .tag import TagResponse


class SessionCreate(CamelModel):
    video_url: str = Field(min_length=1, max_length=1024)
    notes: str | None = None


class SessionResponse(CamelModel):
    id: int
    athlete_id: int
    video_url: str
    notes: str | None = None
    created_at: datetime


class SessionTagCreate(CamelModel):
    tag_id: int
    timestamp_sec: int | None = Field(default=None, ge=0)
    note: str | None = None


class SessionTagResponse(CamelModel):
    id: int
    session_id: int
    tag_id: int
    timestamp_sec: int | None = None
    note: str | None = None
    created_at: datetime
    tag: TagResponse | None = None


class SessionWithTagsResponse(SessionResponse):
    session_tags: list[SessionTagResponse] = Field(default_factory=list)
