from datetime import datetime

from pydantic import Field

from .base import CamelModel


class OutcomeRate(CamelModel):
    successes: int
    failures: int
    # null when there were no applications; ``display`` is always set
    rate: float | None = None
    display: str


class TrendPoint(CamelModel):
    session_id: int
    date: datetime
    count: int


class StrengthCount(CamelModel):
    name: str
    count: int


class AthleteStatsResponse(CamelModel):
    session_count: int
    offensive: OutcomeRate
    defensive: OutcomeRate
    weakness: str | None = None
    weakness_trend: list[TrendPoint] = Field(default_factory=list)
    strengths: list[StrengthCount] = Field(default_factory=list)
