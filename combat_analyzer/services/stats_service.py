"""Per-athlete training statistics.

``compute_athlete_stats`` is pure: it reads sessions that already carry their
session tags (ORM rows or ``SessionWithTagsResponse`` models alike) and never
touches the database, so the API client can run it locally on data fetched
from ``/api/my/sessions?includeTags=true``.
"""

import math
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..models import TagCategory, TagOutcome
from ..schemas.stats import AthleteStatsResponse, OutcomeRate, StrengthCount, TrendPoint

RATE_PLACEHOLDER = "—"
MAX_STRENGTHS = 8


def format_rate(rate: float) -> str:
    if not math.isfinite(rate):
        return RATE_PLACEHOLDER
    # half-up, so 0.125 renders as 13%
    return f"{math.floor(rate * 100 + 0.5)}%"


@dataclass
class OutcomeTally:
    successes: int = 0
    failures: int = 0

    @property
    def rate(self) -> float:
        attempts = self.successes + self.failures
        if attempts == 0:
            return math.nan
        return self.successes / attempts

    def to_response(self) -> OutcomeRate:
        rate = self.rate
        return OutcomeRate(
            successes=self.successes,
            failures=self.failures,
            rate=rate if math.isfinite(rate) else None,
            display=format_rate(rate),
        )


@dataclass
class WeaknessPoint:
    session_id: int
    date: datetime
    count: int


@dataclass
class AthleteStats:
    session_count: int
    offensive: OutcomeTally
    defensive: OutcomeTally
    weakness: str | None = None
    weakness_trend: list[WeaknessPoint] = field(default_factory=list)
    strengths: list[tuple[str, int]] = field(default_factory=list)

    @property
    def offensive_rate(self) -> float:
        return self.offensive.rate

    @property
    def defensive_rate(self) -> float:
        return self.defensive.rate

    def to_response(self) -> AthleteStatsResponse:
        return AthleteStatsResponse(
            session_count=self.session_count,
            offensive=self.offensive.to_response(),
            defensive=self.defensive.to_response(),
            weakness=self.weakness,
            weakness_trend=[
                TrendPoint(session_id=p.session_id, date=p.date, count=p.count) for p in self.weakness_trend
            ],
            strengths=[StrengthCount(name=name, count=count) for name, count in self.strengths],
        )


def _applied_tags(session: Any) -> list[Any]:
    """Tags applied in a session, skipping dangling links and uncategorized legacy tags."""
    tags = []
    for session_tag in session.session_tags or []:
        tag = session_tag.tag
        if tag is None or tag.category is None:
            continue
        tags.append(tag)
    return tags


def _rank_names(tags: Iterable[Any]) -> list[tuple[str, int]]:
    # Counter keeps insertion order and most_common() is stable, so ties go
    # to the name seen first.
    counts = Counter(tag.name.strip() for tag in tags)
    return counts.most_common()


def compute_athlete_stats(sessions: Iterable[Any]) -> AthleteStats:
    ordered = sorted(sessions, key=lambda s: (s.created_at, s.id))
    per_session = [(session, _applied_tags(session)) for session in ordered]
    applied = [tag for _, tags in per_session for tag in tags]

    tallies = {
        TagCategory.OFFENSIVE: OutcomeTally(),
        TagCategory.DEFENSIVE: OutcomeTally(),
    }
    for tag in applied:
        tally = tallies.get(tag.category)
        if tally is None:
            continue
        if tag.outcome == TagOutcome.SUCCESS:
            tally.successes += 1
        elif tag.outcome == TagOutcome.FAIL:
            tally.failures += 1

    errors = _rank_names(tag for tag in applied if tag.category == TagCategory.TECHNICAL_ERROR)
    weakness = errors[0][0] if errors else None

    trend: list[WeaknessPoint] = []
    if weakness is not None:
        for session, tags in per_session:
            count = sum(
                1 for tag in tags if tag.category == TagCategory.TECHNICAL_ERROR and tag.name.strip() == weakness
            )
            trend.append(WeaknessPoint(session_id=session.id, date=session.created_at, count=count))

    strengths = _rank_names(tag for tag in applied if tag.category == TagCategory.TECHNICAL_STRENGTH)

    return AthleteStats(
        session_count=len(ordered),
        offensive=tallies[TagCategory.OFFENSIVE],
        defensive=tallies[TagCategory.DEFENSIVE],
        weakness=weakness,
        weakness_trend=trend,
        strengths=strengths[:MAX_STRENGTHS],
    )
