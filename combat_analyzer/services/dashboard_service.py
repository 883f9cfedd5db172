from dataclasses import dataclass

import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..exceptions import AthleteNotFoundException
from ..models import Athlete, SessionTag, Tag, TrainingSession
from ..schemas.athlete import AthleteResponse
from ..schemas.dashboard import (
    AthleteDashboardResponse,
    DashboardSession,
    DashboardSummary,
    SessionStatsResponse,
    TagCount,
    TagStatsResponse,
)

logger = structlog.get_logger(__name__)

RECENT_SESSIONS_LIMIT = 5
UNKNOWN_TAG_NAME = "Unknown"


@dataclass
class _SessionRow:
    session: TrainingSession
    tag_count: int

    def to_response(self) -> DashboardSession:
        return DashboardSession(
            session_id=self.session.id,
            video_url=self.session.video_url,
            notes=self.session.notes,
            created_at=self.session.created_at,
            tag_count=self.tag_count,
        )


def _average(total: int, count: int) -> float:
    return total / count if count else 0.0


class DashboardService:
    """Read-only aggregates over an athlete's sessions and tag applications."""

    def __init__(self, db: Session):
        self.db = db

    def _get_athlete(self, athlete_id: int) -> Athlete:
        athlete = self.db.get(Athlete, athlete_id)
        if athlete is None:
            raise AthleteNotFoundException(athlete_id)
        return athlete

    def _session_rows(self, athlete_id: int) -> list[_SessionRow]:
        """Sessions in chronological order with their tag application counts."""
        stmt = (
            select(TrainingSession, func.count(SessionTag.id))
            .outerjoin(SessionTag, SessionTag.session_id == TrainingSession.id)
            .where(TrainingSession.athlete_id == athlete_id)
            .group_by(TrainingSession.id)
            .order_by(TrainingSession.created_at.asc(), TrainingSession.id.asc())
        )
        return [_SessionRow(session=session, tag_count=count) for session, count in self.db.execute(stmt).all()]

    def _tag_counts(self, athlete_id: int) -> list[TagCount]:
        """Tag applications grouped by tag, highest count first, ties by tag id."""
        stmt = (
            select(SessionTag.tag_id, func.count(SessionTag.id))
            .join(TrainingSession, TrainingSession.id == SessionTag.session_id)
            .where(TrainingSession.athlete_id == athlete_id)
            .group_by(SessionTag.tag_id)
        )
        grouped = self.db.execute(stmt).all()
        if not grouped:
            return []

        tag_ids = [tag_id for tag_id, _ in grouped]
        tags = {tag.id: tag for tag in self.db.scalars(select(Tag).where(Tag.id.in_(tag_ids)))}

        counts = []
        for tag_id, count in sorted(grouped, key=lambda row: (-row[1], row[0])):
            tag = tags.get(tag_id)
            counts.append(
                TagCount(
                    tag_id=tag_id,
                    name=tag.name if tag is not None else UNKNOWN_TAG_NAME,
                    description=tag.description if tag is not None else None,
                    count=count,
                )
            )
        return counts

    def build_for_athlete(self, athlete_id: int) -> AthleteDashboardResponse:
        athlete = self._get_athlete(athlete_id)
        rows = self._session_rows(athlete_id)

        session_count = len(rows)
        total_tags = sum(row.tag_count for row in rows)

        recent = sorted(rows, key=lambda row: (row.session.created_at, row.session.id), reverse=True)
        top_tags = self._tag_counts(athlete_id)

        logger.debug(
            "dashboard_built",
            athlete_id=athlete_id,
            session_count=session_count,
            total_tags=total_tags,
            distinct_tags=len(top_tags),
        )
        return AthleteDashboardResponse(
            athlete=AthleteResponse.model_validate(athlete),
            summary=DashboardSummary(
                session_count=session_count,
                total_tags=total_tags,
                average_tags_per_session=_average(total_tags, session_count),
                distinct_tags_count=len(top_tags),
                most_used_tag=top_tags[0] if top_tags else None,
            ),
            recent_sessions=[row.to_response() for row in recent[:RECENT_SESSIONS_LIMIT]],
            top_tags=top_tags,
        )

    def tag_stats(self, athlete_id: int) -> TagStatsResponse:
        self._get_athlete(athlete_id)
        top_tags = self._tag_counts(athlete_id)
        return TagStatsResponse(
            athlete_id=athlete_id,
            total_tag_applications=sum(tag.count for tag in top_tags),
            top_tags=top_tags,
        )

    def session_stats(self, athlete_id: int) -> SessionStatsResponse:
        self._get_athlete(athlete_id)
        rows = self._session_rows(athlete_id)
        total_tags = sum(row.tag_count for row in rows)
        return SessionStatsResponse(
            athlete_id=athlete_id,
            session_count=len(rows),
            total_tags=total_tags,
            average_tags_per_session=_average(total_tags, len(rows)),
            sessions=[row.to_response() for row in rows],
        )
