"""Endpoints scoped to the athlete profile of the authenticated user."""

import structlog
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_athlete
from ..models import Athlete
from ..schemas.dashboard import AthleteDashboardResponse
from ..schemas.session import (
    SessionCreate,
    SessionResponse,
    SessionTagCreate,
    SessionTagResponse,
    SessionWithTagsResponse,
)
from ..schemas.stats import AthleteStatsResponse
from ..schemas.tag import TagCreate, TagResponse, TagUpdate, TagUsageResponse
from ..services.dashboard_service import DashboardService
from ..services.session_service import SessionService
from ..services.stats_service import compute_athlete_stats
from ..services.tag_service import TagService

router = APIRouter(prefix="/my", tags=["my"])

logger = structlog.get_logger(__name__)


def _with_tags(session, session_tags=None) -> SessionWithTagsResponse:
    base = SessionResponse.model_validate(session).model_dump()
    tags = [SessionTagResponse.model_validate(st) for st in session_tags or []]
    return SessionWithTagsResponse(**base, session_tags=tags)


@router.get("/dashboard", response_model=AthleteDashboardResponse)
def my_dashboard(athlete: Athlete = Depends(get_current_athlete), db: Session = Depends(get_db)):
    return DashboardService(db).build_for_athlete(athlete.id)


@router.get("/stats", response_model=AthleteStatsResponse)
def my_stats(athlete: Athlete = Depends(get_current_athlete), db: Session = Depends(get_db)):
    sessions = SessionService(db).list_sessions(athlete.id, include_tags=True)
    return compute_athlete_stats(sessions).to_response()


@router.get("/sessions", response_model=list[SessionWithTagsResponse])
def my_sessions(
    include_tags: bool = Query(False, alias="includeTags"),
    search: str | None = Query(None, description="Substring to look for in session notes"),
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    sessions = SessionService(db).list_sessions(athlete.id, search=search, include_tags=include_tags)
    return [_with_tags(s, s.session_tags if include_tags else None) for s in sessions]


@router.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_my_session(
    payload: SessionCreate,
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    return SessionService(db).create_session(athlete.id, payload)


@router.post("/sessions/upload", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def upload_my_session(
    video: UploadFile = File(...),
    notes: str | None = Form(None),
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    return SessionService(db).create_uploaded_session(athlete.id, video, notes)


@router.get("/sessions/{session_id}", response_model=SessionWithTagsResponse)
def get_my_session(
    session_id: int,
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    session, session_tags = SessionService(db).get_session_with_tags(session_id, athlete.id)
    return _with_tags(session, session_tags)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_my_session(
    session_id: int,
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    SessionService(db).delete_session(session_id, athlete.id)
    return None


@router.post("/sessions/{session_id}/tags", response_model=SessionTagResponse, status_code=status.HTTP_201_CREATED)
def add_my_session_tag(
    session_id: int,
    payload: SessionTagCreate,
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    return SessionService(db).add_session_tag(session_id, payload, athlete_id=athlete.id)


@router.delete("/sessions/{session_id}/tags/{session_tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_my_session_tag(
    session_id: int,
    session_tag_id: int,
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    SessionService(db).delete_session_tag(session_id, session_tag_id, athlete_id=athlete.id)
    return None


@router.get("/tags", response_model=list[TagResponse])
def my_tags(athlete: Athlete = Depends(get_current_athlete), db: Session = Depends(get_db)):
    return TagService(db).list_tags_for_athlete(athlete.id)


@router.post("/tags", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_my_tag(
    payload: TagCreate,
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    return TagService(db).create_tag_for_athlete(athlete.id, payload)


@router.patch("/tags/{tag_id}", response_model=TagResponse)
def update_my_tag(
    tag_id: int,
    payload: TagUpdate,
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    return TagService(db).update_tag_for_athlete(athlete.id, tag_id, payload)


@router.delete("/tags/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_my_tag(
    tag_id: int,
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    TagService(db).delete_tag_for_athlete(athlete.id, tag_id)
    return None


@router.get("/tags/{tag_id}/usage", response_model=TagUsageResponse)
def my_tag_usage(
    tag_id: int,
    athlete: Athlete = Depends(get_current_athlete),
    db: Session = Depends(get_db),
):
    usage = TagService(db).usage_count(athlete.id, tag_id)
    logger.debug("tag_usage_checked", tag_id=tag_id, athlete_id=athlete.id, usage_count=usage)
    return TagUsageResponse(tag_id=tag_id, usage_count=usage)
