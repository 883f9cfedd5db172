import shutil
import uuid
from pathlib import Path

import structlog
from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..config import get_settings
from ..exceptions import DomainValidationException, SessionNotFoundException, SessionTagNotFoundException
from ..metrics import SESSION_TAGS_CREATED_TOTAL, SESSIONS_CREATED_TOTAL, VIDEO_UPLOADS_TOTAL
from ..models import SessionTag, TrainingSession
from ..schemas.session import SessionCreate, SessionTagCreate
from .athlete_service import AthleteService
from .tag_service import TagService

logger = structlog.get_logger(__name__)

UPLOADS_URL_PREFIX = "/uploads"


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def save_upload(upload: UploadFile) -> str:
    """Store an uploaded video under a random name and return its public URL."""
    upload_dir = Path(get_settings().upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    suffix = Path(upload.filename or "").suffix.lower()
    filename = f"{uuid.uuid4().hex}{suffix}"
    with (upload_dir / filename).open("wb") as target:
        shutil.copyfileobj(upload.file, target)
    VIDEO_UPLOADS_TOTAL.inc()
    logger.info("video_uploaded", filename=filename, content_type=upload.content_type)
    return f"{UPLOADS_URL_PREFIX}/{filename}"


def discard_upload(video_url: str) -> None:
    """Remove a file stored by ``save_upload``."""
    filename = video_url.rsplit("/", 1)[-1]
    (Path(get_settings().upload_dir) / filename).unlink(missing_ok=True)
    logger.info("video_discarded", filename=filename)


def session_tag_sort_key(session_tag: SessionTag) -> tuple:
    """Timestamped tags by time, untimed ones last."""
    return (session_tag.timestamp_sec is None, session_tag.timestamp_sec or 0, session_tag.id)


class SessionService:
    def __init__(self, db: Session):
        self.db = db

    def create_session(self, athlete_id: int, payload: SessionCreate) -> TrainingSession:
        AthleteService(self.db).get_athlete(athlete_id)
        video_url = payload.video_url.strip()
        if not video_url:
            raise DomainValidationException("videoUrl is required")
        session = TrainingSession(athlete_id=athlete_id, video_url=video_url, notes=_clean_text(payload.notes))
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        SESSIONS_CREATED_TOTAL.inc()
        logger.info("session_created", session_id=session.id, athlete_id=athlete_id)
        return session

    def create_uploaded_session(self, athlete_id: int, video: UploadFile, notes: str | None = None) -> TrainingSession:
        video_url = save_upload(video)
        try:
            return self.create_session(athlete_id, SessionCreate(video_url=video_url, notes=notes))
        except Exception:
            discard_upload(video_url)
            raise

    def list_sessions(self, athlete_id: int, search: str | None = None, include_tags: bool = False) -> list[TrainingSession]:
        """Sessions newest first, optionally filtered by a notes substring."""
        stmt = select(TrainingSession).where(TrainingSession.athlete_id == athlete_id)
        if search and search.strip():
            stmt = stmt.where(TrainingSession.notes.icontains(search.strip(), autoescape=True))
        if include_tags:
            stmt = stmt.options(selectinload(TrainingSession.session_tags).joinedload(SessionTag.tag))
        stmt = stmt.order_by(TrainingSession.created_at.desc(), TrainingSession.id.desc())
        return list(self.db.scalars(stmt))

    def get_session(self, session_id: int, athlete_id: int | None = None) -> TrainingSession:
        session = self.db.get(TrainingSession, session_id)
        if session is None or (athlete_id is not None and session.athlete_id != athlete_id):
            raise SessionNotFoundException(session_id)
        return session

    def get_session_with_tags(self, session_id: int, athlete_id: int) -> tuple[TrainingSession, list[SessionTag]]:
        session = self.get_session(session_id, athlete_id)
        return session, sorted(session.session_tags, key=session_tag_sort_key)

    def delete_session(self, session_id: int, athlete_id: int) -> None:
        session = self.get_session(session_id, athlete_id)
        self.db.delete(session)
        self.db.commit()
        logger.info("session_deleted", session_id=session_id, athlete_id=athlete_id)

    def add_session_tag(self, session_id: int, payload: SessionTagCreate, athlete_id: int | None = None) -> SessionTag:
        session = self.get_session(session_id, athlete_id)
        tag = TagService(self.db).get_visible_tag(payload.tag_id, session.athlete_id)
        session_tag = SessionTag(
            session_id=session.id,
            tag_id=tag.id,
            timestamp_sec=payload.timestamp_sec,
            note=_clean_text(payload.note),
        )
        self.db.add(session_tag)
        self.db.commit()
        self.db.refresh(session_tag)
        SESSION_TAGS_CREATED_TOTAL.inc()
        logger.info(
            "session_tag_created",
            session_tag_id=session_tag.id,
            session_id=session.id,
            tag_id=tag.id,
        )
        return session_tag

    def list_session_tags(self, session_id: int) -> list[SessionTag]:
        self.get_session(session_id)
        stmt = (
            select(SessionTag)
            .where(SessionTag.session_id == session_id)
            .order_by(SessionTag.created_at.asc(), SessionTag.id.asc())
        )
        return list(self.db.scalars(stmt))

    def delete_session_tag(self, session_id: int, session_tag_id: int, athlete_id: int | None = None) -> None:
        self.get_session(session_id, athlete_id)
        session_tag = self.db.get(SessionTag, session_tag_id)
        if session_tag is None or session_tag.session_id != session_id:
            raise SessionTagNotFoundException(session_tag_id)
        self.db.delete(session_tag)
        self.db.commit()
        logger.info("session_tag_deleted", session_tag_id=session_tag_id, session_id=session_id)
