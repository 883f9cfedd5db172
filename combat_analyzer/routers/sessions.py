from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.session import SessionTagCreate, SessionTagResponse
from ..services.session_service import SessionService

router = APIRouter(prefix="/sessions", tags=["sessions"])


def get_session_service(db: Session = Depends(get_db)) -> SessionService:
    return SessionService(db)


@router.post("/{session_id}/tags", response_model=SessionTagResponse, status_code=status.HTTP_201_CREATED)
def add_session_tag(
    session_id: int,
    payload: SessionTagCreate,
    session_service: SessionService = Depends(get_session_service),
):
    return session_service.add_session_tag(session_id, payload)


@router.get("/{session_id}/tags", response_model=list[SessionTagResponse])
def list_session_tags(session_id: int, session_service: SessionService = Depends(get_session_service)):
    return session_service.list_session_tags(session_id)


@router.delete("/{session_id}/tags/{session_tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session_tag(
    session_id: int,
    session_tag_id: int,
    session_service: SessionService = Depends(get_session_service),
):
    session_service.delete_session_tag(session_id, session_tag_id)
    return None
