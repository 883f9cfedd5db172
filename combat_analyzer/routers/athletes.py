from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.athlete import AthleteCreate, AthleteDetailResponse, AthleteResponse, AthleteUpdate
from ..schemas.dashboard import AthleteDashboardResponse, SessionStatsResponse, TagStatsResponse
from ..schemas.session import SessionCreate, SessionResponse
from ..services.athlete_service import AthleteService
from ..services.dashboard_service import DashboardService
from ..services.session_service import SessionService

router = APIRouter(prefix="/athletes", tags=["athletes"])


def get_athlete_service(db: Session = Depends(get_db)) -> AthleteService:
    return AthleteService(db)


@router.get("", response_model=list[AthleteResponse])
def list_athletes(
    name: str | None = Query(None, description="Case-insensitive name filter"),
    athlete_service: AthleteService = Depends(get_athlete_service),
):
    return athlete_service.list_athletes(name)


@router.post("", response_model=AthleteResponse, status_code=status.HTTP_201_CREATED)
def create_athlete(payload: AthleteCreate, athlete_service: AthleteService = Depends(get_athlete_service)):
    return athlete_service.create_athlete(payload)


@router.get("/{athlete_id}", response_model=AthleteDetailResponse)
def get_athlete(athlete_id: int, athlete_service: AthleteService = Depends(get_athlete_service)):
    return athlete_service.get_athlete(athlete_id)


@router.put("/{athlete_id}", response_model=AthleteResponse)
def update_athlete(
    athlete_id: int,
    payload: AthleteUpdate,
    athlete_service: AthleteService = Depends(get_athlete_service),
):
    return athlete_service.update_athlete(athlete_id, payload)


@router.delete("/{athlete_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_athlete(athlete_id: int, athlete_service: AthleteService = Depends(get_athlete_service)):
    athlete_service.delete_athlete(athlete_id)
    return None


@router.post("/{athlete_id}/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(athlete_id: int, payload: SessionCreate, db: Session = Depends(get_db)):
    return SessionService(db).create_session(athlete_id, payload)


@router.get("/{athlete_id}/sessions", response_model=list[SessionResponse])
def list_sessions(
    athlete_id: int,
    search: str | None = Query(None, description="Substring to look for in session notes"),
    db: Session = Depends(get_db),
):
    AthleteService(db).get_athlete(athlete_id)
    return SessionService(db).list_sessions(athlete_id, search=search)


@router.get("/{athlete_id}/dashboard", response_model=AthleteDashboardResponse)
def get_dashboard(athlete_id: int, db: Session = Depends(get_db)):
    return DashboardService(db).build_for_athlete(athlete_id)


@router.get("/{athlete_id}/stats/tags", response_model=TagStatsResponse)
def get_tag_stats(athlete_id: int, db: Session = Depends(get_db)):
    return DashboardService(db).tag_stats(athlete_id)


@router.get("/{athlete_id}/stats/sessions", response_model=SessionStatsResponse)
def get_session_stats(athlete_id: int, db: Session = Depends(get_db)):
    return DashboardService(db).session_stats(athlete_id)
