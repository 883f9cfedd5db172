import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..exceptions import AthleteNotFoundException
from ..models import Athlete
from ..schemas.athlete import AthleteCreate, AthleteUpdate

logger = structlog.get_logger(__name__)


class AthleteService:
    def __init__(self, db: Session):
        self.db = db

    def list_athletes(self, name: str | None = None) -> list[Athlete]:
        stmt = select(Athlete)
        if name and name.strip():
            stmt = stmt.where(Athlete.name.icontains(name.strip(), autoescape=True))
        stmt = stmt.order_by(Athlete.created_at.desc(), Athlete.id.desc())
        return list(self.db.scalars(stmt))

    def get_athlete(self, athlete_id: int) -> Athlete:
        athlete = self.db.get(Athlete, athlete_id)
        if athlete is None:
            raise AthleteNotFoundException(athlete_id)
        return athlete

    def create_athlete(self, payload: AthleteCreate) -> Athlete:
        athlete = Athlete(name=payload.name)
        self.db.add(athlete)
        self.db.commit()
        self.db.refresh(athlete)
        logger.info("athlete_created", athlete_id=athlete.id)
        return athlete

    def update_athlete(self, athlete_id: int, payload: AthleteUpdate) -> Athlete:
        athlete = self.get_athlete(athlete_id)
        athlete.name = payload.name
        self.db.commit()
        self.db.refresh(athlete)
        logger.info("athlete_updated", athlete_id=athlete.id)
        return athlete

    def delete_athlete(self, athlete_id: int) -> None:
        athlete = self.get_athlete(athlete_id)
        self.db.delete(athlete)
        self.db.commit()
        logger.info("athlete_deleted", athlete_id=athlete_id)
