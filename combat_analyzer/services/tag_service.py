"""Tag catalogue: global tags shared by everyone plus tags owned by one athlete.

Names are unique within an owner scope. The database constraint covers
athlete-owned tags; global tags have a null owner, which SQL treats as
distinct, so uniqueness for them is enforced here.
"""

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import ConflictException, ForbiddenException, TagNotFoundException
from ..metrics import TAGS_CREATED_TOTAL
from ..models import SessionTag, Tag, TrainingSession
from ..schemas.tag import OutcomeTagCreate, PlainTagCreate, TagCreate, TagUpdate, classify_tag

logger = structlog.get_logger(__name__)


def _scope(athlete_id: int | None) -> str:
    return "global" if athlete_id is None else "athlete"


class TagService:
    def __init__(self, db: Session):
        self.db = db

    def _name_taken(self, name: str, athlete_id: int | None, exclude_id: int | None = None) -> bool:
        stmt = select(Tag.id).where(Tag.name == name)
        if athlete_id is None:
            stmt = stmt.where(Tag.athlete_id.is_(None))
        else:
            stmt = stmt.where(Tag.athlete_id == athlete_id)
        if exclude_id is not None:
            stmt = stmt.where(Tag.id != exclude_id)
        return self.db.scalar(stmt.limit(1)) is not None

    def _commit_unique_name(self, athlete_id: int | None) -> None:
        # uq_tags_athlete_name still fires when _name_taken raced another insert
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("tag_name_conflict", athlete_id=athlete_id, error=str(exc.orig))
            raise ConflictException("Tag with this name already exists") from exc

    def _create(self, data: PlainTagCreate | OutcomeTagCreate, athlete_id: int | None) -> Tag:
        name = data.name.strip()
        if self._name_taken(name, athlete_id):
            raise ConflictException("Tag with this name already exists")

        tag = Tag(
            name=name,
            description=data.description.strip() if data.description else None,
            category=data.tag_category,
            outcome=data.tag_outcome,
            athlete_id=athlete_id,
        )
        self.db.add(tag)
        self._commit_unique_name(athlete_id)
        self.db.refresh(tag)

        TAGS_CREATED_TOTAL.labels(scope=_scope(athlete_id)).inc()
        logger.info("tag_created", tag_id=tag.id, athlete_id=athlete_id, category=tag.category.value)
        return tag

    def list_global_tags(self, search: str | None = None) -> list[Tag]:
        stmt = select(Tag).where(Tag.athlete_id.is_(None))
        if search and search.strip():
            stmt = stmt.where(Tag.name.icontains(search.strip(), autoescape=True))
        return list(self.db.scalars(stmt.order_by(Tag.name.asc(), Tag.id.asc())))

    def create_global_tag(self, payload: TagCreate) -> Tag:
        return self._create(payload.root, athlete_id=None)

    def list_tags_for_athlete(self, athlete_id: int) -> list[Tag]:
        """Global tags and the athlete's own, global first."""
        stmt = (
            select(Tag)
            .where(or_(Tag.athlete_id.is_(None), Tag.athlete_id == athlete_id))
            .order_by(Tag.athlete_id.is_not(None), Tag.name.asc(), Tag.id.asc())
        )
        return list(self.db.scalars(stmt))

    def get_visible_tag(self, tag_id: int, athlete_id: int) -> Tag:
        """A tag the athlete may apply: global or owned by them."""
        tag = self.db.get(Tag, tag_id)
        if tag is None or (tag.athlete_id is not None and tag.athlete_id != athlete_id):
            raise TagNotFoundException(tag_id)
        return tag

    def get_owned_tag(self, tag_id: int, athlete_id: int) -> Tag:
        tag = self.get_visible_tag(tag_id, athlete_id)
        if tag.is_global:
            raise ForbiddenException("Global tags cannot be modified")
        return tag

    def create_tag_for_athlete(self, athlete_id: int, payload: TagCreate) -> Tag:
        return self._create(payload.root, athlete_id=athlete_id)

    def update_tag_for_athlete(self, athlete_id: int, tag_id: int, payload: TagUpdate) -> Tag:
        tag = self.get_owned_tag(tag_id, athlete_id)
        data = payload.model_dump(exclude_unset=True)

        if "name" in data and data["name"] is not None:
            name = data["name"].strip()
            if self._name_taken(name, athlete_id, exclude_id=tag.id):
                raise ConflictException("Tag with this name already exists")
            tag.name = name
        if "description" in data:
            description = data["description"]
            tag.description = description.strip() if description else None

        if "category" in data or "outcome" in data:
            classification = classify_tag(data.get("category", tag.category), data.get("outcome", tag.outcome))
            tag.category = classification.tag_category
            tag.outcome = classification.tag_outcome

        self._commit_unique_name(athlete_id)
        self.db.refresh(tag)
        logger.info("tag_updated", tag_id=tag.id, athlete_id=athlete_id, fields=sorted(data))
        return tag

    def delete_tag_for_athlete(self, athlete_id: int, tag_id: int) -> None:
        tag = self.get_owned_tag(tag_id, athlete_id)
        self.db.delete(tag)
        self.db.commit()
        logger.info("tag_deleted", tag_id=tag_id, athlete_id=athlete_id)

    def usage_count(self, athlete_id: int, tag_id: int) -> int:
        """How many times the athlete applied the tag across their sessions."""
        self.get_visible_tag(tag_id, athlete_id)
        stmt = (
            select(func.count(SessionTag.id))
            .join(TrainingSession, TrainingSession.id == SessionTag.session_id)
            .where(SessionTag.tag_id == tag_id, TrainingSession.athlete_id == athlete_id)
        )
        return self.db.scalar(stmt) or 0
