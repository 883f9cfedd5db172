from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy import (
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TagCategory(str, Enum):
    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    TECHNICAL_STRENGTH = "TECHNICAL_STRENGTH"
    TACTICAL_DECISION = "TACTICAL_DECISION"
    OFFENSIVE = "OFFENSIVE"
    DEFENSIVE = "DEFENSIVE"
    PHYSICAL = "PHYSICAL"
    MENTAL = "MENTAL"


class TagOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"


OUTCOME_CATEGORIES = frozenset({TagCategory.OFFENSIVE, TagCategory.DEFENSIVE})


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    athlete = relationship("Athlete", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class Athlete(Base):
    __tablename__ = "athletes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    user = relationship("User", back_populates="athlete")
    sessions = relationship(
        "TrainingSession",
        back_populates="athlete",
        cascade="all, delete-orphan",
        order_by="TrainingSession.created_at",
    )
    tags = relationship("Tag", back_populates="athlete", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Athlete(id={self.id}, name='{self.name}')>"


class TrainingSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    athlete_id = Column(Integer, ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False)
    video_url = Column(String(1024), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    athlete = relationship("Athlete", back_populates="sessions")
    session_tags = relationship(
        "SessionTag",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionTag.created_at",
    )

    __table_args__ = (Index("ix_sessions_athlete_created", "athlete_id", "created_at"),)

    def __repr__(self):
        return f"<TrainingSession(id={self.id}, athlete_id={self.athlete_id})>"


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # nullable only for rows written before categories existed
    category = Column(
        SqlEnum(
            TagCategory,
            name="tagcategory",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=True,
    )
    outcome = Column(
        SqlEnum(
            TagOutcome,
            name="tagoutcome",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=True,
    )
    athlete_id = Column(Integer, ForeignKey("athletes.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    athlete = relationship("Athlete", back_populates="tags")
    session_tags = relationship("SessionTag", back_populates="tag", cascade="all, delete-orphan")

    __table_args__ = (UniqueConstraint("athlete_id", "name", name="uq_tags_athlete_name"),)

    @property
    def is_global(self) -> bool:
        return self.athlete_id is None

    def __repr__(self):
        return f"<Tag(id={self.id}, name='{self.name}', category={self.category})>"


class SessionTag(Base):
    __tablename__ = "session_tags"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp_sec = Column(Integer, nullable=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    session = relationship("TrainingSession", back_populates="session_tags")
    tag = relationship("Tag", back_populates="session_tags", lazy="joined")

    def __repr__(self):
        return f"<SessionTag(id={self.id}, session_id={self.session_id}, tag_id={self.tag_id})>"
