from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints

from .base import CamelModel
from .session import SessionResponse

AthleteName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class AthleteBase(CamelModel):
    name: AthleteName


class AthleteCreate(AthleteBase):
    pass


class AthleteUpdate(AthleteBase):
    pass


class AthleteResponse(AthleteBase):
    id: int
    created_at: datetime


class AthleteDetailResponse(AthleteResponse):
    sessions: list[SessionResponse] = Field(default_factory=list)
