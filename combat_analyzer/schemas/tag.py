"""Tag payloads.

Category and outcome form a tagged variant keyed on ``category``: OFFENSIVE
and DEFENSIVE tags carry a mandatory outcome, every other category carries
none. Partial updates are merged with the stored tag and validated through
the same ``TagClassification`` union by ``classify_tag``.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field, RootModel, StringConstraints, TypeAdapter, ValidationError

from ..exceptions import DomainValidationException
from ..models import OUTCOME_CATEGORIES, TagCategory, TagOutcome
from .base import CamelModel

PlainCategory = Literal["TECHNICAL_ERROR", "TECHNICAL_STRENGTH", "TACTICAL_DECISION", "PHYSICAL", "MENTAL"]
OutcomeCategory = Literal["OFFENSIVE", "DEFENSIVE"]
TagName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class PlainTagClassification(CamelModel):
    category: PlainCategory
    outcome: None = None

    @property
    def tag_category(self) -> TagCategory:
        return TagCategory(self.category)

    @property
    def tag_outcome(self) -> None:
        return None


class OutcomeTagClassification(CamelModel):
    category: OutcomeCategory
    outcome: TagOutcome

    @property
    def tag_category(self) -> TagCategory:
        return TagCategory(self.category)

    @property
    def tag_outcome(self) -> TagOutcome:
        return self.outcome


TagClassification = Annotated[
    PlainTagClassification | OutcomeTagClassification,
    Field(discriminator="category"),
]

_classification_adapter = TypeAdapter(TagClassification)


def classify_tag(
    category: TagCategory | str | None, outcome: TagOutcome | str | None
) -> PlainTagClassification | OutcomeTagClassification:
    category_value = getattr(category, "value", category)
    outcome_value = getattr(outcome, "value", outcome)
    try:
        return _classification_adapter.validate_python({"category": category_value, "outcome": outcome_value})
    except ValidationError as exc:
        if category_value is None:
            raise DomainValidationException("category is required") from exc
        if category_value not in {c.value for c in TagCategory}:
            raise DomainValidationException(f"Invalid tag category: {category_value}") from exc
        if category_value in {c.value for c in OUTCOME_CATEGORIES}:
            if outcome_value is None:
                raise DomainValidationException("outcome is required for OFFENSIVE and DEFENSIVE tags") from exc
            raise DomainValidationException(f"Invalid tag outcome: {outcome_value}") from exc
        raise DomainValidationException("outcome is only allowed for OFFENSIVE and DEFENSIVE tags") from exc


class _TagFields(CamelModel):
    name: TagName
    description: str | None = None


class PlainTagCreate(_TagFields, PlainTagClassification):
    pass


class OutcomeTagCreate(_TagFields, OutcomeTagClassification):
    pass


class TagCreate(RootModel[Annotated[PlainTagCreate | OutcomeTagCreate, Field(discriminator="category")]]):
    pass


class TagUpdate(CamelModel):
    name: TagName | None = None
    description: str | None = None
    category: TagCategory | None = None
    outcome: TagOutcome | None = None


class TagResponse(CamelModel):
    id: int
    name: str
    description: str | None = None
    category: TagCategory | None = None
    outcome: TagOutcome | None = None
    athlete_id: int | None = None
    created_at: datetime


class TagUsageResponse(CamelModel):
    tag_id: int
    usage_count: int
