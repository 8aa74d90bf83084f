import uuid
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from rollcall.schemas.questions import QuestionDefinition

# ---------------------------------------------------------------------------
# Input schemas
# ---------------------------------------------------------------------------


class FormMeta(BaseModel):
    """Top-level form fields shared by create and edit."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    deadline: datetime | None = None


class FormCreate(FormMeta):
    pass


class SectionIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    config: dict[str, Any] = Field(
        default_factory=dict,
        description="Display options, e.g. collapsible / collapsedByDefault",
    )
    questions: list[QuestionDefinition] = Field(default_factory=list)


class FormContentReplace(BaseModel):
    """Edit payload: new form metadata plus, optionally, a full new structure.

    When ``sections`` is non-empty the form's existing sections and questions
    are replaced by this set. ``group_ids`` are assigned idempotently in the
    same transaction.
    """

    form_meta: FormMeta
    sections: list[SectionIn] | None = None
    group_ids: list[uuid.UUID] | None = None


# ---------------------------------------------------------------------------
# Output schemas
# ---------------------------------------------------------------------------


class QuestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    question_text: str
    question_description: str | None
    type: str
    required: bool
    config: dict[str, Any]
    order: int


class SectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str
    config: dict[str, Any]
    order: int
    questions: list[QuestionOut]


class FormOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str
    config: dict[str, Any]
    # ORM attribute is ``metadata_``; ``metadata`` is reserved on declarative models.
    metadata: dict[str, Any] = Field(validation_alias=AliasChoices("metadata_", "metadata"))
    deadline: datetime | None
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime


class FormDetailResponse(FormOut):
    sections: list[SectionOut]
    response_count: int = 0


class FormListResponse(BaseModel):
    items: list[FormOut]
    total: int
    page: int
    page_size: int
