import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResponseSubmission(BaseModel):
    answers: dict[str, Any] = Field(
        ...,
        description="Map of question id to answer value",
    )


class FormResponseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    form_id: uuid.UUID
    responder_id: uuid.UUID
    answers: dict[str, Any]
    submitted_at: datetime
    updated_at: datetime


class OwnResponses(BaseModel):
    responses: list[FormResponseOut]


class AssignedForm(BaseModel):
    """A form reachable through one of the user's groups."""

    form_id: uuid.UUID
    form_title: str
    deadline: datetime | None
    submitted_at: datetime | None
