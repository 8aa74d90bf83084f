import uuid

from pydantic import BaseModel, Field


class AssignmentCreate(BaseModel):
    form_id: uuid.UUID
    group_ids: list[uuid.UUID] = Field(..., min_length=1)


class AssignmentResult(BaseModel):
    form_id: uuid.UUID
    assigned_count: int = Field(..., description="Distinct groups the form is assigned to by this request")
    newly_assigned: int = Field(..., description="How many of those assignments did not exist before")


class AssignedGroups(BaseModel):
    form_id: uuid.UUID
    group_ids: list[uuid.UUID]
