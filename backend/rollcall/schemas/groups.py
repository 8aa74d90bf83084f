import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

GroupRole = Literal["MEMBER", "MODERATOR", "ADMIN"]


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=500)
    user_ids: list[uuid.UUID] = Field(
        default_factory=list,
        description="Initial members, added with the MEMBER role",
    )


class MembersAdd(BaseModel):
    user_ids: list[uuid.UUID] = Field(..., min_length=1)
    role: GroupRole = "MEMBER"


class MemberRemove(BaseModel):
    user_id: uuid.UUID


class MembersAddResult(BaseModel):
    added: int
    size: int


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None
    created_by: uuid.UUID
    size: int
    created_at: datetime
    updated_at: datetime


class GroupMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: uuid.UUID
    role: GroupRole
    joined_at: datetime


class GroupDetailResponse(GroupResponse):
    members: list[GroupMemberResponse]


class GroupListResponse(BaseModel):
    items: list[GroupResponse]
    total: int
    page: int
    page_size: int
