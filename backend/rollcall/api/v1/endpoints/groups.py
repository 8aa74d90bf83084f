"""Group API: create/list groups and manage membership."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from rollcall.core.auth import get_current_user
from rollcall.core.config import settings
from rollcall.core.database import get_db
from rollcall.models.user import User
from rollcall.schemas.groups import (
    GroupCreate,
    GroupDetailResponse,
    GroupListResponse,
    GroupResponse,
    MemberRemove,
    MembersAdd,
    MembersAddResult,
)
from rollcall.services.groups import (
    add_members,
    create_group,
    get_group_detail,
    list_groups,
    remove_member,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


@router.post("/", response_model=GroupResponse, status_code=201)
def create_group_endpoint(
    payload: GroupCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return create_group(db, current_user.id, payload)


@router.get("/", response_model=GroupListResponse)
def list_groups_endpoint(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    groups, total = list_groups(db, page, page_size)
    return GroupListResponse(
        items=groups,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{group_id}", response_model=GroupDetailResponse)
def get_group_endpoint(
    group_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_group_detail(db, group_id)


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------


@router.post("/{group_id}/members", response_model=MembersAddResult)
def add_members_endpoint(
    group_id: uuid.UUID,
    payload: MembersAdd,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add users to the group. 409 if every user is already a member."""
    added, group = add_members(db, group_id, payload.user_ids, payload.role)
    return MembersAddResult(added=added, size=group.size)


@router.delete("/{group_id}/members", response_model=GroupResponse)
def remove_member_endpoint(
    group_id: uuid.UUID,
    payload: MemberRemove,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return remove_member(db, group_id, payload.user_id)
