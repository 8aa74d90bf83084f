"""Assignment API: link forms to groups (form owner only)."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from rollcall.core.auth import get_current_user
from rollcall.core.database import get_db
from rollcall.models.user import User
from rollcall.schemas.assignments import AssignedGroups, AssignmentCreate, AssignmentResult
from rollcall.services.assignments import assign_form, list_assigned_group_ids, unassign_form

router = APIRouter()


@router.post("/", response_model=AssignmentResult, status_code=201)
def assign_form_endpoint(
    payload: AssignmentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Assign a form to groups. Safe to repeat: existing pairs are left as they are."""
    assigned_count, newly_assigned = assign_form(db, payload.form_id, current_user.id, payload.group_ids)
    return AssignmentResult(
        form_id=payload.form_id,
        assigned_count=assigned_count,
        newly_assigned=newly_assigned,
    )


@router.get("/", response_model=AssignedGroups)
def list_assigned_groups_endpoint(
    form_id: uuid.UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    group_ids = list_assigned_group_ids(db, form_id, current_user.id)
    return AssignedGroups(form_id=form_id, group_ids=group_ids)


@router.delete("/")
def unassign_form_endpoint(
    form_id: uuid.UUID = Query(...),
    group_id: uuid.UUID = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    removed = unassign_form(db, form_id, current_user.id, group_id)
    return {"removed": removed}
