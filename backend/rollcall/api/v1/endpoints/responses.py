"""Response API: submit, resubmit, read own answers, CSV export for owners."""

import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from rollcall.core.auth import get_current_user
from rollcall.core.database import get_db
from rollcall.models.user import User
from rollcall.schemas.responses import FormResponseOut, OwnResponses, ResponseSubmission
from rollcall.services.responses import (
    export_responses_csv,
    get_own_responses,
    submit_response,
    update_response,
)

router = APIRouter()


@router.post("/{form_id}/responses", response_model=FormResponseOut, status_code=201)
def submit_response_endpoint(
    form_id: uuid.UUID,
    payload: ResponseSubmission,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Submit the caller's answers. A second submission returns 409."""
    return submit_response(db, form_id, current_user.id, payload.answers)


@router.put("/{form_id}/responses", response_model=FormResponseOut)
def update_response_endpoint(
    form_id: uuid.UUID,
    payload: ResponseSubmission,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return update_response(db, form_id, current_user.id, payload.answers)


@router.get("/{form_id}/responses", response_model=OwnResponses)
def get_own_responses_endpoint(
    form_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return OwnResponses(responses=get_own_responses(db, form_id, current_user.id))


@router.get("/{form_id}/responses/export")
def export_responses_endpoint(
    form_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Export all responses to the caller's form as CSV."""
    filename, content = export_responses_csv(db, form_id, current_user.id)
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
