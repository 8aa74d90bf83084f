"""Form catalog API: create, read, edit structure, delete."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from rollcall.core.auth import get_current_user
from rollcall.core.config import settings
from rollcall.core.database import get_db
from rollcall.models.user import User
from rollcall.schemas.forms import (
    FormContentReplace,
    FormCreate,
    FormDetailResponse,
    FormListResponse,
    FormOut,
)
from rollcall.services.forms import (
    create_form,
    delete_form,
    get_form_detail,
    list_forms,
    replace_form_content,
)

router = APIRouter()


def _detail(form, response_count: int) -> FormDetailResponse:
    detail = FormDetailResponse.model_validate(form)
    detail.response_count = response_count
    return detail


@router.post("/", response_model=FormOut, status_code=201)
def create_form_endpoint(
    payload: FormCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return create_form(db, current_user.id, payload)


@router.get("/", response_model=FormListResponse)
def list_forms_endpoint(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List forms created by the caller, most recently updated first."""
    forms, total = list_forms(db, current_user.id, page, page_size)
    return FormListResponse(
        items=forms,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{form_id}", response_model=FormDetailResponse)
def get_form_endpoint(
    form_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Return the form with its ordered sections and questions.

    Any authenticated user may read a form.
    """
    form, response_count = get_form_detail(db, form_id)
    return _detail(form, response_count)


@router.post("/{form_id}", response_model=FormDetailResponse)
def replace_form_content_endpoint(
    form_id: uuid.UUID,
    payload: FormContentReplace,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Edit the form's metadata and, if ``sections`` is given, replace its structure."""
    replace_form_content(db, form_id, current_user.id, payload)
    form, response_count = get_form_detail(db, form_id)
    return _detail(form, response_count)


@router.delete("/{form_id}")
def delete_form_endpoint(
    form_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    delete_form(db, form_id, current_user.id)
    return {"detail": "Form deleted"}
