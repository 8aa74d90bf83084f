from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rollcall.core.auth import get_current_user
from rollcall.core.database import get_db
from rollcall.models.user import User
from rollcall.schemas.responses import AssignedForm
from rollcall.schemas.users import PrincipalResponse
from rollcall.services.responses import list_assigned_forms_for_user

router = APIRouter()


@router.get("/me", response_model=PrincipalResponse)
def whoami(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/me/forms", response_model=list[AssignedForm])
def list_my_forms(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Forms assigned to the caller through any group, with submission status."""
    return list_assigned_forms_for_user(db, current_user.id)
