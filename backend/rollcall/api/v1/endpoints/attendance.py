import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rollcall.core.auth import get_current_user
from rollcall.core.database import get_db
from rollcall.models.user import User
from rollcall.schemas.attendance import AttendanceReport
from rollcall.services.attendance import get_attendance_report

router = APIRouter()


@router.get("/{form_id}/attendance", response_model=AttendanceReport)
def get_attendance_endpoint(
    form_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Per-group submission ratios for every group the form is assigned to."""
    return get_attendance_report(db, form_id)
