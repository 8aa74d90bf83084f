"""Attendance aggregator: per-group submission ratios for a form.

Counting is membership-scoped: a responder who belongs to two assigned groups
counts toward both groups' ``submitted``. ``distinct_submitters`` in the
report gives the deduplicated figure.
"""

import uuid

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from rollcall.models.form_assignment import FormAssignment
from rollcall.models.form_response import FormResponse
from rollcall.models.group import Group, GroupMember
from rollcall.schemas.attendance import AttendanceReport, GroupAttendance
from rollcall.services.lookups import get_form


def attendance_ratio(submitted: int, total: int) -> float:
    """``submitted / total``, or 0.0 when nobody is assigned."""
    if total <= 0:
        return 0.0
    return submitted / total


def compute_group_attendance(db: Session, form_id: uuid.UUID) -> list[GroupAttendance]:
    """One row per group the form is assigned to, ordered by group name."""
    get_form(db, form_id)

    rows = db.execute(
        select(
            Group.id,
            Group.name,
            func.count(func.distinct(GroupMember.user_id)).label("total_assigned"),
            func.count(func.distinct(FormResponse.responder_id)).label("submitted"),
        )
        .select_from(FormAssignment)
        .join(Group, Group.id == FormAssignment.group_id)
        .outerjoin(GroupMember, GroupMember.group_id == Group.id)
        .outerjoin(
            FormResponse,
            and_(
                FormResponse.form_id == FormAssignment.form_id,
                FormResponse.responder_id == GroupMember.user_id,
            ),
        )
        .where(FormAssignment.form_id == form_id)
        .group_by(Group.id, Group.name)
        .order_by(Group.name, Group.id)
    ).all()

    return [
        GroupAttendance(
            group_id=row.id,
            group_name=row.name,
            total_assigned=row.total_assigned,
            submitted=row.submitted,
            attendance_ratio=attendance_ratio(row.submitted, row.total_assigned),
        )
        for row in rows
    ]


def count_distinct_submitters(db: Session, form_id: uuid.UUID) -> int:
    """Responders to the form who belong to at least one assigned group."""
    return db.execute(
        select(func.count(func.distinct(FormResponse.responder_id)))
        .select_from(FormResponse)
        .join(GroupMember, GroupMember.user_id == FormResponse.responder_id)
        .join(
            FormAssignment,
            and_(
                FormAssignment.group_id == GroupMember.group_id,
                FormAssignment.form_id == FormResponse.form_id,
            ),
        )
        .where(FormResponse.form_id == form_id)
    ).scalar_one()


def get_attendance_report(db: Session, form_id: uuid.UUID) -> AttendanceReport:
    groups = compute_group_attendance(db, form_id)
    total_users = sum(g.total_assigned for g in groups)
    total_submitted = sum(g.submitted for g in groups)

    return AttendanceReport(
        form_id=form_id,
        group_attendance=groups,
        total_users=total_users,
        total_submitted=total_submitted,
        overall_ratio=attendance_ratio(total_submitted, total_users),
        distinct_submitters=count_distinct_submitters(db, form_id),
    )
