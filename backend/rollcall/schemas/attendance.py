"""Pydantic schemas for per-group attendance reporting."""

import uuid

from pydantic import BaseModel


class GroupAttendance(BaseModel):
    group_id: uuid.UUID
    group_name: str
    total_assigned: int  # live membership count
    submitted: int  # members of this group with a response
    attendance_ratio: float


class AttendanceReport(BaseModel):
    form_id: uuid.UUID
    group_attendance: list[GroupAttendance]

    # Summary across groups. Members of several assigned groups are counted
    # once per group, so total_submitted can exceed distinct_submitters.
    total_users: int
    total_submitted: int
    overall_ratio: float
    distinct_submitters: int
