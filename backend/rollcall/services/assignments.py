"""Assignment engine: links forms to groups, owner-only and idempotent."""

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from rollcall.core.database import insert_ignoring_conflicts, utcnow
from rollcall.models.form_assignment import FormAssignment
from rollcall.services.exceptions import ValidationError
from rollcall.services.lookups import check_groups_exist, get_owned_form, unique_ids

logger = logging.getLogger(__name__)


def add_assignments(db: Session, form_id: uuid.UUID, group_ids: list[uuid.UUID]) -> int:
    """Insert (form, group) pairs, skipping ones that already exist.

    Does not commit. Returns the number of pairs that were new.
    """
    now = utcnow()
    rows = [{"form_id": form_id, "group_id": group_id, "assigned_at": now} for group_id in unique_ids(group_ids)]
    return insert_ignoring_conflicts(db, FormAssignment.__table__, rows)


def assign_form(
    db: Session,
    form_id: uuid.UUID,
    caller_id: uuid.UUID,
    group_ids: list[uuid.UUID],
) -> tuple[int, int]:
    """Assign a form to groups. Re-assigning an existing pair is a no-op.

    Returns ``(assigned_count, newly_assigned)``.
    """
    if not group_ids:
        raise ValidationError("At least one group is required")

    get_owned_form(db, form_id, caller_id)
    group_ids = unique_ids(group_ids)
    check_groups_exist(db, group_ids)

    try:
        inserted = add_assignments(db, form_id, group_ids)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Form %s assigned to %d group(s) by %s (%d new)",
        form_id,
        len(group_ids),
        caller_id,
        inserted,
    )
    return len(group_ids), inserted


def list_assigned_group_ids(
    db: Session,
    form_id: uuid.UUID,
    caller_id: uuid.UUID,
) -> list[uuid.UUID]:
    get_owned_form(db, form_id, caller_id)
    return list(
        db.execute(
            select(FormAssignment.group_id)
            .where(FormAssignment.form_id == form_id)
            .order_by(FormAssignment.assigned_at)
        )
        .scalars()
        .all()
    )


def unassign_form(
    db: Session,
    form_id: uuid.UUID,
    caller_id: uuid.UUID,
    group_id: uuid.UUID,
) -> bool:
    """Remove one assignment. Returns False if the pair was not assigned."""
    get_owned_form(db, form_id, caller_id)
    result = db.execute(
        delete(FormAssignment).where(
            FormAssignment.form_id == form_id,
            FormAssignment.group_id == group_id,
        )
    )
    db.commit()

    removed = bool(result.rowcount)
    if removed:
        logger.info("Form %s unassigned from group %s by %s", form_id, group_id, caller_id)
    return removed
