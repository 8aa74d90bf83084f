"""Entity lookups shared by the form, group, assignment and response services."""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from rollcall.models.form import Form
from rollcall.models.group import Group
from rollcall.models.user import User
from rollcall.services.exceptions import ForbiddenError, NotFoundError, ValidationError


def get_form(db: Session, form_id: uuid.UUID) -> Form:
    form = db.get(Form, form_id)
    if form is None:
        raise NotFoundError("Form", form_id)
    return form


def get_owned_form(db: Session, form_id: uuid.UUID, caller_id: uuid.UUID) -> Form:
    """Return the form if ``caller_id`` created it, otherwise raise ForbiddenError."""
    form = get_form(db, form_id)
    if form.created_by != caller_id:
        raise ForbiddenError("You do not own this form")
    return form


def get_group(db: Session, group_id: uuid.UUID) -> Group:
    group = db.get(Group, group_id)
    if group is None:
        raise NotFoundError("Group", group_id)
    return group


def _missing_ids(db: Session, column, ids: list[uuid.UUID]) -> list[uuid.UUID]:
    wanted = set(ids)
    found = set(db.execute(select(column).where(column.in_(wanted))).scalars().all())
    return [i for i in ids if i not in found]


def check_users_exist(db: Session, user_ids: list[uuid.UUID]) -> None:
    missing = _missing_ids(db, User.id, user_ids)
    if missing:
        raise ValidationError(f"Unknown user ids: {', '.join(str(i) for i in missing)}")


def check_groups_exist(db: Session, group_ids: list[uuid.UUID]) -> None:
    missing = _missing_ids(db, Group.id, group_ids)
    if missing:
        raise ValidationError(f"Unknown group ids: {', '.join(str(i) for i in missing)}")


def unique_ids(ids: list[uuid.UUID]) -> list[uuid.UUID]:
    """Drop repeated ids, keeping first-seen order."""
    return list(dict.fromkeys(ids))
