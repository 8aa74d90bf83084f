"""Group registry: groups, memberships and the cached member count.

``Group.size`` is never incremented or decremented in place: every operation
that changes membership recounts ``group_members`` inside its own transaction.
"""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from rollcall.models.group import Group, GroupMember
from rollcall.schemas.groups import GroupCreate
from rollcall.services.exceptions import ConflictError, NotFoundError
from rollcall.services.lookups import check_users_exist, get_group, unique_ids

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def count_members(db: Session, group_id: uuid.UUID) -> int:
    return db.execute(
        select(func.count()).select_from(GroupMember).where(GroupMember.group_id == group_id)
    ).scalar_one()


def _recompute_size(db: Session, group: Group) -> None:
    """Flush pending membership changes and set ``size`` from a fresh count."""
    db.flush()
    group.size = count_members(db, group.id)


def _existing_member_ids(db: Session, group_id: uuid.UUID) -> set[uuid.UUID]:
    return set(
        db.execute(select(GroupMember.user_id).where(GroupMember.group_id == group_id)).scalars().all()
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def list_groups(
    db: Session,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Group], int]:
    """Return all groups, newest first."""
    total = db.execute(select(func.count()).select_from(Group)).scalar_one()
    offset = (page - 1) * page_size
    groups = (
        db.execute(select(Group).order_by(Group.created_at.desc()).offset(offset).limit(page_size))
        .scalars()
        .all()
    )
    return list(groups), total


def get_group_detail(db: Session, group_id: uuid.UUID) -> Group:
    group = db.execute(
        select(Group).where(Group.id == group_id).options(selectinload(Group.members))
    ).scalar_one_or_none()
    if group is None:
        raise NotFoundError("Group", group_id)
    return group


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def create_group(db: Session, owner_id: uuid.UUID, payload: GroupCreate) -> Group:
    """Create a group with its initial members in a single transaction."""
    member_ids = unique_ids(payload.user_ids)
    if member_ids:
        check_users_exist(db, member_ids)

    group = Group(
        name=payload.name,
        description=payload.description,
        created_by=owner_id,
        size=len(member_ids),
    )
    try:
        db.add(group)
        db.flush()
        for user_id in member_ids:
            db.add(GroupMember(group_id=group.id, user_id=user_id, role="MEMBER"))
        _recompute_size(db, group)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(group)
    logger.info("Group %s created by %s with %d member(s)", group.id, owner_id, group.size)
    return group


def add_members(
    db: Session,
    group_id: uuid.UUID,
    user_ids: list[uuid.UUID],
    role: str = "MEMBER",
) -> tuple[int, Group]:
    """Add the users that are not members yet.

    Raises ConflictError when every requested user already belongs to the
    group. Returns ``(added, group)``.
    """
    group = get_group(db, group_id)
    requested = unique_ids(user_ids)
    check_users_exist(db, requested)

    existing = _existing_member_ids(db, group_id)
    new_ids = [user_id for user_id in requested if user_id not in existing]
    if not new_ids:
        logger.warning("No new members to add to group %s", group_id)
        raise ConflictError("All users are already members of this group")

    try:
        for user_id in new_ids:
            db.add(GroupMember(group_id=group_id, user_id=user_id, role=role))
        _recompute_size(db, group)
        db.commit()
    except IntegrityError:
        # A concurrent request added one of these users first.
        db.rollback()
        logger.warning("Concurrent membership change on group %s", group_id)
        raise ConflictError("Some users were added to this group concurrently; retry") from None
    except Exception:
        db.rollback()
        raise

    db.refresh(group)
    logger.info("Added %d member(s) to group %s (size=%d)", len(new_ids), group_id, group.size)
    return len(new_ids), group


def remove_member(db: Session, group_id: uuid.UUID, user_id: uuid.UUID) -> Group:
    """Remove a user from a group. Removing a non-member is a no-op."""
    group = get_group(db, group_id)

    try:
        member = db.get(GroupMember, (group_id, user_id))
        if member is not None:
            db.delete(member)
        _recompute_size(db, group)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(group)
    if member is not None:
        logger.info("Removed user %s from group %s (size=%d)", user_id, group_id, group.size)
    return group
