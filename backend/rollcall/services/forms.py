"""Form catalog: form structure CRUD with owner-only mutation."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from rollcall.core.database import utcnow
from rollcall.models.form import Form, FormQuestion, FormSection
from rollcall.models.form_response import FormResponse
from rollcall.schemas.forms import FormContentReplace, FormCreate, SectionIn
from rollcall.services.assignments import add_assignments
from rollcall.services.exceptions import NotFoundError
from rollcall.services.lookups import check_groups_exist, get_owned_form

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def ordered_questions(form: Form) -> list[FormQuestion]:
    """All questions of a form in display order (section order, then question order)."""
    return [question for section in form.sections for question in section.questions]


def _build_section(index: int, payload: SectionIn) -> FormSection:
    section = FormSection(
        title=payload.title,
        description=payload.description,
        config=payload.config,
        order=index + 1,
    )
    for q_index, question in enumerate(payload.questions):
        section.questions.append(
            FormQuestion(
                question_text=question.question_text,
                question_description=question.question_description,
                type=question.type,
                required=question.required,
                config=question.config.model_dump(exclude_none=True),
                order=q_index + 1,
            )
        )
    return section


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def create_form(db: Session, owner_id: uuid.UUID, payload: FormCreate) -> Form:
    """Create a form with no sections, owned by ``owner_id``."""
    form = Form(
        title=payload.title,
        description=payload.description,
        config=payload.config,
        metadata_=payload.metadata,
        deadline=payload.deadline,
        created_by=owner_id,
    )
    db.add(form)
    db.commit()
    db.refresh(form)

    logger.info("Form %s created by %s", form.id, owner_id)
    return form


def get_form_detail(db: Session, form_id: uuid.UUID) -> tuple[Form, int]:
    """Return a form with its sections and questions loaded, plus its response count."""
    form = db.execute(
        select(Form)
        .where(Form.id == form_id)
        .options(selectinload(Form.sections).selectinload(FormSection.questions))
    ).scalar_one_or_none()
    if form is None:
        raise NotFoundError("Form", form_id)

    response_count = db.execute(
        select(func.count()).select_from(FormResponse).where(FormResponse.form_id == form.id)
    ).scalar_one()
    return form, response_count


def list_forms(
    db: Session,
    owner_id: uuid.UUID,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Form], int]:
    """Return the caller's own forms, most recently updated first."""
    count_query = select(func.count()).select_from(Form).where(Form.created_by == owner_id)
    total = db.execute(count_query).scalar_one()

    offset = (page - 1) * page_size
    forms = (
        db.execute(
            select(Form)
            .where(Form.created_by == owner_id)
            .order_by(Form.updated_at.desc())
            .offset(offset)
            .limit(page_size)
        )
        .scalars()
        .all()
    )
    return list(forms), total


def replace_form_content(
    db: Session,
    form_id: uuid.UUID,
    caller_id: uuid.UUID,
    payload: FormContentReplace,
) -> Form:
    """Update form metadata and, when sections are given, replace the whole structure.

    Runs as one transaction: metadata, the old sections' removal, the new
    sections/questions and any group assignments commit together or not at all.
    """
    form = get_owned_form(db, form_id, caller_id)
    if payload.group_ids:
        check_groups_exist(db, payload.group_ids)

    meta = payload.form_meta
    try:
        form.title = meta.title
        form.description = meta.description
        form.config = meta.config
        form.metadata_ = meta.metadata
        form.deadline = meta.deadline
        form.updated_at = utcnow()

        if payload.sections:
            # Old rows must be gone before new ones claim the same order values.
            form.sections.clear()
            db.flush()
            for index, section in enumerate(payload.sections):
                form.sections.append(_build_section(index, section))

        if payload.group_ids:
            add_assignments(db, form.id, payload.group_ids)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(form)
    logger.info(
        "Form %s content replaced by %s (sections=%d)",
        form.id,
        caller_id,
        len(payload.sections or []),
    )
    return form


def delete_form(db: Session, form_id: uuid.UUID, caller_id: uuid.UUID) -> None:
    """Delete a form along with its sections, questions, assignments and responses."""
    form = get_owned_form(db, form_id, caller_id)
    db.delete(form)
    db.commit()
    logger.info("Form %s deleted by %s", form_id, caller_id)
